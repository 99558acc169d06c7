"""CLI entry point for the sounding and forecast updater."""

import argparse
import json
import logging
from datetime import date

from pydantic import BaseModel

from airsounds.config.loader import get_config_value, load_config
from airsounds.config.schema import ImsConfig
from airsounds.errors import AirsoundsError
from airsounds.ingest.ims_client import ImsClient, measure
from airsounds.models.common import Source
from airsounds.pipeline.update_pipeline import UpdatePipeline
from airsounds.publish.git_publisher import GitPublisher, is_ci

DEFAULT_CONFIG = "airsounds.yaml"

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="airsounds",
        description="Fetch and normalize forecasts and atmospheric soundings",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--data-dir", help="Override the data directory")

    sub = parser.add_subparsers(dest="command")

    # update
    update_p = sub.add_parser("update", help="Fetch sources and update data files")
    update_p.add_argument(
        "--source",
        choices=[s.value for s in Source],
        help="Which source to update (default: all)",
    )
    update_p.add_argument(
        "--publish", action="store_true", help="Commit and push changed files"
    )

    # measure
    measure_p = sub.add_parser("measure", help="Print IMS station measurements")
    measure_p.add_argument("--station", type=int, required=True)
    measure_p.add_argument(
        "--date", type=date.fromisoformat, required=True, help="YYYY-MM-DD"
    )

    # config show
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Display one config value")
    get_p.add_argument("key", help="Dotted key, e.g. noaa.forecast_days")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.data_dir:
        config = config.model_copy(update={"data_dir": args.data_dir})

    try:
        if args.command == "update":
            return _cmd_update(config, args)
        elif args.command == "measure":
            return _cmd_measure(config, args)
        elif args.command == "config":
            return _cmd_config(config, args)
    except AirsoundsError as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    parser.print_help()
    return 1


def _cmd_update(config, args) -> int:
    source = Source(args.source) if args.source else None
    modified = UpdatePipeline(config).run(source)
    print(f"Updated {len(modified)} files")
    if args.publish or config.publish.enabled or is_ci():
        publisher = GitPublisher(
            author_name=config.publish.author_name,
            author_email=config.publish.author_email,
            message=config.publish.message,
        )
        publisher.publish([p.resolve() for p in modified])
    return 0


def _cmd_measure(config, args) -> int:
    client = ImsClient(
        api_url=config.ims.api_url,
        api_token=config.ims.api_token,
        user_agent=config.http.user_agent,
        timeout=config.http.timeout,
    )
    measurements = measure(client, args.station, args.date)
    print(json.dumps([m.to_dict() for m in measurements], indent=1))
    return 0


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2, exclude={"ims": {"api_token"}}))
        return 0
    elif args.config_command == "get":
        key = args.key.strip()
        if key == "ims.api_token":
            print("Error: ims.api_token is not displayed")
            return 1
        try:
            value = get_config_value(config, key)
        except (KeyError, IndexError, ValueError) as e:
            print(f"Error: {e}")
            return 1
        if isinstance(value, ImsConfig):
            value = value.model_dump(exclude={"api_token"})
        print(json.dumps(_jsonable(value), indent=2))
        return 0
    print("Use: config show | config get KEY")
    return 1


def _jsonable(value):
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value
