"""YAML config loader with environment overrides and dotted-key lookup."""

import os
from pathlib import Path
from typing import Any

import yaml

from airsounds.config.defaults import DEFAULT_LOCATIONS
from airsounds.config.schema import AirsoundsConfig

IMS_TOKEN_ENV = "IMS_API_TOKEN"


def load_config(path: str | Path | None = None) -> AirsoundsConfig:
    """Load and validate config from a YAML file.

    A missing file yields the defaults. If no locations are specified,
    DEFAULT_LOCATIONS are injected. An empty IMS token is taken from the
    IMS_API_TOKEN environment variable.
    """
    raw: dict[str, Any] = {}
    if path is not None and Path(path).exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    if "locations" not in raw or not raw["locations"]:
        raw["locations"] = [c.model_dump() for c in DEFAULT_LOCATIONS]

    token = os.environ.get(IMS_TOKEN_ENV)
    if token:
        ims = raw.setdefault("ims", {}) or {}
        if not ims.get("api_token"):
            ims["api_token"] = token
        raw["ims"] = ims

    return AirsoundsConfig(**raw)


def get_config_value(config: AirsoundsConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'noaa.forecast_days'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
