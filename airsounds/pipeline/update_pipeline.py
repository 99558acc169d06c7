"""Update pipeline: fetch each source, normalize, and merge into the day files."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

from airsounds.config.schema import AirsoundsConfig
from airsounds.ingest.ims_client import ImsClient
from airsounds.ingest.ims_forecast import decode_forecasts
from airsounds.ingest.noaa_client import NoaaClient
from airsounds.ingest.noaa_sounding import parse_soundings
from airsounds.ingest.uwyo_client import UwyoClient
from airsounds.ingest.uwyo_table import parse_sounding_page
from airsounds.models.common import Source, utc_now
from airsounds.storage.daily_store import DailyStore
from airsounds.storage.run_index import RunIndex

logger = logging.getLogger(__name__)


@dataclass
class UpdateResult:
    source: Source
    paths: list[Path] = field(default_factory=list)
    records: int = 0
    skipped: list[str] = field(default_factory=list)


class UpdatePipeline:
    def __init__(
        self,
        config: AirsoundsConfig,
        ims: ImsClient | None = None,
        noaa: NoaaClient | None = None,
        uwyo: UwyoClient | None = None,
        now: datetime | None = None,
    ):
        self.config = config
        http = config.http
        self.ims = ims or ImsClient(
            forecast_url=config.ims.forecast_url,
            api_url=config.ims.api_url,
            api_token=config.ims.api_token,
            user_agent=http.user_agent,
            timeout=http.timeout,
        )
        self.noaa = noaa or NoaaClient(
            base_url=config.noaa.base_url,
            data_source=config.noaa.data_source,
            user_agent=http.user_agent,
            timeout=http.timeout,
        )
        self.uwyo = uwyo or UwyoClient(
            base_url=config.uwyo.base_url,
            region=config.uwyo.region,
            user_agent=http.user_agent,
            timeout=http.timeout,
        )
        self.now = now or utc_now()
        self.store = DailyStore(config.data_dir, config.tz)
        self.index = RunIndex.load(config.data_dir, config.tz)

    def run(self, source: Source | None = None) -> list[Path]:
        """Update one source, or all of them. Returns the modified file paths."""
        self.index.set_locations(
            [loc.model_dump(exclude={"ims_name"}) for loc in self.config.locations]
        )

        results: list[UpdateResult] = []
        if source in (None, Source.NOAA):
            results.append(self.run_noaa())
        if source in (None, Source.IMS):
            results.append(self.run_ims())
        if source in (None, Source.UWYO):
            results.append(self.run_uwyo())

        index_path = self.index.save()
        modified = list(dict.fromkeys(p for r in results for p in r.paths))
        if modified:
            modified.append(index_path)
        for r in results:
            logger.info(
                "%s: %d records, %d files, %d skipped",
                r.source, r.records, len(set(r.paths)), len(r.skipped),
            )
        return modified

    def run_noaa(self) -> UpdateResult:
        result = UpdateResult(Source.NOAA)
        start = self.now.astimezone(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=self.config.noaa.forecast_days)
        for loc in self.config.locations:
            data = self.noaa.get_soundings(start, end, loc.lat, loc.long)
            for profile in parse_soundings(data):
                path = self.store.add(profile.time, loc.name, Source.NOAA, profile.to_dict())
                self._record(result, path, profile.time)
            logger.info("Wrote NOAA forecast for %s", loc.name)
        self.index.mark_updated(Source.NOAA, self.now)
        return result

    def run_ims(self) -> UpdateResult:
        result = UpdateResult(Source.IMS)
        names = {loc.ims_name: loc.name for loc in self.config.locations if loc.ims_name}
        forecasts = decode_forecasts(self.ims.get_forecast(), self.config.ims.true_zone)
        for forecast in forecasts:
            location = names.get(forecast.name)
            if location is None:
                logger.info("Skipping unmapped location: %r", forecast.name)
                result.skipped.append(forecast.name)
                continue
            for hourly in forecast.hourly:
                path = self.store.add(hourly.time, location, Source.IMS, hourly.to_dict())
                self._record(result, path, hourly.time)
            logger.info("Wrote IMS forecast for %s", location)
        self.index.mark_updated(Source.IMS, self.now)
        return result

    def run_uwyo(self) -> UpdateResult:
        result = UpdateResult(Source.UWYO)
        stations = sorted({loc.uwyo_station for loc in self.config.locations})
        for station in stations:
            data = self.uwyo.get_sounding(station, self.now.astimezone(self.config.tz))
            profiles = parse_sounding_page(
                data,
                reference_zone=self.config.timezone,
                tokenizer=self.config.uwyo.tokenizer,
                station=station,
            )
            for profile in profiles:
                path = self.store.add(
                    profile.time, str(station), Source.UWYO, profile.to_dict()
                )
                self._record(result, path, profile.time)
            logger.info("Wrote %d UWYO tables for station %d", len(profiles), station)
        self.index.mark_updated(Source.UWYO, self.now)
        return result

    def _record(self, result: UpdateResult, path: Path, when: datetime) -> None:
        result.paths.append(path)
        result.records += 1
        self.index.extend(result.source, when)
