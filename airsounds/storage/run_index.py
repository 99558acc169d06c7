"""Run index: per-source first/last valid times and last-update marks."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from airsounds.models.common import Source
from airsounds.storage.daily_store import read_json, write_json

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.json"
KEY_PREFIX = {Source.NOAA: "Noaa", Source.IMS: "IMS", Source.UWYO: "UWYO"}
# Written by older runs for "never set".
_ZERO_TIME = "0001-01-01T00:00:00Z"


class RunIndex:
    def __init__(self, path: str | Path, tz: ZoneInfo, data: dict[str, Any] | None = None):
        self.path = Path(path)
        self.tz = tz
        self.data: dict[str, Any] = data or {}

    @classmethod
    def load(cls, data_dir: str | Path, tz: ZoneInfo) -> "RunIndex":
        path = Path(data_dir) / INDEX_FILENAME
        return cls(path, tz, read_json(path, default={}))

    def get(self, key: str) -> datetime | None:
        value = self.data.get(key)
        if not value or value == _ZERO_TIME:
            return None
        return datetime.fromisoformat(value)

    def _set(self, key: str, value: datetime) -> None:
        self.data[key] = value.astimezone(self.tz).isoformat()

    def start(self, source: Source) -> datetime | None:
        return self.get(f"{KEY_PREFIX[source]}Start")

    def end(self, source: Source) -> datetime | None:
        return self.get(f"{KEY_PREFIX[source]}End")

    def last_update(self, source: Source) -> datetime | None:
        return self.get(f"{KEY_PREFIX[source]}LastUpdate")

    def extend(self, source: Source, when: datetime) -> None:
        """Widen the source's [start, end] range to include when."""
        start = self.start(source)
        end = self.end(source)
        if start is None or when < start:
            self._set(f"{KEY_PREFIX[source]}Start", when)
        if end is None or when > end:
            self._set(f"{KEY_PREFIX[source]}End", when)

    def mark_updated(self, source: Source, now: datetime) -> None:
        self._set(f"{KEY_PREFIX[source]}LastUpdate", now)

    def set_locations(self, locations: list[dict[str, Any]]) -> None:
        self.data["Locations"] = locations

    def save(self) -> Path:
        write_json(self.path, self.data)
        logger.info("Wrote index %s", self.path)
        return self.path
