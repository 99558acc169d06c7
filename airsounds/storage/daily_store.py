"""Per-day JSON files of normalized records, keyed by hour and location.

Layout: <data_dir>/YYYY/MM/DD.json (local date) holding
{"<hour>": {"<location>": {"ims": ..., "noaa": ..., "uwyo": ...}}}.
"""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from airsounds.models.common import Source

logger = logging.getLogger(__name__)


class DailyStore:
    def __init__(self, data_dir: str | Path, tz: ZoneInfo):
        self.data_dir = Path(data_dir)
        self.tz = tz

    def output_path(self, when: datetime) -> Path:
        return self.data_dir / f"{when.astimezone(self.tz):%Y/%m/%d}.json"

    def add(
        self, when: datetime, location: str, source: Source, record: dict[str, Any]
    ) -> Path:
        """Merge one record into its day file and return the file path.

        Other sources already stored for the same hour and location are kept.
        """
        path = self.output_path(when)
        content = read_json(path, default={})
        hour = str(when.astimezone(UTC).hour)
        slots = content.setdefault(hour, {})
        slot = slots.get(location) or {s.value: None for s in Source}
        slot[source.value] = record
        slots[location] = slot
        write_json(path, content)
        logger.debug("Wrote %s record for %s to %s", source, location, path)
        return path

    def load(self, when: datetime) -> dict[str, Any]:
        return read_json(self.output_path(when), default={})


def read_json(path: Path, default: Any) -> Any:
    """Read a JSON file, returning default when it does not exist yet."""
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError:
        return default


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=1)
        f.write("\n")
