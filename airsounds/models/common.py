"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import TypeAlias

Number: TypeAlias = int | float


class Source(StrEnum):
    IMS = "ims"
    NOAA = "noaa"
    UWYO = "uwyo"


def utc_now() -> datetime:
    return datetime.now(UTC)


def isoformat(dt: datetime) -> str:
    return dt.isoformat()
