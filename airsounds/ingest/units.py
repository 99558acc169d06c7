"""Scalar unit conversions and upstream timestamp normalization."""

import math
from datetime import UTC, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from airsounds.errors import ParseError

FEET_PER_METER = 3.28084

# Fixed offsets for the zone abbreviations the IMS feed may need repaired into.
ZONE_OFFSETS_HOURS = {
    "UTC": 0,
    "GMT": 0,
    "IST": 2,  # Israel Standard Time
    "IDT": 3,  # Israel Daylight Time
    "EET": 2,
    "EEST": 3,
}

IMS_TIME_FORMAT = "%d/%m/%Y %H:%M"
SOUNDING_HEADER_FORMAT = "%HZ %d %b %Y"


def convert_length(meters: float) -> float:
    """Convert meters to feet."""
    return meters * FEET_PER_METER


def _to_number(raw: str | float | int) -> float:
    if isinstance(raw, str):
        raw = raw.strip()
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ParseError("not a number", raw) from None
    if not math.isfinite(value):
        raise ParseError("not a finite number", raw)
    return value


def scale_to_int(raw: str | float | int, scale: float) -> int:
    """Multiply a numeric token by scale and truncate toward zero.

    >>> scale_to_int("115", 0.1)
    11
    >>> scale_to_int("100", FEET_PER_METER)
    328
    """
    return int(_to_number(raw) * scale)


def scale_to_float(raw: str | float | int, scale: float = 1.0) -> float:
    """Multiply a numeric token by scale, keeping the fractional part."""
    return _to_number(raw) * scale


def repair_mislabeled_zone(raw: str, true_zone: str = "IDT") -> datetime:
    """Parse an IMS forecast timestamp and return it in UTC.

    IMS timestamps look like "20/2/2022 18:00 UTC", but the trailing zone is a
    placeholder: the wall-clock time is actually in ``true_zone``. The last
    three characters are replaced before parsing.
    """
    if not isinstance(raw, str) or len(raw.strip()) <= 3:
        raise ParseError("malformed forecast timestamp", raw)
    offset = ZONE_OFFSETS_HOURS.get(true_zone.upper())
    if offset is None:
        raise ParseError("unknown zone abbreviation", true_zone)

    text = raw.strip()
    local_text = text[:-3].strip()
    try:
        naive = datetime.strptime(local_text, IMS_TIME_FORMAT)
    except ValueError:
        raise ParseError("malformed forecast timestamp", raw) from None

    zone = timezone(timedelta(hours=offset), true_zone.upper())
    return naive.replace(tzinfo=zone).astimezone(UTC)


def parse_zoned_header(text: str, reference_zone: str = "Asia/Jerusalem") -> datetime:
    """Parse the valid time out of a sounding heading and return it in UTC.

    Headings read like "40179 Bet Dagan Observations at 00Z 20 Feb 2022"; only
    the part after " at " is a timestamp, read as wall-clock time in
    ``reference_zone``.
    """
    i = text.find(" at ")
    if i == -1:
        raise ParseError("didn't find ' at ' in heading", text)
    stamp = text[i + 4 :].strip()
    try:
        naive = datetime.strptime(stamp, SOUNDING_HEADER_FORMAT)
    except ValueError:
        raise ParseError("malformed heading timestamp", stamp) from None
    return naive.replace(tzinfo=ZoneInfo(reference_zone)).astimezone(UTC)
