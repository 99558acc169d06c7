"""Parser for NOAA GSD-format ASCII soundings, with hourly gap interpolation.

Valid output is in the format:

    GFS 09 h forecast valid for grid point 13.1 nm / 243 deg from 32.6,35.23:
    GFS         21      19      Jun    2020
       CAPE    231    CIN     -7  Helic  99999     PW     27
          1  23062  99999  32.50 -35.00  99999  99999
          2  99999  99999  99999     35  99999  99999
          3           32.6,35.23            12     kt
          9  10000     77    225    181    260      9
          4   9750    297    209    171    265     13
"""

import logging
import re
from datetime import UTC, datetime, timedelta

from airsounds.errors import InternalError, ParseError
from airsounds.ingest.levels import GSD_LAYOUT, PROFILE_FIELDS, append_row
from airsounds.models.common import Number
from airsounds.models.sounding import ProfileBuilder, VerticalProfile

logger = logging.getLogger(__name__)

# GFS analysis valid for grid point 13.1 nm / 243 deg from 32.6,35.23:
_SECTION_HEADER = re.compile(r"^\S+ .* for grid point")
# GFS         0      20      Jun    2020
_TIME_HEADER = re.compile(r"^\S+\s+(\d+)\s+(\d+)\s+(\w+)\s+(\d+)\s*$")

# CAPE line, station rows 1 and 2, coordinates row 3.
BOILERPLATE_LINES = 4
HOUR = timedelta(hours=1)


def parse_soundings(data: bytes, interpolate: bool = True) -> list[VerticalProfile]:
    """Parse every forecast section in a GSD text report.

    Sections must arrive sorted by valid time. When interpolate is set, the
    hourly gaps between sections are filled in.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError("sounding report is not text", str(e)) from e

    lines = iter(text.splitlines())
    builders: list[ProfileBuilder] = []
    for line in lines:
        if not line.strip():
            continue
        if _SECTION_HEADER.match(line):
            t = parse_time_line(next(lines, ""))
            logger.info("Found forecast for time: %s", t.isoformat())
            builders.append(ProfileBuilder(time=t))
            for _ in range(BOILERPLATE_LINES):
                next(lines, None)
            continue
        if not builders:
            continue
        # Rows belong to the most recent section.
        append_row(builders[-1], line, GSD_LAYOUT)

    profiles = [b.build() for b in builders]
    if interpolate:
        profiles = interpolate_missing_hours(profiles)
    return profiles


def parse_time_line(line: str) -> datetime:
    m = _TIME_HEADER.match(line.strip())
    if m is None:
        raise ParseError("failed parsing time header", line)
    try:
        t = datetime.strptime(" ".join(m.groups()), "%H %d %b %Y")
    except ValueError:
        raise ParseError("failed parsing time header", line) from None
    return t.replace(tzinfo=UTC)


def interpolate_missing_hours(profiles: list[VerticalProfile]) -> list[VerticalProfile]:
    """Insert one synthetic profile per missing hour between adjacent profiles.

    The interpolation fraction uses the hour-of-day component only, not the
    elapsed time, so pairs that straddle midnight get a negative fraction.
    """
    if not profiles:
        return []
    out = [profiles[0]]
    for nxt in profiles[1:]:
        first = out[-1]
        t = first.time + HOUR
        while t < nxt.time:
            out.append(_interpolate_profile(first, nxt, t))
            t += HOUR
        out.append(nxt)
    return out


def _interpolate_profile(
    first: VerticalProfile, nxt: VerticalProfile, t: datetime
) -> VerticalProfile:
    span = nxt.time.hour - first.time.hour
    if span == 0:
        raise InternalError(
            f"zero hour-of-day span between {first.time.isoformat()} "
            f"and {nxt.time.isoformat()}"
        )
    r = (t.hour - first.time.hour) / span
    values = {
        name: _interpolate(name, r, getattr(first, name), getattr(nxt, name))
        for name in PROFILE_FIELDS
    }
    return VerticalProfile(time=t, station=first.station, **values)


def _interpolate(
    name: str, r: float, x1: tuple[Number, ...], x2: tuple[Number, ...]
) -> tuple[Number, ...]:
    if len(x1) != len(x2):
        raise InternalError(
            f"cannot interpolate {name}: {len(x1)} levels vs {len(x2)} levels"
        )
    return tuple(a + int(r * (b - a)) for a, b in zip(x1, x2))
