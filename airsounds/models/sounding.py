"""Vertical atmospheric profile (sounding) models."""

from dataclasses import dataclass, field
from datetime import datetime

from airsounds.models.common import Number, isoformat


@dataclass(frozen=True)
class VerticalProfile:
    """One sounding at a single valid time.

    pressure/height/temperature/dew_point share one length (reported levels);
    wind_direction/wind_speed share another, usually shorter, because wind is
    only reported at a subset of levels.
    """

    time: datetime
    station: int | None = None
    # Pressure in hPa
    pressure: tuple[int, ...] = ()
    # Height in feet
    height: tuple[int, ...] = ()
    # Temp in deg C
    temperature: tuple[Number, ...] = ()
    # Dew point in deg C
    dew_point: tuple[Number, ...] = ()
    # Wind direction in degrees
    wind_direction: tuple[int, ...] = ()
    # Wind speed in knots
    wind_speed: tuple[int, ...] = ()

    @property
    def level_count(self) -> int:
        return len(self.pressure)

    @property
    def wind_level_count(self) -> int:
        return len(self.wind_direction)

    def to_dict(self) -> dict:
        return {
            "Time": isoformat(self.time),
            "Station": self.station,
            "Pressure": list(self.pressure),
            "Height": list(self.height),
            "Temp": list(self.temperature),
            "Dew": list(self.dew_point),
            "WindDir": list(self.wind_direction),
            "WindSpeed": list(self.wind_speed),
        }


@dataclass
class ProfileBuilder:
    """Accumulates level rows for one report section before freezing it."""

    time: datetime
    station: int | None = None
    pressure: list[int] = field(default_factory=list)
    height: list[int] = field(default_factory=list)
    temperature: list[Number] = field(default_factory=list)
    dew_point: list[Number] = field(default_factory=list)
    wind_direction: list[int] = field(default_factory=list)
    wind_speed: list[int] = field(default_factory=list)

    def build(self) -> VerticalProfile:
        return VerticalProfile(
            time=self.time,
            station=self.station,
            pressure=tuple(self.pressure),
            height=tuple(self.height),
            temperature=tuple(self.temperature),
            dew_point=tuple(self.dew_point),
            wind_direction=tuple(self.wind_direction),
            wind_speed=tuple(self.wind_speed),
        )
