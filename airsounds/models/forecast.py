"""IMS hourly surface forecast models."""

from dataclasses import dataclass
from datetime import datetime

from airsounds.models.common import isoformat


@dataclass(frozen=True)
class HourlyForecast:
    time: datetime
    temperature: float
    relative_humidity: float
    wind_speed: float
    wind_direction: float

    def to_dict(self) -> dict:
        return {
            "Time": isoformat(self.time),
            "Temp": self.temperature,
            "RelHum": self.relative_humidity,
            "WindSpeed": self.wind_speed,
            "WindDir": self.wind_direction,
        }


@dataclass(frozen=True)
class SurfaceForecast:
    name: str
    latitude: float
    longitude: float
    elevation: float
    hourly: tuple[HourlyForecast, ...]
