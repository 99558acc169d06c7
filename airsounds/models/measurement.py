"""IMS station measurement models."""

from dataclasses import dataclass
from datetime import datetime

from airsounds.models.common import isoformat


@dataclass(frozen=True)
class Measurement:
    time: datetime
    ground_temp: float = 0.0
    dry_temp: float = 0.0
    relative_humidity: float = 0.0
    wind_direction: float = 0.0
    wind_speed: float = 0.0

    def to_dict(self) -> dict:
        return {
            "Time": isoformat(self.time),
            "GroundTemp": self.ground_temp,
            "DryTemp": self.dry_temp,
            "RelHumid": self.relative_humidity,
            "WindDir": self.wind_direction,
            "WindSpeed": self.wind_speed,
        }
