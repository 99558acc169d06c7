"""Pydantic v2 configuration schema with strict validation."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from airsounds.ingest.http import DEFAULT_USER_AGENT
from airsounds.ingest.ims_client import IMS_API_URL, IMS_FORECAST_URL
from airsounds.ingest.levels import Tokenizer
from airsounds.ingest.noaa_client import NOAA_SOUNDINGS_URL
from airsounds.ingest.units import ZONE_OFFSETS_HOURS
from airsounds.ingest.uwyo_client import UWYO_SOUNDING_URL


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str
    lat: float = Field(ge=-90.0, le=90.0)
    long: float = Field(ge=-180.0, le=180.0)
    alt: int
    uwyo_station: int
    # Name of the matching location in the IMS forecast feed.
    ims_name: str = ""


class ImsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    forecast_url: str = IMS_FORECAST_URL
    api_url: str = IMS_API_URL
    api_token: str = Field(default="", repr=False)
    # IMS labels local times as UTC; this is the zone they are really in.
    true_zone: str = "IDT"

    @field_validator("true_zone")
    @classmethod
    def _known_zone(cls, v: str) -> str:
        if v.upper() not in ZONE_OFFSETS_HOURS:
            raise ValueError(f"unknown zone abbreviation: {v}")
        return v.upper()


class NoaaConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = NOAA_SOUNDINGS_URL
    data_source: str = "GFS"
    forecast_days: int = Field(default=4, ge=1, le=16)


class UwyoConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = UWYO_SOUNDING_URL
    region: str = "mideast"
    tokenizer: Tokenizer = Tokenizer.WHITESPACE


class HttpConfig(BaseModel):
    model_config = {"extra": "forbid"}

    timeout: float = Field(default=30.0, gt=0.0)
    user_agent: str = DEFAULT_USER_AGENT


class PublishConfig(BaseModel):
    model_config = {"extra": "forbid"}

    enabled: bool = False
    author_name: str = "Forecast Bot"
    author_email: str = "bot@airsounds.github.io"
    message: str = "Update forecast data"


class AirsoundsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    timezone: str = "Asia/Jerusalem"
    data_dir: str = "./"
    ims: ImsConfig = ImsConfig()
    noaa: NoaaConfig = NoaaConfig()
    uwyo: UwyoConfig = UwyoConfig()
    http: HttpConfig = HttpConfig()
    publish: PublishConfig = PublishConfig()
    locations: list[LocationConfig] = []

    @field_validator("timezone")
    @classmethod
    def _valid_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone: {v}") from None
        return v

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)
