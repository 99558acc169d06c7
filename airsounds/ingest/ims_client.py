"""IMS clients: hourly forecast XML and Envista station measurements."""

import logging
from datetime import date

from airsounds.errors import FetchError
from airsounds.ingest.http import DEFAULT_USER_AGENT, fetch_bytes
from airsounds.ingest.ims_forecast import decode_forecasts
from airsounds.ingest.ims_measure import decode_measurements
from airsounds.models.forecast import SurfaceForecast
from airsounds.models.measurement import Measurement

logger = logging.getLogger(__name__)

IMS_FORECAST_URL = (
    "https://ims.gov.il/sites/default/files/ims_data/xml_files/IMS_001.xml"
)
IMS_API_URL = "https://api.ims.gov.il/v1/envista"


class ImsClient:
    def __init__(
        self,
        forecast_url: str = IMS_FORECAST_URL,
        api_url: str = IMS_API_URL,
        api_token: str = "",
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
    ):
        self.forecast_url = forecast_url
        self.api_url = api_url
        self.api_token = api_token
        self.user_agent = user_agent
        self.timeout = timeout

    def get_forecast(self) -> bytes:
        """Fetch the hourly locations forecast document."""
        return fetch_bytes(
            self.forecast_url,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
        )

    def measurements_url(self, station: int, day: date) -> str:
        return f"{self.api_url}/stations/{station}/data/daily/{day:%Y/%m/%d}"

    def get_measurements(self, station: int, day: date) -> bytes:
        """Fetch one day of measurements for an Envista station."""
        if not self.api_token:
            raise FetchError("IMS API token not set")
        url = self.measurements_url(station, day)
        logger.info("Request URL: %s", url)
        return fetch_bytes(
            url,
            headers={
                "Authorization": f"ApiToken {self.api_token}",
                "User-Agent": self.user_agent,
            },
            timeout=self.timeout,
        )


def predict(client: ImsClient, true_zone: str = "IDT") -> list[SurfaceForecast]:
    return decode_forecasts(client.get_forecast(), true_zone)


def measure(client: ImsClient, station: int, day: date) -> list[Measurement]:
    return decode_measurements(client.get_measurements(station, day))
