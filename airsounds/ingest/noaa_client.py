"""NOAA RUC soundings client (GSD ASCII text)."""

import logging
from datetime import UTC, datetime, timedelta

from airsounds.ingest.http import DEFAULT_USER_AGENT, fetch_bytes
from airsounds.ingest.noaa_sounding import parse_soundings
from airsounds.models.sounding import VerticalProfile

logger = logging.getLogger(__name__)

NOAA_SOUNDINGS_URL = "https://rucsoundings.noaa.gov/get_soundings.cgi"
# Soundings are only available every 3 hours.
STEP_SECONDS = 3 * 3600


def truncate_to_step(t: datetime, step_seconds: int = STEP_SECONDS) -> datetime:
    """Round an instant down to a multiple of step_seconds, in UTC."""
    ts = int(t.astimezone(UTC).timestamp())
    return datetime.fromtimestamp(ts - ts % step_seconds, UTC)


class NoaaClient:
    def __init__(
        self,
        base_url: str = NOAA_SOUNDINGS_URL,
        data_source: str = "GFS",
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
    ):
        self.base_url = base_url
        self.data_source = data_source
        self.user_agent = user_agent
        self.timeout = timeout

    def build_params(
        self, start: datetime, end: datetime, lat: float, long: float
    ) -> dict[str, str]:
        start = truncate_to_step(start)
        end = truncate_to_step(end)
        return {
            "data_source": self.data_source,
            "start_year": str(start.year),
            "start_month_name": start.strftime("%B"),
            "start_mday": str(start.day),
            "start_hour": "0",
            "start_min": "0",
            "n_hrs": "1.0",
            "fcst_len": "shortest",
            "airport": f"{lat},{long}",
            "text": "Ascii text (GSD format)",
            "hydrometeors": "false",
            "startSecs": str(int(start.timestamp())),
            "endSecs": str(int(end.timestamp())),
        }

    def get_soundings(
        self, start: datetime, end: datetime, lat: float, long: float
    ) -> bytes:
        """Fetch the raw GSD report covering [start, end] for a grid point."""
        params = self.build_params(start, end, lat, long)
        logger.info("Fetching NOAA soundings for %s,%s", lat, long)
        return fetch_bytes(
            self.base_url,
            params=params,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
        )

    def get_date(self, date: datetime, lat: float, long: float) -> bytes:
        """Fetch the whole UTC day containing date."""
        start = truncate_to_step(date, 24 * 3600)
        return self.get_soundings(start, start + timedelta(days=1), lat, long)


def fetch_profiles(
    client: NoaaClient, start: datetime, end: datetime, lat: float, long: float
) -> list[VerticalProfile]:
    """Fetch and parse soundings, interpolated to hourly resolution."""
    return parse_soundings(client.get_soundings(start, end, lat, long))
