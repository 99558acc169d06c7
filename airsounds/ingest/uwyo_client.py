"""University of Wyoming sounding page client."""

import logging
from datetime import datetime

from airsounds.ingest.http import DEFAULT_USER_AGENT, fetch_bytes

logger = logging.getLogger(__name__)

UWYO_SOUNDING_URL = "http://weather.uwyo.edu/cgi-bin/sounding"


def observation_hour(when: datetime) -> str:
    """Soundings are launched at 00 and 12 only."""
    return "12" if when.hour > 12 else "00"


class UwyoClient:
    def __init__(
        self,
        base_url: str = UWYO_SOUNDING_URL,
        region: str = "mideast",
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
    ):
        self.base_url = base_url
        self.region = region
        self.user_agent = user_agent
        self.timeout = timeout

    def build_params(self, station: int, when: datetime) -> dict[str, str]:
        day = f"{when.day:02d}{observation_hour(when)}"
        return {
            "region": self.region,
            "STNM": str(station),
            "TYPE": "TEXT:LIST",
            "YEAR": f"{when.year:4d}",
            "MONTH": f"{when.month:02d}",
            "FROM": day,
            "TO": day,
        }

    def get_sounding(self, station: int, when: datetime) -> bytes:
        """Fetch the sounding page for a station on the launch nearest before when."""
        logger.info("Fetching UWYO sounding for station %d", station)
        return fetch_bytes(
            self.base_url,
            params=self.build_params(station, when),
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
        )
