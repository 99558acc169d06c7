"""Tests for the upstream HTTP clients with mocked httpx."""

from datetime import UTC, date, datetime

import httpx
import pytest
import respx

from airsounds.errors import FetchError
from airsounds.ingest.ims_client import ImsClient, measure, predict
from airsounds.ingest.noaa_client import NoaaClient, fetch_profiles, truncate_to_step
from airsounds.ingest.uwyo_client import UwyoClient, observation_hour

NOAA_URL = "https://test-noaa.example.com/get_soundings.cgi"
UWYO_URL = "https://test-uwyo.example.com/cgi-bin/sounding"
IMS_FORECAST = "https://test-ims.example.com/IMS_001.xml"
IMS_API = "https://test-ims.example.com/v1/envista"

# Match on host and path so the query string is ignored.
NOAA_ROUTE = {"host": "test-noaa.example.com", "path": "/get_soundings.cgi"}
UWYO_ROUTE = {"host": "test-uwyo.example.com", "path": "/cgi-bin/sounding"}


@pytest.fixture
def noaa() -> NoaaClient:
    return NoaaClient(base_url=NOAA_URL, timeout=5.0)


@pytest.fixture
def uwyo() -> UwyoClient:
    return UwyoClient(base_url=UWYO_URL)


@pytest.fixture
def ims() -> ImsClient:
    return ImsClient(forecast_url=IMS_FORECAST, api_url=IMS_API, api_token="secret")


class TestTruncateToStep:
    def test_rounds_down_to_three_hours(self):
        t = datetime(2020, 6, 19, 5, 59, 59, tzinfo=UTC)
        assert truncate_to_step(t) == datetime(2020, 6, 19, 3, tzinfo=UTC)

    def test_already_aligned(self):
        t = datetime(2020, 6, 19, 6, tzinfo=UTC)
        assert truncate_to_step(t) == t

    def test_day_step(self):
        t = datetime(2020, 6, 19, 17, 30, tzinfo=UTC)
        assert truncate_to_step(t, 24 * 3600) == datetime(2020, 6, 19, tzinfo=UTC)


class TestNoaaClient:
    def test_build_params(self, noaa: NoaaClient):
        start = datetime(2020, 6, 19, 1, 30, tzinfo=UTC)
        end = datetime(2020, 6, 20, 7, tzinfo=UTC)
        params = noaa.build_params(start, end, 32.6, 35.23)
        assert params["data_source"] == "GFS"
        assert params["start_year"] == "2020"
        assert params["start_month_name"] == "June"
        assert params["start_mday"] == "19"
        assert params["airport"] == "32.6,35.23"
        assert params["startSecs"] == str(int(datetime(2020, 6, 19, tzinfo=UTC).timestamp()))
        assert params["endSecs"] == str(int(datetime(2020, 6, 20, 6, tzinfo=UTC).timestamp()))

    @respx.mock
    def test_get_soundings(self, noaa: NoaaClient, noaa_report: bytes):
        route = respx.get(**NOAA_ROUTE).mock(return_value=httpx.Response(200, content=noaa_report))

        start = datetime(2020, 6, 19, tzinfo=UTC)
        data = noaa.get_soundings(start, start, 32.6, 35.23)
        assert data == noaa_report
        request = route.calls[0].request
        assert request.url.params["text"] == "Ascii text (GSD format)"
        assert "airsounds" in request.headers["user-agent"]

    @respx.mock
    def test_get_date_covers_utc_day(self, noaa: NoaaClient):
        route = respx.get(**NOAA_ROUTE).mock(return_value=httpx.Response(200, content=b""))

        noaa.get_date(datetime(2020, 6, 19, 14, tzinfo=UTC), 32.6, 35.23)
        params = route.calls[0].request.url.params
        assert int(params["endSecs"]) - int(params["startSecs"]) == 24 * 3600
        assert params["startSecs"] == str(int(datetime(2020, 6, 19, tzinfo=UTC).timestamp()))

    @respx.mock
    def test_fetch_profiles(self, noaa: NoaaClient, noaa_report: bytes):
        respx.get(**NOAA_ROUTE).mock(return_value=httpx.Response(200, content=noaa_report))

        start = datetime(2020, 6, 19, tzinfo=UTC)
        profiles = fetch_profiles(noaa, start, start, 32.6, 35.23)
        assert len(profiles) == 7

    @respx.mock
    def test_bad_status(self, noaa: NoaaClient):
        respx.get(**NOAA_ROUTE).mock(return_value=httpx.Response(503, content=b"busy"))

        start = datetime(2020, 6, 19, tzinfo=UTC)
        with pytest.raises(FetchError, match="bad status: 503") as exc:
            noaa.get_soundings(start, start, 32.6, 35.23)
        assert exc.value.status_code == 503

    @respx.mock
    def test_connection_error(self, noaa: NoaaClient):
        respx.get(**NOAA_ROUTE).mock(side_effect=httpx.ConnectError("refused"))

        start = datetime(2020, 6, 19, tzinfo=UTC)
        with pytest.raises(FetchError) as exc:
            noaa.get_soundings(start, start, 32.6, 35.23)
        assert exc.value.url == NOAA_URL


class TestUwyoClient:
    def test_observation_hour(self):
        assert observation_hour(datetime(2022, 2, 20, 9)) == "00"
        assert observation_hour(datetime(2022, 2, 20, 12)) == "00"
        assert observation_hour(datetime(2022, 2, 20, 13)) == "12"

    def test_build_params(self, uwyo: UwyoClient):
        params = uwyo.build_params(40179, datetime(2022, 2, 5, 18))
        assert params == {
            "region": "mideast",
            "STNM": "40179",
            "TYPE": "TEXT:LIST",
            "YEAR": "2022",
            "MONTH": "02",
            "FROM": "0512",
            "TO": "0512",
        }

    @respx.mock
    def test_get_sounding(self, uwyo: UwyoClient, uwyo_page: bytes):
        route = respx.get(**UWYO_ROUTE).mock(return_value=httpx.Response(200, content=uwyo_page))

        assert uwyo.get_sounding(40179, datetime(2022, 2, 20, 8)) == uwyo_page
        params = route.calls[0].request.url.params
        assert params["STNM"] == "40179"
        assert params["FROM"] == "2000"

    @respx.mock
    def test_bad_status(self, uwyo: UwyoClient):
        respx.get(**UWYO_ROUTE).mock(return_value=httpx.Response(404))

        with pytest.raises(FetchError, match="404"):
            uwyo.get_sounding(40179, datetime(2022, 2, 20, 8))


class TestImsClient:
    @respx.mock
    def test_predict(self, ims: ImsClient, ims_forecast_xml: bytes):
        respx.get(IMS_FORECAST).mock(return_value=httpx.Response(200, content=ims_forecast_xml))

        forecasts = predict(ims)
        assert len(forecasts) == 3

    def test_measurements_url(self, ims: ImsClient):
        url = ims.measurements_url(16, date(2022, 2, 20))
        assert url == f"{IMS_API}/stations/16/data/daily/2022/02/20"

    @respx.mock
    def test_measure(self, ims: ImsClient, ims_measure_json: bytes):
        route = respx.get(f"{IMS_API}/stations/16/data/daily/2022/02/20").mock(
            return_value=httpx.Response(200, content=ims_measure_json)
        )

        measurements = measure(ims, 16, date(2022, 2, 20))
        assert len(measurements) == 2
        assert route.calls[0].request.headers["authorization"] == "ApiToken secret"

    def test_missing_token(self):
        client = ImsClient(api_url=IMS_API)
        with pytest.raises(FetchError, match="token"):
            client.get_measurements(16, date(2022, 2, 20))

    @respx.mock
    def test_unauthorized(self, ims: ImsClient):
        respx.get(f"{IMS_API}/stations/16/data/daily/2022/02/20").mock(
            return_value=httpx.Response(401)
        )

        with pytest.raises(FetchError) as exc:
            ims.get_measurements(16, date(2022, 2, 20))
        assert exc.value.status_code == 401
