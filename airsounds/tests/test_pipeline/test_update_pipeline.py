"""Tests for the update pipeline with mocked upstream clients."""

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from airsounds.config.schema import AirsoundsConfig
from airsounds.errors import FetchError, ParseError
from airsounds.ingest.ims_client import ImsClient
from airsounds.ingest.noaa_client import NoaaClient
from airsounds.ingest.uwyo_client import UwyoClient
from airsounds.models.common import Source
from airsounds.pipeline.update_pipeline import UpdatePipeline

NOW = datetime(2020, 6, 19, 5, 30, tzinfo=UTC)


@pytest.fixture
def clients(noaa_report: bytes, ims_forecast_xml: bytes, uwyo_page: bytes):
    noaa = MagicMock(spec=NoaaClient)
    noaa.get_soundings.return_value = noaa_report
    ims = MagicMock(spec=ImsClient)
    ims.get_forecast.return_value = ims_forecast_xml
    uwyo = MagicMock(spec=UwyoClient)
    uwyo.get_sounding.return_value = uwyo_page
    return {"noaa": noaa, "ims": ims, "uwyo": uwyo}


@pytest.fixture
def pipeline(default_config: AirsoundsConfig, clients) -> UpdatePipeline:
    return UpdatePipeline(default_config, now=NOW, **clients)


def _read(path: Path) -> dict:
    return json.loads(path.read_text())


class TestRunNoaa:
    def test_requests_forecast_window(self, pipeline: UpdatePipeline, clients):
        pipeline.run(Source.NOAA)
        noaa = clients["noaa"]
        assert noaa.get_soundings.call_count == 4
        start, end, lat, long = noaa.get_soundings.call_args_list[0].args
        assert start == datetime(2020, 6, 19, tzinfo=UTC)
        assert end == start + timedelta(days=4)
        assert (lat, long) == (32.597662, 35.234076)

    def test_writes_hourly_profiles(self, pipeline: UpdatePipeline, default_config):
        modified = pipeline.run(Source.NOAA)
        day = Path(default_config.data_dir) / "2020" / "06" / "19.json"
        assert modified == [day, Path(default_config.data_dir) / "index.json"]

        content = _read(day)
        assert sorted(content, key=int) == ["0", "1", "2", "3", "4", "5", "6"]
        slot = content["0"]["megido"]
        assert slot["ims"] is None
        assert slot["noaa"]["Pressure"] == [1000, 975, 950]
        assert content["1"]["bet-shaan"]["noaa"]["Height"][0] == 255

    def test_index(self, pipeline: UpdatePipeline, default_config):
        pipeline.run(Source.NOAA)
        index = _read(Path(default_config.data_dir) / "index.json")
        assert datetime.fromisoformat(index["NoaaStart"]) == datetime(2020, 6, 19, 0, tzinfo=UTC)
        assert datetime.fromisoformat(index["NoaaEnd"]) == datetime(2020, 6, 19, 6, tzinfo=UTC)
        assert datetime.fromisoformat(index["NoaaLastUpdate"]) == NOW
        assert "IMSStart" not in index

    def test_locations_written_without_ims_name(self, pipeline: UpdatePipeline, default_config):
        pipeline.run(Source.NOAA)
        locations = _read(Path(default_config.data_dir) / "index.json")["Locations"]
        assert [loc["name"] for loc in locations] == ["megido", "sde-teiman", "zefat", "bet-shaan"]
        assert "ims_name" not in locations[0]
        assert locations[0]["uwyo_station"] == 40179

    def test_fetch_error_propagates(self, pipeline: UpdatePipeline, clients, default_config):
        clients["noaa"].get_soundings.side_effect = FetchError("bad status: 500", status_code=500)
        with pytest.raises(FetchError):
            pipeline.run(Source.NOAA)
        assert not (Path(default_config.data_dir) / "index.json").exists()


class TestRunIms:
    def test_maps_locations_and_skips_unmapped(self, pipeline: UpdatePipeline):
        result = pipeline.run_ims()
        assert result.records == 5
        assert result.skipped == ["ELAT"]

    def test_day_file(self, pipeline: UpdatePipeline, default_config):
        pipeline.run(Source.IMS)
        content = _read(Path(default_config.data_dir) / "2022" / "02" / "20.json")
        assert set(content) == {"15", "16", "17"}
        assert content["15"]["megido"]["ims"]["Temp"] == 12.0
        assert content["15"]["sde-teiman"]["ims"]["WindDir"] == 315.0
        assert "sde-teiman" not in content["17"]

    def test_true_zone_from_config(self, default_config, clients):
        config = default_config.model_copy(
            update={"ims": default_config.ims.model_copy(update={"true_zone": "IST"})}
        )
        UpdatePipeline(config, now=NOW, **clients).run(Source.IMS)
        content = _read(Path(config.data_dir) / "2022" / "02" / "20.json")
        assert set(content) == {"16", "17", "18"}

    def test_parse_error_propagates(self, pipeline: UpdatePipeline, clients):
        clients["ims"].get_forecast.return_value = b"<html>maintenance</html>"
        with pytest.raises(ParseError):
            pipeline.run(Source.IMS)


class TestRunUwyo:
    def test_one_request_per_station(self, pipeline: UpdatePipeline, clients):
        pipeline.run(Source.UWYO)
        uwyo = clients["uwyo"]
        uwyo.get_sounding.assert_called_once()
        station, when = uwyo.get_sounding.call_args.args
        assert station == 40179
        assert when.utcoffset() == timedelta(hours=3)
        assert when == NOW

    def test_stored_under_station(self, pipeline: UpdatePipeline, default_config):
        pipeline.run(Source.UWYO)
        content = _read(Path(default_config.data_dir) / "2022" / "02" / "20.json")
        slot = content["22"]["40179"]
        assert slot["uwyo"]["Station"] == 40179
        assert len(slot["uwyo"]["Pressure"]) == 10
        assert len(slot["uwyo"]["WindSpeed"]) == 4

    def test_empty_page(self, pipeline: UpdatePipeline, clients, default_config):
        clients["uwyo"].get_sounding.return_value = b"<html><body>Can't get data</body></html>"
        assert pipeline.run(Source.UWYO) == []
        index = _read(Path(default_config.data_dir) / "index.json")
        assert "UWYOStart" not in index
        assert "UWYOLastUpdate" in index


class TestRunAll:
    def test_all_sources(self, pipeline: UpdatePipeline, default_config, clients):
        modified = pipeline.run()
        data_dir = Path(default_config.data_dir)
        assert modified == [
            data_dir / "2020" / "06" / "19.json",
            data_dir / "2022" / "02" / "20.json",
            data_dir / "index.json",
        ]
        content = _read(data_dir / "2022" / "02" / "20.json")
        assert content["15"]["megido"]["ims"] is not None
        assert content["22"]["40179"]["uwyo"] is not None
        index = _read(data_dir / "index.json")
        for key in ("NoaaLastUpdate", "IMSLastUpdate", "UWYOLastUpdate"):
            assert key in index

    def test_existing_records_kept(self, pipeline: UpdatePipeline, default_config, clients):
        pipeline.run(Source.IMS)
        UpdatePipeline(default_config, now=NOW, **clients).run(Source.UWYO)
        content = _read(Path(default_config.data_dir) / "2022" / "02" / "20.json")
        assert content["15"]["megido"]["ims"]["Temp"] == 12.0
