"""Shared test fixtures."""

from pathlib import Path

import pytest
import yaml

from airsounds.config.defaults import DEFAULT_LOCATIONS
from airsounds.config.schema import AirsoundsConfig

FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def noaa_report() -> bytes:
    return (FIXTURE_DIR / "noaa_gfs.txt").read_bytes()


@pytest.fixture
def uwyo_page() -> bytes:
    return (FIXTURE_DIR / "uwyo_sounding.html").read_bytes()


@pytest.fixture
def ims_forecast_xml() -> bytes:
    return (FIXTURE_DIR / "ims_forecast.xml").read_bytes()


@pytest.fixture
def ims_measure_json() -> bytes:
    return (FIXTURE_DIR / "ims_measure_station16.json").read_bytes()


@pytest.fixture
def default_config(tmp_path: Path) -> AirsoundsConfig:
    """Default config with default locations, writing into tmp_path."""
    return AirsoundsConfig(locations=DEFAULT_LOCATIONS, data_dir=str(tmp_path / "data"))


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "timezone": "Asia/Jerusalem",
        "noaa": {"forecast_days": 2},
        "uwyo": {"tokenizer": "whitespace"},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
