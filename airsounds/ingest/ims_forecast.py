"""Decoder for the IMS hourly locations forecast XML."""

import logging
import re
import xml.etree.ElementTree as ET

from bs4.dammit import UnicodeDammit

from airsounds.errors import ParseError
from airsounds.ingest.units import repair_mislabeled_zone, scale_to_float
from airsounds.models.forecast import HourlyForecast, SurfaceForecast

logger = logging.getLogger(__name__)

ROOT_TAG = "HourlyLocationsForecast"
_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def transcode(data: bytes) -> str:
    """Decode an XML document using the encoding it declares.

    IMS publishes ISO-8859-8 documents, so UTF-8 cannot be assumed.
    """
    dammit = UnicodeDammit(data, is_html=False)
    if dammit.unicode_markup is None:
        raise ParseError("could not detect document encoding", data[:80])
    logger.debug("Decoded forecast document as %s", dammit.original_encoding)
    # The declaration names the old encoding; the text is already decoded.
    return _XML_DECLARATION.sub("", dammit.unicode_markup, count=1)


def decode_forecasts(data: bytes, true_zone: str = "IDT") -> list[SurfaceForecast]:
    """Decode every <Location> in document order.

    Any malformed element fails the whole document.
    """
    try:
        root = ET.fromstring(transcode(data))
    except ET.ParseError as e:
        raise ParseError(f"decoding forecast XML ({e})", data[:80]) from e
    if root.tag != ROOT_TAG:
        raise ParseError(f"expected <{ROOT_TAG}> root", root.tag)

    forecasts = [
        _decode_location(loc, true_zone) for loc in root.findall("Location")
    ]
    logger.info("Decoded %d location forecasts", len(forecasts))
    return forecasts


def _decode_location(loc: ET.Element, true_zone: str) -> SurfaceForecast:
    return SurfaceForecast(
        name=(loc.findtext("LocationMetaData/LocationName") or "").strip(),
        latitude=_number(loc, "LocationMetaData/LocationLatitude"),
        longitude=_number(loc, "LocationMetaData/LocationLongitude"),
        elevation=_number(loc, "LocationMetaData/LocationHeight"),
        hourly=tuple(
            _decode_hourly(f, true_zone) for f in loc.findall("LocationData/Forecast")
        ),
    )


def _decode_hourly(elem: ET.Element, true_zone: str) -> HourlyForecast:
    return HourlyForecast(
        time=repair_mislabeled_zone(elem.findtext("ForecastTime") or "", true_zone),
        temperature=_number(elem, "Temperature"),
        relative_humidity=_number(elem, "RelativeHumidity"),
        wind_speed=_number(elem, "WindSpeed"),
        wind_direction=_number(elem, "WindDirection"),
    )


def _number(elem: ET.Element, path: str) -> float:
    text = elem.findtext(path)
    if text is None or not text.strip():
        return 0.0
    return scale_to_float(text)
