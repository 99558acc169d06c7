"""Decoder for IMS Envista daily station measurements (JSON)."""

import json
import logging
from datetime import UTC, datetime

from airsounds.errors import ParseError
from airsounds.ingest.units import scale_to_float
from airsounds.models.measurement import Measurement

logger = logging.getLogger(__name__)

# Envista channel name -> Measurement field
CHANNEL_FIELDS = {
    "TG": "ground_temp",
    "RH": "relative_humidity",
    "TD": "dry_temp",
    "WD": "wind_direction",
    "WS": "wind_speed",
}
SAMPLE_INTERVAL_SECONDS = 3 * 3600


def decode_measurements(data: bytes) -> list[Measurement]:
    """Decode samples falling on 3-hour boundaries; others are skipped."""
    try:
        raw = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"decoding response ({e})", data[:80]) from e
    samples = raw.get("data") if isinstance(raw, dict) else None
    if not isinstance(samples, list):
        raise ParseError("missing 'data' list", data[:80])

    measurements = []
    for sample in samples:
        if not isinstance(sample, dict):
            raise ParseError("malformed sample", sample)
        t = _parse_datetime(sample.get("datetime"))
        if t.timestamp() % SAMPLE_INTERVAL_SECONDS != 0:
            logger.info("Skip time %s", t.isoformat())
            continue
        values: dict[str, float] = {}
        for ch in sample.get("channels") or []:
            if not isinstance(ch, dict):
                raise ParseError("malformed channel", ch)
            name = ch.get("name")
            field_name = CHANNEL_FIELDS.get(name)
            if field_name is None:
                logger.debug("Skipping unmapped channel %r", name)
                continue
            values[field_name] = scale_to_float(ch.get("value"))
        measurements.append(Measurement(time=t, **values))
    return measurements


def _parse_datetime(value: object) -> datetime:
    if not isinstance(value, str):
        raise ParseError("missing sample datetime", value)
    try:
        t = datetime.fromisoformat(value)
    except ValueError:
        raise ParseError("malformed sample datetime", value) from None
    if t.tzinfo is None:
        t = t.replace(tzinfo=UTC)
    return t.astimezone(UTC)
