from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping
from pydantic import ValidationError

from .errors import ParseError
from .models import ChartPoint, RawReading


@dataclass(frozen=True)
class NormalizedReading:
    point: ChartPoint
    received_at: datetime   # absolute timestamp, used for "last update"


def format_time_label(ts: datetime) -> str:
    """HH:MM in the timestamp's own offset, independent of the host locale."""
    return f"{ts.hour:02d}:{ts.minute:02d}"


def _describe(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ())) or "payload"
        parts.append(f"{loc}: {e.get('msg')}")
    return "; ".join(parts)


def normalize(raw: Any) -> NormalizedReading:
    """
    Convert one raw payload from the sensor service into a chart point.

    Raises ParseError when the payload is not an object, the timestamp cannot be
    parsed, or a channel is missing, non-numeric or not finite.
    """
    if not isinstance(raw, Mapping):
        raise ParseError(f"Invalid reading: expected a JSON object, got {type(raw).__name__}")

    try:
        reading = RawReading.model_validate(dict(raw))
    except ValidationError as e:
        raise ParseError(f"Invalid reading: {_describe(e)}") from e

    received_at = reading.received_at
    if received_at.tzinfo is None:
        received_at = received_at.replace(tzinfo=timezone.utc)

    point = ChartPoint(
        time=format_time_label(received_at),
        temperature=reading.temperature,
        humidity=reading.humidity,
        battery=reading.battery,
    )
    return NormalizedReading(point=point, received_at=received_at)
