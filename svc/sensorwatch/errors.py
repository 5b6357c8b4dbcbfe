from __future__ import annotations
from typing import Optional


class TelemetryError(Exception):
    """Base class for every error raised while acquiring or parsing a reading."""


class AcquisitionError(TelemetryError):
    """The source could not deliver a reading."""


class TransportError(AcquisitionError):
    """Network unreachable, connection refused or timed out."""


class UpstreamStatusError(AcquisitionError):
    """The upstream answered with a non-success status."""

    def __init__(self, status_code: int, message: Optional[str] = None) -> None:
        self.status_code = status_code
        super().__init__(message or f"HTTP error! Status: {status_code}")


class ParseError(TelemetryError):
    """The payload is malformed or a required channel is missing/non-numeric."""
