from __future__ import annotations
import re
from datetime import datetime
from typing import Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Upstream timestamps can carry nanosecond precision; datetime only holds microseconds
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


class RawReading(BaseModel):
    """
    Payload returned by the sensor service.

    Only the timestamp and the three charted channels are validated. The device
    also reports auxiliary status fields (ADC_CH0V, Digital_IStatus, Door_status,
    EXTI_Trigger, TempC1, Work_mode) which are accepted and ignored.
    """
    model_config = ConfigDict(extra="allow")

    received_at: datetime = Field(description="When the upstream received the uplink")
    temperature: float = Field(alias="TempC_SHT", strict=True, allow_inf_nan=False, description="Temperature in °C")
    humidity: float = Field(alias="Hum_SHT", strict=True, allow_inf_nan=False, description="Relative humidity in %")
    battery: float = Field(alias="BatV", strict=True, allow_inf_nan=False, description="Battery voltage in V")

    @field_validator("received_at", mode="before")
    @classmethod
    def _trim_fraction(cls, value):
        if isinstance(value, str):
            return _FRACTION_RE.sub(r"\1", value.strip())
        return value


class ChartPoint(BaseModel):
    """One point of the live chart."""
    model_config = ConfigDict(frozen=True)

    time: str = Field(description="Display label, HH:MM")
    temperature: float
    humidity: float
    battery: float


class TrendMetric(BaseModel):
    """Percentage change between the two most recent points of one channel."""
    model_config = ConfigDict(frozen=True)

    magnitude_percent: float = Field(ge=0, description="Absolute percentage change")
    increasing: bool = Field(description="True when the latest value is higher than the previous one")


class Trends(BaseModel):
    # None for a channel whose previous value was zero
    model_config = ConfigDict(frozen=True)

    temperature: Optional[TrendMetric] = None
    humidity: Optional[TrendMetric] = None
    battery: Optional[TrendMetric] = None


class ConnectionHealth(BaseModel):
    """Whether the most recent acquisition succeeded, plus what we know about the last ones."""
    model_config = ConfigDict(frozen=True)

    status: Literal["connected", "disconnected"] = "disconnected"
    last_update: Optional[datetime] = Field(default=None, description="Timestamp of the last good reading")
    last_error: Optional[str] = Field(default=None, description="Message of the last failed acquisition")

    @property
    def connected(self) -> bool:
        return self.status == "connected"

    def mark_success(self, ts: datetime) -> ConnectionHealth:
        return self.model_copy(update={"status": "connected", "last_update": ts, "last_error": None})

    def mark_failure(self, message: str) -> ConnectionHealth:
        # last_update is kept so the UI can still show the last known-good time
        return self.model_copy(update={"status": "disconnected", "last_error": message})


class TelemetryState(BaseModel):
    """Everything the dashboard shows. Replaced as a whole on every transition."""
    model_config = ConfigDict(frozen=True)

    window: Tuple[ChartPoint, ...] = ()
    trends: Optional[Trends] = None
    connection: ConnectionHealth = Field(default_factory=ConnectionHealth)


class TelemetrySnapshot(BaseModel):
    """Dashboard view of the engine returned by GET /telemetry."""
    capacity: int = Field(description="Maximum number of points in the window")
    window: Tuple[ChartPoint, ...] = Field(description="Chart points, oldest first")
    latest: Optional[ChartPoint] = Field(default=None, description="Newest point, if any")
    time_range: str = Field(description="'first - last' time labels, or a waiting message")
    trends: Optional[Trends] = Field(default=None, description="Absent until two points exist")
    connection: ConnectionHealth
    cycles_started: int = Field(default=0, description="Acquisition cycles started since the poller started")
    cycles_skipped: int = Field(default=0, description="Ticks skipped because a cycle was still in flight")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(description="Service status (always 'ok' if service is running)")
    mode: str = Field(description="Current reading source: 'sim' (generator) or 'real' (upstream service)")
    connected: bool = Field(description="Whether the last acquisition succeeded")


class PollResponse(BaseModel):
    """Result of a manual poll request."""
    accepted: bool = Field(description="False when a cycle was already in flight or the poller is stopped")


class ErrorResponse(BaseModel):
    """Error body relayed by the proxy endpoint."""
    error: str = Field(description="Error message describing what went wrong")
