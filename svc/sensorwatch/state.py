from __future__ import annotations
from datetime import datetime

from .models import ChartPoint, TelemetryState, TelemetrySnapshot
from .trends import compute_trends
from .window import WindowBuffer

WAITING_MESSAGE = "Waiting for data..."


def initial_state() -> TelemetryState:
    """Empty window, no trends, disconnected."""
    return TelemetryState()


def apply_success(
    state: TelemetryState, point: ChartPoint, received_at: datetime, capacity: int
) -> TelemetryState:
    """
    Append a good reading to the window (evicting the oldest beyond capacity),
    recompute trends from the last two points and mark the source connected.
    """
    buf = WindowBuffer(capacity, state.window)
    buf.append(point)
    return TelemetryState(
        window=buf.snapshot(),
        trends=compute_trends(buf.latest_two()),
        connection=state.connection.mark_success(received_at),
    )


def apply_failure(state: TelemetryState, message: str) -> TelemetryState:
    """Record a failed acquisition. Window and trends stay as they were."""
    return state.model_copy(update={"connection": state.connection.mark_failure(message)})


def time_range_label(state: TelemetryState) -> str:
    if len(state.window) < 2:
        return WAITING_MESSAGE
    return f"{state.window[0].time} - {state.window[-1].time}"


def build_snapshot(
    state: TelemetryState, capacity: int, cycles_started: int = 0, cycles_skipped: int = 0
) -> TelemetrySnapshot:
    return TelemetrySnapshot(
        capacity=capacity,
        window=state.window,
        latest=state.window[-1] if state.window else None,
        time_range=time_range_label(state),
        trends=state.trends,
        connection=state.connection,
        cycles_started=cycles_started,
        cycles_skipped=cycles_skipped,
    )
