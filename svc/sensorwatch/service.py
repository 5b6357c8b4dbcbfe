from __future__ import annotations
from typing import Any, Dict, Optional

from .config import MODE, SENSOR_UPSTREAM_URL, POLL_INTERVAL_SECONDS, WINDOW_CAPACITY, REQUEST_TIMEOUT_SECONDS, SIM_SEED
from .models import TelemetrySnapshot
from .poller import Poller
from .sources.http_source import HttpReadingSource
from .sources.interface import ReadingSource
from .sources.simulator import SimulatedReadingSource
from .state import build_snapshot


class TelemetryService:
    def __init__(self, source: Optional[ReadingSource] = None) -> None:
        self.mode = MODE
        if source is not None:
            self.source = source
        elif self.mode == "real":
            self.source = HttpReadingSource(SENSOR_UPSTREAM_URL, timeout_s=REQUEST_TIMEOUT_SECONDS)
        else:
            self.source = SimulatedReadingSource(seed=SIM_SEED)
        self.poller = Poller(self.source, interval_s=POLL_INTERVAL_SECONDS, capacity=WINDOW_CAPACITY)

    # lifecycle
    def start(self) -> None:
        self.poller.start()

    async def stop(self) -> None:
        await self.poller.stop()

    # read
    @property
    def connected(self) -> bool:
        return self.poller.state.connection.connected

    def snapshot(self) -> TelemetrySnapshot:
        p = self.poller
        return build_snapshot(p.state, p.capacity, p.cycles_started, p.cycles_skipped)

    def fetch_raw(self) -> Dict[str, Any]:
        """One direct call to the source, bypassing the engine. Raises TelemetryError."""
        return self.source.fetch()

    # write
    def poll_now(self) -> bool:
        return self.poller.trigger()
