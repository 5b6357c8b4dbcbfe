from __future__ import annotations
import asyncio
import logging
from typing import Optional

from .errors import TelemetryError
from .models import TelemetryState
from .normalizer import normalize
from .sources.interface import ReadingSource
from .state import apply_failure, apply_success, initial_state

logger = logging.getLogger(__name__)


class Poller:
    """
    Drives acquisition cycles against one reading source.

    start() runs a cycle right away and then one every interval_s seconds on a
    fixed schedule. Only one cycle is in flight at a time: a tick that comes due
    while the previous cycle is still waiting on the source is skipped. Every
    cycle carries the epoch it was started under; start() and stop() bump the
    epoch, so a result that arrives after stop() is dropped instead of written
    into the state.

    Must be started from inside a running event loop.
    """

    def __init__(self, source: ReadingSource, interval_s: float = 62.0, capacity: int = 20) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.source = source
        self.interval_s = interval_s
        self.capacity = capacity
        self.state: TelemetryState = initial_state()
        self.cycles_started = 0
        self.cycles_skipped = 0
        self._epoch = 0
        self._running = False
        self._stopped = False
        self._ticker: Optional[asyncio.Task] = None
        self._in_flight: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def in_flight(self) -> Optional[asyncio.Task]:
        """The cycle currently waiting on the source, if any."""
        if self._in_flight is not None and self._in_flight.done():
            return None
        return self._in_flight

    # --- lifecycle ---------------------------------------------------------

    def start(self) -> None:
        if self._running:
            return
        self._epoch += 1
        self._running = True
        self._stopped = False
        self.state = initial_state()
        self.cycles_started = 0
        self.cycles_skipped = 0
        # a cycle left over from a previous run belongs to an old epoch
        self._in_flight = None
        self._ticker = asyncio.get_running_loop().create_task(self._tick_loop(self._epoch))
        logger.info(
            f"Poller started (source={self.source.name}, interval={self.interval_s}s, "
            f"capacity={self.capacity}, epoch={self._epoch})"
        )

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._stopped = True
        self._epoch += 1
        ticker, self._ticker = self._ticker, None
        if ticker is not None:
            ticker.cancel()
            try:
                await ticker
            except asyncio.CancelledError:
                pass
        if self.in_flight is not None:
            logger.info("Poller stopped with a cycle in flight; its result will be discarded")
        else:
            logger.info("Poller stopped")

    # --- scheduling --------------------------------------------------------

    async def _tick_loop(self, epoch: int) -> None:
        loop = asyncio.get_running_loop()
        next_due = loop.time()
        while epoch == self._epoch:
            self._fire(epoch)
            next_due += self.interval_s
            await asyncio.sleep(max(0.0, next_due - loop.time()))

    def _fire(self, epoch: int) -> bool:
        if self.in_flight is not None:
            self.cycles_skipped += 1
            logger.warning(
                f"Skipping acquisition cycle: previous cycle still in flight "
                f"(skipped {self.cycles_skipped} so far)"
            )
            return False
        self.cycles_started += 1
        self._in_flight = asyncio.get_running_loop().create_task(self._cycle(epoch, self.cycles_started))
        return True

    def trigger(self) -> bool:
        """Start a cycle now. False when stopped or a cycle is already in flight."""
        if not self._running:
            return False
        return self._fire(self._epoch)

    # --- one cycle ---------------------------------------------------------

    async def _cycle(self, epoch: int, seq: int) -> None:
        try:
            raw = await asyncio.to_thread(self.source.fetch)
            reading = normalize(raw)
        except TelemetryError as e:
            message = f"Failed to fetch data: {e}"
            ok = False
        except Exception as e:
            logger.exception(f"Unexpected error in acquisition cycle #{seq}")
            message = f"Failed to fetch data: {e}"
            ok = False
        else:
            ok = True

        if epoch != self._epoch:
            logger.info(f"Discarding result of cycle #{seq}: poller was stopped or restarted")
            return

        if ok:
            self.state = apply_success(self.state, reading.point, reading.received_at, self.capacity)
            logger.debug(
                f"Cycle #{seq} ok: {reading.point.time} T={reading.point.temperature} "
                f"H={reading.point.humidity} B={reading.point.battery} "
                f"(window {len(self.state.window)}/{self.capacity})"
            )
        else:
            self.state = apply_failure(self.state, message)
            logger.warning(f"Cycle #{seq} failed: {message}")

    async def poll_once(self) -> TelemetryState:
        """
        Run one cycle to completion and return the new state.

        Works on a poller that was never started (single-shot use from tests and
        scripts) and on a running one, where it counts as the in-flight cycle so
        ticks and trigger() are skipped until it returns. A stopped poller does
        not acquire anymore: RuntimeError until start() is called again.
        """
        if self._stopped:
            raise RuntimeError("poller has been stopped")
        if self.in_flight is not None:
            raise RuntimeError("an acquisition cycle is already in flight")
        self.cycles_started += 1
        task = asyncio.get_running_loop().create_task(self._cycle(self._epoch, self.cycles_started))
        self._in_flight = task
        try:
            await task
        finally:
            if self._in_flight is task:
                self._in_flight = None
        return self.state
