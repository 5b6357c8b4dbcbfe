# sensorwatch/sources/simulator.py
"""
Simulated sensor

Emulates the upstream sensor service by producing payloads in the same shape
(received_at, TempC_SHT, Hum_SHT, BatV plus the device's status fields) so the
whole pipeline runs without hardware. Each channel follows a bounded random
walk so the chart and trends have something to show.
"""
from __future__ import annotations
import logging
import random
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .interface import ReadingSource

logger = logging.getLogger(__name__)

# (start, step, low, high) per channel
_TEMP = (27.0, 0.4, 20.0, 40.0)
_HUM = (32.0, 1.0, 20.0, 40.0)
_BAT = (3.60, 0.005, 3.0, 4.0)


def _walk(rng: random.Random, value: float, step: float, low: float, high: float) -> float:
    value += rng.uniform(-step, step)
    return min(max(value, low), high)


class SimulatedReadingSource(ReadingSource):
    """Generates plausible readings locally. Never fails."""

    name = "sim"

    def __init__(
        self,
        seed: Optional[int] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._rng = random.Random(seed)
        self._clock = clock
        self._temp = _TEMP[0]
        self._hum = _HUM[0]
        self._bat = _BAT[0]
        logger.info("SimulatedReadingSource seed=%s", seed)

    def fetch(self) -> Dict[str, Any]:
        self._temp = _walk(self._rng, self._temp, *_TEMP[1:])
        self._hum = _walk(self._rng, self._hum, *_HUM[1:])
        self._bat = _walk(self._rng, self._bat, *_BAT[1:])
        ts = self._clock()
        return {
            "received_at": ts.isoformat().replace("+00:00", "Z"),
            "TempC_SHT": round(self._temp, 2),
            "Hum_SHT": round(self._hum, 1),
            "BatV": round(self._bat, 3),
            "TempC1": round(self._temp + self._rng.uniform(-0.5, 0.5), 2),
            "ADC_CH0V": round(self._rng.uniform(0.1, 0.3), 3),
            "Digital_IStatus": "L",
            "Door_status": "CLOSE",
            "EXTI_Trigger": "FALSE",
            "Work_mode": "SHT31",
        }
