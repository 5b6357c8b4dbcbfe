from __future__ import annotations
from typing import Any, Dict, List, Union


def make_reading(minute: int, temp: float = 25.0, hum: float = 30.0, bat: float = 3.6, hour: int = 12) -> Dict[str, Any]:
    """Raw payload in the shape the sensor service returns."""
    return {
        "received_at": f"2025-03-01T{hour:02d}:{minute:02d}:00.000000000Z",
        "TempC_SHT": temp,
        "Hum_SHT": hum,
        "BatV": bat,
        "TempC1": temp,
        "ADC_CH0V": 0.2,
        "Digital_IStatus": "L",
        "Door_status": "CLOSE",
        "EXTI_Trigger": "FALSE",
        "Work_mode": "SHT31",
    }


class ScriptedSource:
    """Returns (or raises) the scripted results in order, repeating the last one."""

    name = "scripted"

    def __init__(self, *results: Union[Dict[str, Any], Exception]) -> None:
        self._results: List[Union[Dict[str, Any], Exception]] = list(results)
        self.calls = 0

    def fetch(self) -> Dict[str, Any]:
        self.calls += 1
        result = self._results.pop(0) if len(self._results) > 1 else self._results[0]
        if isinstance(result, Exception):
            raise result
        return result


