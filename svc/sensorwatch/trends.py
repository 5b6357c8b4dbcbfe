from __future__ import annotations
import math
from typing import Optional, Tuple

from .models import ChartPoint, TrendMetric, Trends

CHANNELS = ("temperature", "humidity", "battery")


def percent_change(previous: float, current: float) -> Optional[TrendMetric]:
    """
    Trend of one channel between two consecutive readings.

    The change is undefined when the previous value is zero; that case returns
    None instead of an infinite or NaN magnitude.
    """
    if previous == 0:
        return None
    change = (current - previous) / previous * 100
    if not math.isfinite(change):
        return None
    return TrendMetric(magnitude_percent=abs(change), increasing=change > 0)


def compute_trends(pair: Optional[Tuple[ChartPoint, ChartPoint]]) -> Optional[Trends]:
    if pair is None:
        return None
    previous, current = pair
    return Trends(**{
        ch: percent_change(getattr(previous, ch), getattr(current, ch))
        for ch in CHANNELS
    })
