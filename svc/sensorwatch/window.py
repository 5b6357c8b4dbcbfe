from __future__ import annotations
from collections import deque
from typing import Iterable, Optional, Tuple

from .models import ChartPoint


class WindowBuffer:
    """
    Fixed-capacity FIFO of chart points, oldest first.
    Appending to a full buffer drops the oldest point.
    """

    def __init__(self, capacity: int, points: Iterable[ChartPoint] = ()) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._points: deque[ChartPoint] = deque(points, maxlen=capacity)

    def append(self, point: ChartPoint) -> None:
        self._points.append(point)

    def snapshot(self) -> Tuple[ChartPoint, ...]:
        return tuple(self._points)

    def latest_two(self) -> Optional[Tuple[ChartPoint, ChartPoint]]:
        """(previous, current), or None while fewer than two points exist."""
        if len(self._points) < 2:
            return None
        return self._points[-2], self._points[-1]

    def __len__(self) -> int:
        return len(self._points)
