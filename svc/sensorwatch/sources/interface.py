# sensorwatch/sources/interface.py
from __future__ import annotations
from typing import Any, Dict, Protocol


class ReadingSource(Protocol):
    """
    Minimal interface every reading source must implement.
    One instance represents the single live sensor the dashboard follows.
    """

    name: str  # e.g. "http", "sim"

    def fetch(self) -> Dict[str, Any]:
        """
        Request the latest raw reading once and return the decoded JSON body.

        Blocking. Raises TransportError when the source cannot be reached,
        UpstreamStatusError on a non-success status and ParseError when the
        body is not JSON.
        """
        ...
