# sensorwatch/sources/http_source.py
from __future__ import annotations
import logging
from typing import Any, Dict, Optional
import requests

from ..errors import ParseError, TransportError, UpstreamStatusError
from .interface import ReadingSource

logger = logging.getLogger(__name__)


class HttpReadingSource(ReadingSource):
    """Fetches the latest reading from the upstream sensor service over HTTP."""

    name = "http"

    def __init__(self, url: str, timeout_s: float = 10.0, session: Optional[requests.Session] = None) -> None:
        self.url = url
        self.timeout_s = timeout_s
        self._http = session or requests
        logger.info(f"HttpReadingSource using {self.url} (timeout {self.timeout_s}s)")

    def fetch(self) -> Dict[str, Any]:
        try:
            response = self._http.get(self.url, timeout=self.timeout_s)
        except requests.exceptions.Timeout as e:
            raise TransportError(f"Request to {self.url} timed out after {self.timeout_s}s") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Network error contacting {self.url}: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.debug(f"Upstream {self.url} answered {response.status_code}: {response.text[:200]}")
            raise UpstreamStatusError(response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Upstream returned a non-JSON body: {e}") from e
