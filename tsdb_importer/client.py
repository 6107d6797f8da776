"""TSDB client — posts JSON array payloads to the ingestion endpoint."""

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

HEADERS = {"Content-Type": "application/json"}


class TSDBClient:
    """Delivers one payload per POST; failures are logged, never retried."""

    def __init__(self, url: str, timeout: Optional[float] = None):
        self._url = url
        self._timeout = timeout
        self._session = requests.Session()

    def post(self, payload: bytes) -> bool:
        """Send *payload*. Returns True only when the endpoint answers 200."""
        try:
            resp = self._session.post(
                self._url, data=payload, headers=HEADERS, timeout=self._timeout
            )
        except requests.RequestException as exc:
            logger.error("Failed to post metrics to %s: %s", self._url, exc)
            self._log_dropped(payload)
            return False

        if resp.status_code != 200:
            logger.error(
                "Failed to post metrics to %s: HTTP %d %s",
                self._url,
                resp.status_code,
                resp.text[:200],
            )
            self._log_dropped(payload)
            return False

        logger.debug("Posted %d bytes to %s", len(payload), self._url)
        return True

    @staticmethod
    def _log_dropped(payload: bytes):
        logger.error("Metrics: \n %s \n", payload.decode("utf-8", errors="replace"))

    def close(self):
        """Release pooled connections."""
        self._session.close()
