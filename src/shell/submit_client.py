"""Submit Client - Imperative Shell.

This module hands the finished FeatureCollection to the output sink: either
a layer endpoint over HTTP, or stdout for local runs.
All I/O is contained here; feature formatting is in the core module.
"""

import json
import logging
import sys
from typing import Any, Callable, TextIO

import requests

from src.core.errors import SubmitFailure


logger = logging.getLogger(__name__)


# Default timeout for submit requests (seconds)
DEFAULT_TIMEOUT = 30

# Any callable that accepts a FeatureCollection can act as the sink
Submitter = Callable[[dict[str, Any]], None]


class SubmitClient:
    """Client for POSTing feature collections to a layer endpoint.

    This is part of the imperative shell - it handles HTTP I/O.
    The submission is made once and never retried.
    """

    def __init__(
        self,
        url: str,
        token: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize submit client.

        Args:
            url: Layer endpoint URL
            token: Bearer token (optional)
            timeout: Request timeout in seconds
        """
        self.url = url
        self.token = token
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def submit(self, collection: dict[str, Any]) -> None:
        """Submit a FeatureCollection.

        This method performs HTTP I/O.

        Args:
            collection: GeoJSON FeatureCollection

        Raises:
            SubmitFailure: If the request fails or returns a non-2xx status
        """
        logger.info(
            "Submitting %d features to %s",
            len(collection.get("features", [])),
            self.url,
        )

        try:
            response = requests.post(
                self.url,
                json=collection,
                timeout=self.timeout,
                headers=self._headers(),
            )
        except requests.Timeout as e:
            raise SubmitFailure("Submit request timed out") from e
        except requests.RequestException as e:
            raise SubmitFailure(f"Submit request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Layer endpoint returned non-2xx: %d - %s",
                response.status_code,
                response.text,
            )
            raise SubmitFailure(
                f"Layer endpoint returned HTTP {response.status_code}: {response.text}"
            )

        logger.info("Features submitted successfully")

    __call__ = submit


class ConsoleSink:
    """Sink that writes the FeatureCollection to a stream as JSON.

    Used for local runs and dry runs.
    """

    def __init__(self, stream: TextIO | None = None, indent: int = 2) -> None:
        """Initialize the console sink.

        Args:
            stream: Stream to write to (sys.stdout at write time if None)
            indent: JSON indentation
        """
        self.stream = stream
        self.indent = indent

    def submit(self, collection: dict[str, Any]) -> None:
        """Write the FeatureCollection as one JSON document and a newline."""
        stream = self.stream or sys.stdout
        stream.write(json.dumps(collection, indent=self.indent) + "\n")
        stream.flush()

    __call__ = submit
