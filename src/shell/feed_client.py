"""Feed Client - Imperative Shell.

This module handles HTTP communication with the upstream earthquake feeds.
All I/O is contained here; business logic is in the core module.
"""

import logging
from typing import Any, Mapping

import requests

from src.core.errors import FetchFailure, UnexpectedFailure


logger = logging.getLogger(__name__)


# Default timeout for feed requests (seconds)
DEFAULT_TIMEOUT = 30


class FeedClient:
    """Client for fetching GeoJSON earthquake feeds.

    This is part of the imperative shell - it handles HTTP I/O.
    Exactly one GET is issued per fetch; there are no retries.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize feed client.

        Args:
            timeout: Request timeout in seconds
            session: requests session (a module-level request is used if None)
        """
        self.timeout = timeout
        self.session = session

    def fetch(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Fetch and decode a JSON feed.

        This method performs HTTP I/O.

        Args:
            url: Feed URL
            headers: Extra request headers

        Returns:
            Decoded JSON body

        Raises:
            FetchFailure: If the request fails or returns a non-2xx status
            UnexpectedFailure: If the body is not valid JSON
        """
        logger.info("Fetching earthquake feed from %s", url)

        get = self.session.get if self.session is not None else requests.get

        try:
            response = get(
                url,
                headers=dict(headers or {}),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise FetchFailure(f"Request to {url} timed out") from e
        except requests.HTTPError as e:
            raise FetchFailure(
                f"Feed returned HTTP {e.response.status_code}: {url}"
            ) from e
        except requests.RequestException as e:
            raise FetchFailure(f"Request to {url} failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise UnexpectedFailure(f"Feed body from {url} is not valid JSON") from e

        logger.info(
            "Fetched %d features from feed",
            len(data.get("features") or []) if isinstance(data, dict) else 0,
        )

        return data
