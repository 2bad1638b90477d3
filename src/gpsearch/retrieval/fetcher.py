"""HTTP client for the upstream package search API."""

import time
from typing import Any, Dict, List, Optional

import requests

from gpsearch.config.loader import ApiSettings
from gpsearch.errors import DecodeError, FetchError
from gpsearch.records import Record
from gpsearch.utils.logging import get_logger

logger = get_logger(__name__)


class PackageSearchClient:
    """Runs a search query against the configured endpoint."""

    def __init__(self, settings: Optional[ApiSettings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or ApiSettings()
        self.session = session

    def _get_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "application/json",
        }

    def _get(self, query: str) -> requests.Response:
        getter = self.session.get if self.session is not None else requests.get
        return getter(
            self.settings.endpoint,
            params={"q": query},
            headers=self._get_headers(),
            timeout=self.settings.timeout_seconds,
        )

    def search(self, query: str) -> List[Record]:
        """
        Fetch the result records for ``query``.

        Args:
            query: Search text, sent as the ``q`` parameter

        Returns:
            The records from the response's ``results`` list

        Raises:
            FetchError: On connection problems, timeouts and HTTP error statuses
            DecodeError: If the body is not a JSON object with a list of results
        """
        start_time = time.monotonic()
        try:
            response = self._get(query)
            response.raise_for_status()
        except requests.RequestException as e:
            status_code = None
            if getattr(e, "response", None) is not None:
                status_code = e.response.status_code
            logger.debug(f"Search request for {query!r} failed: {e}")
            raise FetchError(f"Failed to search {self.settings.endpoint}: {e}", status_code=status_code) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(f"Search response is not valid JSON: {e}") from e

        records = decode_results(payload)
        duration = time.monotonic() - start_time
        logger.info(f"Fetched {len(records)} results for {query!r} in {duration:.2f}s")
        return records


def decode_results(payload: Any) -> List[Record]:
    """
    Extract the ``results`` list from a decoded search response.

    A missing or null ``results`` means no matches. Individual records are
    not validated beyond being JSON objects.
    """
    if not isinstance(payload, dict):
        raise DecodeError(f"Search response must be a JSON object, got {type(payload).__name__}")
    results = payload.get("results")
    if results is None:
        return []
    if not isinstance(results, list):
        raise DecodeError("Search response 'results' must be a list")
    for index, item in enumerate(results):
        if not isinstance(item, dict):
            raise DecodeError(f"Search result {index} must be a JSON object")
    return results


__all__ = ["PackageSearchClient", "decode_results"]
