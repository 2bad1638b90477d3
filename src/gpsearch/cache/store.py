"""File-backed cache of search results keyed by a hash of the query."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
import time
from pathlib import Path
from typing import List, Optional

from gpsearch.config.loader import CacheSettings
from gpsearch.errors import CacheMissError, CacheWriteError
from gpsearch.records import Record
from gpsearch.utils.logging import get_logger

logger = get_logger(__name__)

CACHE_FORMAT_VERSION = 1
SECONDS_PER_HOUR = 3600


def cache_key(query: str) -> str:
    """Return the hex SHA-1 digest used as the on-disk name for ``query``."""
    return hashlib.sha1(query.encode("utf-8")).hexdigest()


class FingerprintCache:
    """
    One JSON file per query under ``settings.cache_dir``.

    An entry's timestamp is its file mtime. Entries older than the timeout
    are stale and are treated exactly like missing ones. Nothing is ever
    deleted here; a fresh fetch overwrites the entry in place.
    """

    def __init__(self, settings: CacheSettings):
        self.settings = settings
        self.cache_dir = Path(settings.cache_dir)
        self.timeout_seconds = settings.timeout_hours * SECONDS_PER_HOUR

    def cache_path(self, query: str) -> Path:
        return self.cache_dir / cache_key(query)

    def age_seconds(self, query: str, now: Optional[float] = None) -> Optional[float]:
        """Age of the entry in seconds, or None when there is no entry."""
        try:
            mtime = self.cache_path(query).stat().st_mtime
        except OSError:
            return None
        current = time.time() if now is None else now
        return current - mtime

    def is_stale(self, query: str, now: Optional[float] = None) -> bool:
        """True when the entry is missing or at least ``timeout`` old."""
        age = self.age_seconds(query, now=now)
        if age is None:
            return True
        return age >= self.timeout_seconds

    def load(self, query: str) -> List[Record]:
        """
        Read the cached records for ``query``.

        Raises:
            CacheMissError: If the entry is absent, unreadable or malformed
        """
        path = self.cache_path(query)
        try:
            with path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
        except FileNotFoundError as e:
            raise CacheMissError(f"Cache file does not exist: {path}") from e
        except (OSError, ValueError) as e:
            raise CacheMissError(f"Cache file {path} is unreadable: {e}") from e

        if not isinstance(payload, dict) or payload.get("version") != CACHE_FORMAT_VERSION:
            raise CacheMissError(f"Cache file {path} has an unknown format")
        records = payload.get("records")
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise CacheMissError(f"Cache file {path} does not hold a record list")
        return records

    def save(self, query: str, records: List[Record]) -> Path:
        """
        Replace the entry for ``query`` with ``records``.

        The payload is written to a temporary file in the cache directory and
        moved into place, so readers never see a partially written entry.

        Raises:
            CacheWriteError: If the entry could not be written
        """
        path = self.cache_path(query)
        payload = {"version": CACHE_FORMAT_VERSION, "query": query, "records": records}
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=self.cache_dir)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            raise CacheWriteError(f"Cannot write cache file {path}: {e}") from e

        logger.debug(f"Cached {len(records)} records for {query!r} at {path}")
        return path


__all__ = ["FingerprintCache", "cache_key"]
