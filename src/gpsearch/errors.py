"""Error types raised across the search pipeline.

Cache errors are recoverable and never escape the orchestrator. Fetch,
decode and config errors are fatal for the current invocation.
"""

from typing import Optional


class GpsearchError(Exception):
    """Base class for all gpsearch errors."""


class CacheMissError(GpsearchError):
    """No usable cache entry exists for a query."""


class CacheWriteError(GpsearchError):
    """A cache entry could not be written."""


class FetchError(GpsearchError):
    """The upstream search request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(GpsearchError):
    """The upstream response could not be decoded into records."""


class ConfigError(GpsearchError):
    """Configuration is unusable (bad cache directory, malformed config file)."""


__all__ = [
    "CacheMissError",
    "CacheWriteError",
    "ConfigError",
    "DecodeError",
    "FetchError",
    "GpsearchError",
]
