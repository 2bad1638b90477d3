"""Pytest configuration and fixtures."""

import logging

import pytest

from gpsearch.cache.store import FingerprintCache
from gpsearch.config.loader import CacheSettings


@pytest.fixture
def cache_settings(tmp_path):
    """Cache settings pointing at a fresh temporary directory."""
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    return CacheSettings(cache_dir=cache_dir, timeout_hours=2)


@pytest.fixture
def cache(cache_settings):
    return FingerprintCache(cache_settings)


@pytest.fixture
def sample_records():
    """Search results shaped like the godoc.org API, with uneven fields."""
    return [
        {
            "name": "client",
            "path": "github.com/micro/go-micro/client",
            "import_count": 971,
            "synopsis": "Package client is an interface for an RPC client",
            "stars": 10770,
            "score": 0.99,
        },
        {
            "name": "registry",
            "path": "github.com/micro/go-micro/registry",
            "import_count": 717,
            "synopsis": "Package mdns is a multicast dns registry",
            "stars": 10750,
            "score": 0.99,
            "fork": True,
        },
        {
            "name": "mux",
            "path": "github.com/gorilla/mux",
            "import_count": 22000,
            "synopsis": "Package mux implements a request router and dispatcher.",
        },
        {
            "path": "example.com/undocumented",
        },
    ]


@pytest.fixture(autouse=True)
def reset_gpsearch_logging():
    """Drop handlers installed by configure_logging so they don't outlive capsys streams."""
    yield
    logger = logging.getLogger("gpsearch")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
