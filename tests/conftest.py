"""
Shared test fixtures for the uritpl test suite.
"""

import os

import pytest

from uritpl.cache import set_global_cache
from uritpl.config import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test with default settings and a fresh global cache."""
    for key in list(os.environ):
        if key.startswith("URITPL_"):
            monkeypatch.delenv(key)
    reset_settings()
    set_global_cache(None)
    yield
    reset_settings()
    set_global_cache(None)


# ============================================================================
# RFC 6570 section 3.2 example variables
# ============================================================================

RFC_VALUES = {
    "count": ["one", "two", "three"],
    "dom": ["example", "com"],
    "dub": "me/too",
    "hello": "Hello World!",
    "half": "50%",
    "var": "value",
    "who": "fred",
    "base": "http://example.com/home/",
    "path": "/foo/bar",
    "list": ["red", "green", "blue"],
    "keys": {"semi": ";", "dot": ".", "comma": ","},
    "v": "6",
    "x": "1024",
    "y": "768",
    "empty": "",
    "empty_keys": {},
    "undef": None,
}


@pytest.fixture
def rfc_values():
    """Example variable bindings from RFC 6570 section 3.2."""
    return dict(RFC_VALUES)
