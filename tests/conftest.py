"""Shared test fixtures for schemecache.

Provides a recording upstream transport, a temporary cache directory, and
output/logging isolation.  These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import httpx
import pytest

from schemecache.cache import FileCacheStore, cache_key
from schemecache.output import OutputManager, reset_output, set_output


Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.BaseTransport):
    """Upstream fake that counts calls and delegates to ``handler``.

    With no handler set, every request gets an empty 200.
    """

    def __init__(self, handler: Optional[Handler] = None) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        return httpx.Response(200, content=b"", request=request)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _quiet_output() -> None:
    """Install a quiet, colourless OutputManager and reset it afterwards."""
    set_output(OutputManager(no_color=True, quiet=True))
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Cache fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """A not-yet-created cache directory under tmp_path."""
    return tmp_path / "cache"


@pytest.fixture
def upstream() -> RecordingTransport:
    """A recording upstream transport with no handler."""
    return RecordingTransport()


@pytest.fixture
def seed_entry(cache_dir: Path) -> Callable[..., Path]:
    """Write a cache entry for a destination URL and return its path.

    Usage::

        path = seed_entry("https://example.com/data", b"cached", modified=dt)
    """

    def _seed(url: str, body: bytes, modified: Optional[datetime] = None) -> Path:
        store = FileCacheStore(cache_dir)
        key = cache_key(url)
        store.write(key, body)
        path = store.path_for(key)
        if modified is not None:
            ts = modified.timestamp()
            os.utime(path, (ts, ts))
        return path

    return _seed


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CACHE_HOME into tmp_path and clear SCHEMECACHE_DIR."""
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
    monkeypatch.delenv("SCHEMECACHE_DIR", raising=False)
    return tmp_path


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
