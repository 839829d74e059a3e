"""Cache directory resolution with XDG paths and precedence rules.

* **Default location** -- XDG Base Directory compliant on Linux/BSD
  (``$XDG_CACHE_HOME/schemecache``), ``~/.schemecache/cache`` on macOS and
  Windows.  See :func:`get_cache_dir`.
* **Precedence** -- :func:`resolve_cache_dir` picks the first of: an
  explicit value (``--cache-dir``), the ``SCHEMECACHE_DIR`` environment
  variable, the default location.

The library itself never consults this module;
:class:`~schemecache.client.CacheTransport` always takes its directory from
the :class:`~schemecache.models.CacheConfig` it is given.
"""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Optional

from schemecache.exceptions import ConfigError
from schemecache.models import CacheConfig

_APP_NAME = "schemecache"
_ENV_CACHE_DIR = "SCHEMECACHE_DIR"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports the XDG Base Directory layout (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def get_cache_dir() -> Path:
    """Return the default cache directory.

    On Linux/BSD: ``$XDG_CACHE_HOME/schemecache/`` (default
    ``~/.cache/schemecache/``).  On macOS/Windows: ``~/.schemecache/cache/``.

    The directory is not created here; :class:`~schemecache.cache.FileCacheStore`
    creates it on first use.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CACHE_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".cache"
        return base / _APP_NAME
    return _fallback_base_dir() / "cache"


# --- Precedence resolution ---


def resolve_cache_dir(explicit: Optional[str] = None) -> Path:
    """Resolve the effective cache directory.

    Args:
        explicit: A directory given on the command line, or ``None``.

    Returns:
        The chosen directory with ``~`` expanded.

    Raises:
        ConfigError: If *explicit* or ``SCHEMECACHE_DIR`` is set but empty.
    """
    if explicit is not None:
        if not explicit.strip():
            raise ConfigError("cache directory is required")
        return Path(explicit).expanduser()

    env_value = os.environ.get(_ENV_CACHE_DIR)
    if env_value is not None:
        if not env_value.strip():
            raise ConfigError(f"{_ENV_CACHE_DIR} is set but empty")
        return Path(env_value).expanduser()

    return get_cache_dir()


def resolve_cache_config(explicit: Optional[str] = None) -> CacheConfig:
    """Build a :class:`~schemecache.models.CacheConfig` from :func:`resolve_cache_dir`."""
    return CacheConfig(directory=resolve_cache_dir(explicit))
