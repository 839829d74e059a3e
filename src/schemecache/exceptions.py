"""Exception hierarchy for schemecache.

All exceptions inherit from :class:`SchemeCacheError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`schemecache.exit_codes`. The command line entry point in
:func:`schemecache.app.main` catches ``SchemeCacheError`` and exits with the
appropriate code.

Errors raised by the wrapped httpx transport are *not* part of this
hierarchy: :class:`~schemecache.client.CacheTransport` lets them propagate
unchanged so that an :class:`httpx.Client` keeps its usual error contract.

Subclass hierarchy::

    SchemeCacheError (exit 1)
    +-- ConfigError           (exit 1)
    +-- InvalidCacheURLError  (exit 2)
    +-- CacheMissError        (exit 4)
    +-- CacheStorageError     (exit 5)
    +-- UpstreamError         (exit 6)
"""

from __future__ import annotations

from schemecache.exit_codes import (
    EXIT_CACHE_MISS,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_STORAGE_ERROR,
)


class SchemeCacheError(Exception):
    """Base exception for all schemecache errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(SchemeCacheError):
    """Raised for configuration problems (empty cache directory, unset transport)."""

    exit_code = EXIT_GENERIC_FAILURE


class InvalidCacheURLError(SchemeCacheError, ValueError):
    """Raised when a ``cache:`` or ``cachez:`` URL does not wrap an absolute URL."""

    exit_code = EXIT_INVALID_USAGE


class CacheMissError(SchemeCacheError):
    """Raised when a cache-only request finds no entry for its destination.

    Args:
        url: The unwrapped destination URL that had no cached entry.
    """

    exit_code = EXIT_CACHE_MISS

    def __init__(self, url: str):
        super().__init__(f"cache miss for {url}")
        self.url = url


class CacheStorageError(SchemeCacheError):
    """Raised when the cache directory fails for a reason other than a missing entry."""

    exit_code = EXIT_STORAGE_ERROR


class UpstreamError(SchemeCacheError):
    """Raised by the command line when the upstream is unreachable and nothing is cached."""

    exit_code = EXIT_CONNECTION_ERROR
