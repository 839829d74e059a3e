"""An httpx transport that serves ``cache:`` and ``cachez:`` URLs from disk.

:class:`CacheTransport` decorates another :class:`httpx.BaseTransport` and
routes each request on its scheme:

- ``cache:<url>`` -- **validating fetch**.  The destination is requested
  upstream with ``If-Modified-Since`` taken from the cached entry's
  modification time.  A fresh 2xx body replaces the entry; a 304, any
  other status, or a transport failure is answered from the entry when
  one exists.
- ``cachez:<url>`` -- **cache-only fetch**.  The entry is returned, or
  :class:`~schemecache.exceptions.CacheMissError` is raised.  The wrapped
  transport is never called.
- anything else -- forwarded unchanged to the wrapped transport.

Responses synthesised from the cache are 200s carrying ``X-HTTP-Cache: HIT``.

Because httpx treats host-less URLs as relative, wrapped URLs must be sent
as prebuilt requests (see :func:`fetch`) rather than via ``client.get()``.

Example::

    from schemecache.client import create_client, fetch

    with create_client("~/.cache/feeds") as client:
        resp = fetch(client, "cache:https://example.com/feed.xml")
        offline = fetch(client, "cachez:https://example.com/feed.xml")
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import Any, MutableMapping, Optional

import httpx

from schemecache.cache import CacheStore, FileCacheStore, cache_key, unwrap_url
from schemecache.client.response import buffered_response, cached_response, discard
from schemecache.exceptions import CacheMissError, CacheStorageError, ConfigError
from schemecache.models import (
    CACHE_ONLY_SCHEME,
    VALIDATING_SCHEME,
    CacheConfig,
    SchemeKind,
    classify_scheme,
)

logger = logging.getLogger(__name__)

CONDITIONAL_HEADER = "If-Modified-Since"

# Headers that describe the wrapped request rather than the destination.
_RETARGET_DROP_HEADERS = ("host", "transfer-encoding")


class CacheTransport(httpx.BaseTransport):
    """Transport decorator adding file-backed caching for two synthetic schemes.

    Args:
        config: Cache configuration; ``config.directory`` must be non-empty.
        original: The transport that performs real network requests.
            Defaults to a new :class:`httpx.HTTPTransport`.
        store: Storage backend.  Defaults to a :class:`FileCacheStore`
            rooted at ``config.directory``, which is created if missing.

    Raises:
        ConfigError: If the cache directory is empty or cannot be created.
    """

    def __init__(
        self,
        config: CacheConfig,
        original: Optional[httpx.BaseTransport] = None,
        store: Optional[CacheStore] = None,
    ) -> None:
        if not config.directory:
            raise ConfigError("cache directory is required")
        self._config = config
        self._store = store if store is not None else FileCacheStore(config.path)
        self._original = original if original is not None else httpx.HTTPTransport()

    @property
    def store(self) -> CacheStore:
        """The storage backend holding cache entries."""
        return self._store

    # ------------------------------------------------------------------ #
    # httpx.BaseTransport
    # ------------------------------------------------------------------ #

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        if self._original is None:
            raise ConfigError("original transport is not set")

        kind = classify_scheme(request.url.scheme)
        if kind is SchemeKind.VALIDATING:
            return self._handle_with_validation(request)
        if kind is SchemeKind.CACHE_ONLY:
            return self._handle_cache_only(request)
        return self._original.handle_request(request)

    def close(self) -> None:
        if self._original is not None:
            self._original.close()

    # ------------------------------------------------------------------ #
    # Fetch modes
    # ------------------------------------------------------------------ #

    def _handle_with_validation(self, request: httpx.Request) -> httpx.Response:
        target = unwrap_url(request.url, VALIDATING_SCHEME)
        key = cache_key(target)
        entry = self._store.read(key)

        upstream_request = _retarget(request, target)
        if entry is not None and CONDITIONAL_HEADER not in upstream_request.headers:
            upstream_request.headers[CONDITIONAL_HEADER] = http_date(entry.modified)

        try:
            response = self._original.handle_request(upstream_request)
        except httpx.TransportError as exc:
            if entry is None:
                raise
            logger.debug("Upstream failed for %s, serving cached copy: %s", target, exc)
            return cached_response(request, entry.body)

        if entry is not None and response.status_code == httpx.codes.NOT_MODIFIED:
            logger.debug("Not modified: %s", target)
            discard(response)
            return cached_response(request, entry.body)

        if response.is_success:
            try:
                body = _read_body(response)
            except (httpx.RequestError, httpx.StreamError) as exc:
                if entry is None:
                    raise
                logger.debug("Reading %s failed, serving cached copy: %s", target, exc)
                return cached_response(request, entry.body)

            self._write_quietly(key, body, target)
            return buffered_response(upstream_request, response, body)

        if entry is not None:
            logger.debug(
                "Upstream returned %d for %s, serving cached copy",
                response.status_code,
                target,
            )
            discard(response)
            return cached_response(request, entry.body)

        return response

    def _handle_cache_only(self, request: httpx.Request) -> httpx.Response:
        target = unwrap_url(request.url, CACHE_ONLY_SCHEME)
        entry = self._store.read(cache_key(target))
        if entry is None:
            raise CacheMissError(str(target))
        logger.debug("Cache hit: %s", target)
        return cached_response(request, entry.body)

    def _write_quietly(self, key: str, body: bytes, target: httpx.URL) -> None:
        """Store *body*; a failure is logged and otherwise ignored."""
        try:
            self._store.write(key, body)
        except (CacheStorageError, OSError) as exc:
            logger.warning("Could not cache %s: %s", target, exc)


# ---------------------------------------------------------------------- #
# Registration helpers
# ---------------------------------------------------------------------- #


def add_cache_transport(
    cache_dir: str | Path,
    original: Optional[httpx.BaseTransport],
    mounts: Optional[MutableMapping[str, Optional[httpx.BaseTransport]]],
) -> CacheTransport:
    """Bind one :class:`CacheTransport` to the ``cache://`` and ``cachez://`` mounts.

    Other keys in *mounts* are left alone, so every other scheme keeps
    going wherever it went before.

    Args:
        cache_dir: Root directory for cache entries.
        original: Transport performing real requests (``None`` for the
            httpx default).
        mounts: The mapping later passed as ``httpx.Client(mounts=...)``.

    Returns:
        The registered transport.

    Raises:
        ConfigError: If *mounts* is ``None`` or *cache_dir* is empty.
    """
    if mounts is None:
        raise ConfigError("mounts mapping is required")

    transport = CacheTransport(CacheConfig(directory=cache_dir), original)
    mounts[f"{VALIDATING_SCHEME}://"] = transport
    mounts[f"{CACHE_ONLY_SCHEME}://"] = transport
    return transport


def create_client(
    cache_dir: str | Path,
    original: Optional[httpx.BaseTransport] = None,
    **client_kwargs: Any,
) -> httpx.Client:
    """Create an :class:`httpx.Client` that understands wrapped URLs.

    *original* becomes the client's default transport, so plain ``http``
    and ``https`` requests behave exactly as they would without caching.

    Args:
        cache_dir: Root directory for cache entries.
        original: Transport performing real requests.  TLS and pool
            settings belong on this transport.
        **client_kwargs: Forwarded to :class:`httpx.Client`.  Any
            ``mounts`` given here are kept alongside the cache mounts.
    """
    upstream = original if original is not None else httpx.HTTPTransport()
    mounts: dict[str, Optional[httpx.BaseTransport]] = dict(client_kwargs.pop("mounts", None) or {})
    add_cache_transport(cache_dir, upstream, mounts)
    return httpx.Client(transport=upstream, mounts=mounts, **client_kwargs)


def fetch(
    client: httpx.Client,
    url: str,
    method: str = "GET",
    headers: Optional[dict[str, str]] = None,
) -> httpx.Response:
    """Send *url* through *client* without base-URL merging.

    The client's default headers are applied first; *headers* override them.
    """
    merged = client.headers.copy()
    merged.update(headers or {})
    return client.send(httpx.Request(method, url, headers=merged))


def http_date(moment: datetime) -> str:
    """Format *moment* as an HTTP date in GMT, e.g. ``Fri, 02 Jan 2026 03:04:05 GMT``."""
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


# ---------------------------------------------------------------------- #
# Private helpers
# ---------------------------------------------------------------------- #


def _retarget(request: httpx.Request, url: httpx.URL) -> httpx.Request:
    """Copy *request* with *url* as its destination."""
    headers = request.headers.copy()
    for name in _RETARGET_DROP_HEADERS:
        if name in headers:
            del headers[name]
    return httpx.Request(
        method=request.method,
        url=url,
        headers=headers,
        content=request.read(),
        extensions=dict(request.extensions),
    )


def _read_body(response: httpx.Response) -> bytes:
    try:
        return response.read()
    finally:
        response.close()
