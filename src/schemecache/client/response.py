"""Response construction helpers for :class:`~schemecache.client.CacheTransport`.

Every response handed back by the transport for a wrapped URL is fully
buffered, so callers can read it after the upstream connection is gone.

- :func:`cached_response` -- a synthetic 200 built from a cache entry.
- :func:`buffered_response` -- an upstream 2xx rebuilt around its buffered body.
- :func:`discard` -- release an upstream response whose body is not needed.
"""

from __future__ import annotations

import httpx

from schemecache.models import CACHE_HIT_HEADER, CACHE_HIT_VALUE

# httpx decodes these while buffering, so they no longer describe the body.
_STALE_BODY_HEADERS = ("content-encoding", "transfer-encoding")


def cached_response(request: httpx.Request, body: bytes) -> httpx.Response:
    """Build a 200 response that serves *body* from the cache.

    Args:
        request: The wrapped request being answered.
        body: Cached bytes, returned verbatim.

    Returns:
        An :class:`httpx.Response` marked with ``X-HTTP-Cache: HIT`` whose
        ``Content-Length`` equals ``len(body)``.
    """
    return httpx.Response(
        status_code=200,
        headers={
            CACHE_HIT_HEADER: CACHE_HIT_VALUE,
            "Content-Length": str(len(body)),
        },
        content=body,
        request=request,
    )


def buffered_response(
    request: httpx.Request,
    response: httpx.Response,
    body: bytes,
) -> httpx.Response:
    """Rebuild an upstream *response* around its already-buffered *body*.

    Status, headers and extensions are preserved; ``Content-Length`` is set
    to the buffered size.

    Args:
        request: The upstream request that produced *response*.
        response: The upstream response whose body has been read.
        body: The decoded body bytes.
    """
    headers = response.headers.copy()
    for name in _STALE_BODY_HEADERS:
        if name in headers:
            del headers[name]
    headers["Content-Length"] = str(len(body))

    return httpx.Response(
        status_code=response.status_code,
        headers=headers,
        content=body,
        request=request,
        extensions=response.extensions,
    )


def discard(response: httpx.Response) -> None:
    """Close *response* without reading the rest of its body."""
    response.close()
