"""Wrapped-URL unwrapping and cache key derivation.

A wrapped URL is a synthetic scheme marker prefixed onto an absolute URL,
with no slashes after the colon::

    cache:https://example.com/feed.xml
    cachez:https://example.com/feed.xml

Both forms share one cache entry: keys are SHA-256 hashes of the
destination URL, and a URL that still carries a synthetic marker has it
normalised to ``http`` before hashing.

The destination is parsed by :class:`httpx.URL`, which removes dot
segments from the path: ``cache:https://example.com/a/../b`` is requested
and keyed as ``https://example.com/b``.
"""

from __future__ import annotations

import hashlib

import httpx

from schemecache.exceptions import InvalidCacheURLError
from schemecache.models import CACHE_ONLY_SCHEME, CANONICAL_SCHEME, VALIDATING_SCHEME


def unwrap_url(url: httpx.URL | str, scheme: str) -> httpx.URL:
    """Strip a ``<scheme>:`` prefix and parse the remaining destination URL.

    Args:
        url: The wrapped request URL.
        scheme: The synthetic scheme expected at the front of *url*.

    Returns:
        The destination URL as an :class:`httpx.URL`.

    Raises:
        InvalidCacheURLError: If *url* does not start with the prefix, has
            nothing after it, or the remainder is not an absolute URL.
    """
    raw = str(url)
    prefix = f"{scheme}:"
    if not raw.startswith(prefix):
        raise InvalidCacheURLError(f"url does not start with {prefix} prefix")

    target_raw = raw[len(prefix):]
    if not target_raw:
        raise InvalidCacheURLError(f"missing downstream URL after {prefix} prefix")

    try:
        target = httpx.URL(target_raw)
    except httpx.InvalidURL as exc:
        raise InvalidCacheURLError(f"parse downstream URL: {exc}") from exc
    if not target.scheme:
        raise InvalidCacheURLError("downstream URL must include scheme")

    return target


def cache_key(url: httpx.URL | str) -> str:
    """Return the 64-character hex cache key for a destination URL."""
    key_url = httpx.URL(url)
    if key_url.scheme in (VALIDATING_SCHEME, CACHE_ONLY_SCHEME):
        key_url = key_url.copy_with(scheme=CANONICAL_SCHEME)
    return hashlib.sha256(str(key_url).encode()).hexdigest()
