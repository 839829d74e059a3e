"""Cache key derivation and file-backed entry storage.

This package provides the substrate shared by both fetch modes of
:class:`~schemecache.client.CacheTransport`:

- :func:`unwrap_url` and :func:`cache_key` turn a wrapped ``cache:`` or
  ``cachez:`` URL into a destination URL and a stable 64-character hex key.
- :class:`CacheStore` is the storage seam; :class:`FileCacheStore` keeps one
  file per key and writes atomically via temp-file-then-rename.
"""

from schemecache.cache.keys import cache_key, unwrap_url
from schemecache.cache.store import CacheStore, FileCacheStore

__all__ = ["CacheStore", "FileCacheStore", "cache_key", "unwrap_url"]
