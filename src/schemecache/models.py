"""Canonical models and constants shared across schemecache modules.

**Scheme markers** -- the two synthetic schemes recognised by
:class:`~schemecache.client.CacheTransport` and the closed
:class:`SchemeKind` enum the transport dispatches on.

**Configuration** -- :class:`CacheConfig`, the explicit caller-constructed
object that carries the storage root into the transport.

**Storage** -- :class:`CacheEntry`, the value returned by a
:class:`~schemecache.cache.CacheStore` read.
"""

from __future__ import annotations

import enum
import os
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


VALIDATING_SCHEME = "cache"
"""Scheme marker for requests revalidated against upstream."""

CACHE_ONLY_SCHEME = "cachez"
"""Scheme marker for requests served strictly from the cache."""

CANONICAL_SCHEME = "http"
"""Scheme that synthetic markers are normalised to before hashing a cache key."""

CACHE_HIT_HEADER = "X-HTTP-Cache"
"""Response header set on every response synthesised from a cache entry."""

CACHE_HIT_VALUE = "HIT"
"""Value of :data:`CACHE_HIT_HEADER` on responses served from the cache."""


class SchemeKind(str, enum.Enum):
    """How :class:`~schemecache.client.CacheTransport` handles a request scheme."""

    VALIDATING = VALIDATING_SCHEME
    CACHE_ONLY = CACHE_ONLY_SCHEME
    PASSTHROUGH = "passthrough"


def classify_scheme(scheme: str) -> SchemeKind:
    """Map a request scheme to the :class:`SchemeKind` that handles it.

    Scheme matching is exact; httpx already lowercases parsed schemes.
    """
    if scheme == VALIDATING_SCHEME:
        return SchemeKind.VALIDATING
    if scheme == CACHE_ONLY_SCHEME:
        return SchemeKind.CACHE_ONLY
    return SchemeKind.PASSTHROUGH


class CacheConfig(BaseModel):
    """Where cache entries live.

    The directory is kept as the caller supplied it; an empty value is
    rejected when the transport is built.
    """

    directory: str = Field(description="Root directory for cache entries")

    @field_validator("directory", mode="before")
    @classmethod
    def _coerce_path(cls, value: object) -> object:
        if isinstance(value, os.PathLike):
            return os.fspath(value)
        return value

    @property
    def path(self) -> Path:
        """The cache directory as a :class:`~pathlib.Path`."""
        return Path(self.directory).expanduser()


class CacheEntry(BaseModel):
    """A cached response body and the time it was last written."""

    model_config = ConfigDict(frozen=True)

    body: bytes
    modified: datetime = Field(description="Timezone-aware modification time (UTC)")
