"""httpx transport layer for schemecache.

Classes:
    :class:`CacheTransport` -- decorates any :class:`httpx.BaseTransport`
    and handles ``cache:`` (validating) and ``cachez:`` (cache-only) URLs.

Functions:
    :func:`add_cache_transport` -- register a transport on a mounts mapping.
    :func:`create_client` -- build an :class:`httpx.Client` with the mounts.
    :func:`fetch` -- send a wrapped URL through a client.

Example::

    from schemecache.client import create_client, fetch

    with create_client("/var/cache/feeds") as client:
        resp = fetch(client, "cache:https://example.com/feed.xml")
"""

from schemecache.client.transport import (
    CacheTransport,
    add_cache_transport,
    create_client,
    fetch,
)

__all__ = ["CacheTransport", "add_cache_transport", "create_client", "fetch"]
