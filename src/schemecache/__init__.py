"""schemecache -- transparent file-backed caching for httpx.

Requests for ``cache:<url>`` are revalidated against ``<url>`` with
``If-Modified-Since`` and fall back to the cached copy whenever upstream
fails or reports no change.  Requests for ``cachez:<url>`` are answered
from the cache alone.  Every other URL passes straight through.

Typical usage::

    from schemecache import create_client, fetch

    with create_client("~/.cache/feeds") as client:
        fetch(client, "cache:https://example.com/feed.xml")

Modules:
    app: Typer command line (``schemecache fetch``, ``key``, ``path``).
    cache: Cache key derivation and file-backed entry storage.
    client: The :class:`CacheTransport` decorator and client helpers.
    config: XDG-aware cache directory resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes for the command line.
    models: Pydantic models, enums and scheme constants.
    output: stdout/stderr formatting for the command line.
"""

__version__ = "0.1.0"

from schemecache.client import CacheTransport, add_cache_transport, create_client, fetch  # noqa: E402
from schemecache.models import CacheConfig  # noqa: E402

__all__ = [
    "CacheConfig",
    "CacheTransport",
    "__version__",
    "add_cache_transport",
    "create_client",
    "fetch",
]
