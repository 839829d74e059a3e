"""Numeric process exit codes for the ``schemecache`` command line.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~schemecache.exceptions.SchemeCacheError` subclass.
Shell scripts can inspect the exit code to tell a cache miss apart from
an unreachable upstream without parsing stderr.

Example::

    $ schemecache fetch cachez:https://example.com/feed.xml
    $ echo $?
    4   # EXIT_CACHE_MISS -- nothing cached for that destination
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or a malformed wrapped URL."""

EXIT_HTTP_ERROR = 3
"""The final response carried a non-2xx status."""

EXIT_CACHE_MISS = 4
"""A cache-only request found no entry for its destination."""

EXIT_STORAGE_ERROR = 5
"""The cache directory could not be read or written."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred and no cached copy was available."""
