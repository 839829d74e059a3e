"""Typer application and CLI entry point for schemecache.

Commands:

- ``schemecache fetch URL`` -- send one request through a caching client
  and write the body to stdout (or ``-o FILE``).
- ``schemecache key URL`` -- print the cache key for a URL.
- ``schemecache path URL`` -- print where the entry for a URL is stored.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.  :class:`~schemecache.exceptions.SchemeCacheError`
instances end the process with their ``exit_code``.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from typing import Iterator, List, Optional

import httpx
import typer

from schemecache import __version__
from schemecache.cache import cache_key, unwrap_url
from schemecache.client import create_client, fetch
from schemecache.config import resolve_cache_config, resolve_cache_dir
from schemecache.exceptions import InvalidCacheURLError, SchemeCacheError, UpstreamError
from schemecache.exit_codes import EXIT_GENERIC_FAILURE, EXIT_HTTP_ERROR, EXIT_INVALID_USAGE
from schemecache.models import CACHE_HIT_HEADER, SchemeKind, classify_scheme
from schemecache.output import OutputManager, debug, error, get_output, print_data, set_output


app = typer.Typer(
    name="schemecache",
    help="Fetch cache: and cachez: URLs through a revalidating file cache.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_log_handler: Optional[logging.Handler] = None
_saved_log_level: int = logging.NOTSET


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"schemecache {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~schemecache.output.OutputManager` and, with
    ``--verbose``, routes the library's debug log to stderr.
    """
    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)


@app.command("fetch")
def fetch_command(
    url: str = typer.Argument(..., help="URL to fetch, e.g. cache:https://example.com/data."),
    cache_dir: Optional[str] = typer.Option(
        None, "--cache-dir", "-d", help="Cache directory (default: $SCHEMECACHE_DIR or XDG cache)."
    ),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method."),
    header: Optional[List[str]] = typer.Option(
        None, "--header", "-H", help="Extra request header as 'Name: value'. Repeatable."
    ),
    include: bool = typer.Option(
        False, "--include", "-i", help="Print status line and headers to stderr."
    ),
    output_file: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the body to this file instead of stdout."
    ),
) -> None:
    """Fetch URL and write the response body.

    Exits 3 when the final status is not 2xx (the body is still written).
    """
    headers = _parse_headers(header or [])
    output = get_output()

    with _handle_errors():
        config = resolve_cache_config(cache_dir)
        debug(f"Cache directory: {config.path}")
        with create_client(config.directory) as client:
            try:
                response = fetch(client, url, method=method.upper(), headers=headers)
            except httpx.TransportError as exc:
                raise UpstreamError(f"upstream request failed: {exc}") from exc

        if response.headers.get(CACHE_HIT_HEADER):
            debug("Served from cache")
        if include:
            status_line = f"HTTP {response.status_code} {response.reason_phrase}".rstrip()
            output.print_headers(status_line, list(response.headers.items()))

        output.write_body(response.content, path=output_file)

        if not response.is_success:
            raise SchemeCacheError(f"HTTP {response.status_code}", exit_code=EXIT_HTTP_ERROR)


@app.command("key")
def key_command(
    url: str = typer.Argument(..., help="Destination URL, wrapped or plain."),
) -> None:
    """Print the cache key for URL."""
    with _handle_errors():
        print_data(cache_key(_destination(url)))


@app.command("path")
def path_command(
    url: str = typer.Argument(..., help="Destination URL, wrapped or plain."),
    cache_dir: Optional[str] = typer.Option(
        None, "--cache-dir", "-d", help="Cache directory (default: $SCHEMECACHE_DIR or XDG cache)."
    ),
) -> None:
    """Print the file that holds (or would hold) the cache entry for URL."""
    with _handle_errors():
        print_data(str(resolve_cache_dir(cache_dir) / cache_key(_destination(url))))


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


@contextlib.contextmanager
def _handle_errors() -> Iterator[None]:
    """Report a :class:`SchemeCacheError` (or a bad URL) and exit with its code."""
    try:
        yield
    except SchemeCacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except httpx.InvalidURL as exc:
        error(f"invalid URL: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from exc


def _destination(url: str) -> httpx.URL:
    """Unwrap *url* if it carries a synthetic scheme marker."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise InvalidCacheURLError(f"invalid URL: {exc}") from exc
    kind = classify_scheme(parsed.scheme)
    if kind is SchemeKind.PASSTHROUGH:
        return parsed
    return unwrap_url(parsed, kind.value)


def _parse_headers(values: List[str]) -> dict[str, str]:
    """Parse repeated ``Name: value`` options into a dict."""
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise typer.BadParameter(f"expected 'Name: value', got {raw!r}", param_hint="--header")
        headers[name.strip()] = value.strip()
    return headers


def _configure_logging(verbose: bool) -> None:
    """Attach (or detach) a stderr handler on the ``schemecache`` logger.

    Detaching also restores the logger level that was in place before the
    handler was attached.
    """
    global _log_handler, _saved_log_level
    logger = logging.getLogger("schemecache")
    if _log_handler is not None:
        logger.removeHandler(_log_handler)
        logger.setLevel(_saved_log_level)
        _log_handler = None
    if not verbose:
        return

    _saved_log_level = logger.level
    _log_handler = logging.StreamHandler(sys.stderr)
    _log_handler.setFormatter(logging.Formatter("[debug] %(name)s: %(message)s"))
    logger.addHandler(_log_handler)
    logger.setLevel(logging.DEBUG)


def main() -> None:
    """CLI entry point invoked by the ``schemecache`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        if isinstance(exc, SchemeCacheError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
