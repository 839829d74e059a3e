"""Command-line output for schemecache.

stdout carries only what the command produces: a response body (written
as raw bytes so binary payloads survive a pipe), a cache key, or a path.
Everything else, including status lines, headers, errors and debug
notes, goes to stderr.  Colour is turned off by ``--no-color``,
``NO_COLOR`` or ``TERM=dumb``.

:class:`OutputManager` is built once per invocation in
:func:`~schemecache.app.main_callback` and installed with
:func:`set_output`; the module-level :func:`print_data`, :func:`error`
and :func:`debug` forward to it.
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from rich.console import Console
from rich.table import Table


class OutputManager:
    """Routes command output to stdout and diagnostics to stderr.

    Args:
        no_color: Disable colour and Rich markup on stderr.
        quiet: Hide the status line and headers printed by ``--include``.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print one line of command output."""
        print(text, file=sys.stdout, flush=True)

    def write_body(self, data: bytes, path: Optional[str] = None) -> None:
        """Write a response body unchanged to *path*, or to stdout when *path* is empty."""
        if path:
            with open(path, "wb") as f:
                f.write(data)
            return

        stream = getattr(sys.stdout, "buffer", None)
        if stream is None:
            # Text-only stdout (e.g. a test runner's capture buffer).
            sys.stdout.write(data.decode("utf-8", errors="replace"))
            sys.stdout.flush()
        else:
            stream.write(data)
            stream.flush()

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def print_headers(self, status_line: str, headers: list[tuple[str, str]]) -> None:
        """Show a status line followed by the response headers.

        With colour the headers form a two-column table; without it they
        are ``name: value`` lines.  Nothing is printed in quiet mode.
        """
        if self._quiet:
            return
        if self._no_color:
            lines = [status_line] + [f"{name}: {value}" for name, value in headers]
            print("\n".join(lines), file=sys.stderr, flush=True)
            return

        self._stderr.print(status_line, style="bold", highlight=False)
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Header")
        table.add_column("Value")
        for name, value in headers:
            table.add_row(name, value)
        self._stderr.print(table)

    def error(self, message: str) -> None:
        """Report an error.  Shown even in quiet mode."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {message}")

    def debug(self, message: str) -> None:
        if not self._verbose:
            return
        if self._no_color:
            print(f"[debug] {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[dim]\\[debug] {message}[/dim]")


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one if needed."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed :class:`OutputManager` (used between tests)."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
