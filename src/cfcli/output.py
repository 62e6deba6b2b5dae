"""Terminal output for cfcli.

API responses are meant to be piped into ``jq`` and friends, so the two
streams are kept apart:

* **stdout** receives response bodies, listings and written paths, nothing
  else.
* **stderr** receives progress lines, dry-run requests, warnings, errors and
  debug output, rendered through a Rich console unless colour is off
  (``--no-color``, ``NO_COLOR`` or ``TERM=dumb``).

The root callback builds one :class:`OutputManager` from the global flags
and installs it with :func:`set_output`; the rest of the package calls the
module-level shortcuts (:func:`info`, :func:`print_json`, ...).
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape


class OutputManager:
    """Writes data to stdout and diagnostics to stderr for one invocation.

    Args:
        pretty: Indent JSON written by :meth:`print_json`.
        no_color: Print diagnostics as plain text.
        quiet: Drop info, success and suggestion lines.
        verbose: Show debug lines.
    """

    def __init__(
        self,
        pretty: bool = False,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._pretty = pretty
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
            highlight=False,
            soft_wrap=True,
        )

    @property
    def pretty(self) -> bool:
        """Whether JSON output is indented."""
        return self._pretty

    @property
    def is_quiet(self) -> bool:
        """``--quiet`` was given."""
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        """``--verbose`` was given."""
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print one line of raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any, pretty: Optional[bool] = None) -> None:
        """Print *data* as JSON to stdout.

        Args:
            data: Any JSON-serialisable value.
            pretty: Override the manager's ``pretty`` setting for this call.
        """
        indent = 2 if (self._pretty if pretty is None else pretty) else None
        self.print_data(json.dumps(data, indent=indent, ensure_ascii=False, default=str))

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(escape(message), message)

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(f"[green]{escape(message)}[/green]", message)

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. NOT suppressed by ``--quiet``."""
        self._emit(f"[yellow]Warning:[/yellow] {escape(message)}", f"Warning: {message}")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed."""
        self._emit(f"[bold red]Error:[/bold red] {escape(message)}", f"Error: {message}")

    def suggest(self, message: str) -> None:
        """Print a dimmed next-step suggestion to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            formatted = f"→ {message}"
            self._emit(f"[dim]{escape(formatted)}[/dim]", formatted)

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--verbose`` is active."""
        if self._verbose:
            self._emit(f"[dim]\\[debug] {escape(message)}[/dim]", f"[debug] {message}")

    def _emit(self, markup: str, plain: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _should_disable_color() -> bool:
    """``NO_COLOR`` (any value, even empty) or ``TERM=dumb`` turn colour off."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Installed manager
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Drop the installed manager; the next :func:`get_output` builds a fresh one."""
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Shortcuts bound to the installed manager
# ------------------------------------------------------------------ #


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_json(data: Any, pretty: Optional[bool] = None) -> None:
    get_output().print_json(data, pretty)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
