"""Output formatting for the swank CLI.

Data and diagnostics never share a stream:

* **stdout** carries what a caller asked for -- violation lines, grouped
  path tables, tag lists, JSON reports -- so it can be piped and parsed.
* **stderr** carries everything else: progress while a document loads,
  the validation summary, warnings, errors, debug traces and log records.

``AUTO`` format resolves to Rich when stdout is a terminal and colour is
allowed (``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` all disable it),
and to plain tab-separated text otherwise.

:class:`OutputManager` holds the resolved preferences; it is created in
:func:`~swank.app.main_callback` and installed with :func:`set_output`.
The module-level functions forward to the installed manager.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """Output formats selectable with ``--json`` / ``--plain`` or config."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Render command results on stdout and diagnostics on stderr.

    Args:
        format: Requested format; ``AUTO`` is resolved at construction.
        no_color: Disable colour and Rich markup.
        quiet: Hide info, success and progress messages.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format is OutputFormat.AUTO:
            rich = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format is OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_json(self) -> bool:
        return self._format is OutputFormat.JSON

    @property
    def stderr_console(self) -> Console:
        """The stderr console, shared with the CLI's log handler."""
        return self._stderr

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Write one line of raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Write a tag list, grouped paths, report or config dump to stdout."""
        if self._format is OutputFormat.JSON:
            self.print_data(_dumps(data, indent=2))
        elif self._format is OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
        elif isinstance(data, (dict, list)):
            syntax = Syntax(_dumps(data, indent=2), "json", theme="monokai", word_wrap=True)
            self._stdout.print(syntax)
        else:
            self._stdout.print(str(data))

    def print_violations(self, errors: Iterable[str]) -> None:
        """Write validation errors to stdout, one per line.

        Rich mode numbers them; markup in the messages is not interpreted.
        """
        for index, message in enumerate(errors, start=1):
            if self._format is OutputFormat.RICH:
                self._stdout.print(f"[red]{index:>3}.[/red] ", end="")
                self._stdout.print(message, markup=False, highlight=False)
            else:
                self.print_data(message)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows to stdout as records (JSON), TSV (plain) or a Rich table."""
        if self._format is OutputFormat.JSON:
            self.print_data(_dumps([dict(zip(headers, row)) for row in rows], indent=2))
            return
        if self._format is OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diag(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diag(message, style="green")

    def warning(self, message: str) -> None:
        """Warnings survive ``--quiet``."""
        self._diag(message, prefix="Warning:", prefix_style="yellow")

    def error(self, message: str) -> None:
        """Errors are never suppressed."""
        self._diag(message, prefix="Error:", prefix_style="bold red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diag(message, style="dim", prefix="[debug]")

    def progress(self, message: str) -> None:
        """Progress is only useful to someone watching a terminal."""
        if not self._quiet and _is_tty():
            self._diag(message, style="dim")

    def _diag(
        self,
        message: str,
        style: Optional[str] = None,
        prefix: Optional[str] = None,
        prefix_style: Optional[str] = None,
    ) -> None:
        if self._no_color:
            text = f"{prefix} {message}" if prefix else message
            print(text, file=sys.stderr, flush=True)
            return

        markup = escape(message)
        if prefix:
            label = escape(prefix)
            if prefix_style:
                label = f"[{prefix_style}]{label}[/{prefix_style}]"
            markup = f"{label} {markup}"
        if style:
            markup = f"[{style}]{markup}[/{style}]"
        self._stderr.print(markup)


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` (any value, even empty) or ``TERM=dumb`` turns colour off."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


def _dumps(data: Any, indent: Optional[int] = None) -> str:
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


def _plain_lines(data: Any) -> list[str]:
    """Plain rendering: ``key<TAB>value`` for mappings, one line per list item.

    Nested containers are written as compact JSON so each entry stays on
    one line.
    """

    def cell(value: Any) -> str:
        return _dumps(value) if isinstance(value, (dict, list)) else str(value)

    if isinstance(data, dict):
        return [f"{key}\t{cell(value)}" for key, value in data.items()]
    if isinstance(data, list):
        return [cell(item) for item in data]
    return [str(data)]


# ------------------------------------------------------------------ #
# Installed instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests call this between runs)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_violations(errors: Iterable[str]) -> None:
    get_output().print_violations(errors)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)


def progress(message: str) -> None:
    get_output().progress(message)
