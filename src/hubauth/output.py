"""Console output for the hubauth CLI.

Anything a script may want to capture goes to **stdout** unstyled: consent
URIs, decorated URLs, the token endpoint body and variable listings.
Diagnostics go to **stderr** through a Rich console, so colour follows
``--no-color``, ``NO_COLOR`` and ``TERM=dumb`` and disappears when stderr is
not a terminal.

:func:`~hubauth.app.main_callback` installs one :class:`CliOutput` per
invocation with :func:`set_output`; commands use the module-level helpers.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional, Union

from rich.console import Console
from rich.table import Table
from rich.text import Text


class OutputFormat(str, Enum):
    """How stdout data is rendered.

    ``TEXT`` draws variable tables with Rich when stdout is a terminal and
    falls back to tab-separated rows when it is piped. ``PLAIN`` always uses
    tab-separated rows. ``JSON`` emits JSON documents.
    """

    TEXT = "text"
    PLAIN = "plain"
    JSON = "json"


def _color_disabled() -> bool:
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


def _stdout_is_terminal() -> bool:
    return sys.stdout.isatty()


class CliOutput:
    """Route CLI output to stdout or stderr.

    Args:
        format: Rendering of stdout data.
        no_color: Strip colour from diagnostics and tables.
        quiet: Drop ``info``, ``success`` and ``suggest`` messages.
        verbose: Show ``debug`` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.TEXT,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self.format = format
        self.quiet = quiet
        self.verbose = verbose
        self._no_color = no_color or _color_disabled()
        # Rich resolves sys.stderr on every write, so redirected streams are honoured.
        self._stderr = Console(stderr=True, color_system=self._color_system(), highlight=False)

    # --- stdout ---

    def emit(self, text: str) -> None:
        """Write one line of data to stdout."""
        print(text, file=sys.stdout, flush=True)

    def emit_body(self, body: Union[dict, list, str]) -> None:
        """Write a token endpoint response body.

        A decoded JSON object is shown as ``key<TAB>value`` lines, or
        re-indented in JSON mode. Anything else is written as it came.
        """
        if self.format == OutputFormat.JSON and not isinstance(body, str):
            self.emit(json.dumps(body, indent=2, ensure_ascii=False))
        elif isinstance(body, dict):
            for key, value in body.items():
                self.emit(f"{key}\t{value}")
        else:
            self.emit(body if isinstance(body, str) else json.dumps(body))

    def emit_table(self, headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
        """Write rows as JSON records, a Rich table, or tab-separated lines."""
        if self.format == OutputFormat.JSON:
            self.emit(json.dumps([dict(zip(headers, row)) for row in rows], indent=2))
        elif self.format == OutputFormat.TEXT and _stdout_is_terminal():
            table = Table(*headers, title=title, header_style="bold cyan")
            for row in rows:
                table.add_row(*row)
            Console(color_system=self._color_system()).print(table)
        else:
            for line in [headers, *rows]:
                self.emit("\t".join(line))

    # --- stderr ---

    def _color_system(self) -> Optional[str]:
        return None if self._no_color else "auto"

    def _diagnostic(self, text: Text) -> None:
        self._stderr.print(text, soft_wrap=True)

    def info(self, message: str) -> None:
        if not self.quiet:
            self._diagnostic(Text(message))

    def success(self, message: str) -> None:
        if not self.quiet:
            self._diagnostic(Text(message, style="green"))

    def warning(self, message: str) -> None:
        self._diagnostic(Text.assemble(("Warning: ", "yellow"), message))

    def error(self, message: str) -> None:
        self._diagnostic(Text.assemble(("Error: ", "bold red"), message))

    def suggest(self, message: str) -> None:
        if not self.quiet:
            self._diagnostic(Text(f"→ {message}", style="dim"))

    def debug(self, message: str) -> None:
        if self.verbose:
            self._diagnostic(Text(f"[debug] {message}", style="dim"))


_output: Optional[CliOutput] = None


def get_output() -> CliOutput:
    """Return the installed :class:`CliOutput`, creating a default one."""
    global _output
    if _output is None:
        _output = CliOutput()
    return _output


def set_output(output: CliOutput) -> None:
    global _output
    _output = output


def reset_output() -> None:
    global _output
    _output = None


def emit(text: str) -> None:
    get_output().emit(text)


def emit_body(body: Any) -> None:
    get_output().emit_body(body)


def emit_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().emit_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
