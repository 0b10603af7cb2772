"""CLI output with strict stdout/stderr discipline.

* **stdout** -- primary data only (tokens, URLs, API responses) so that
  ``letterboxd-auth auth pkce --json | jq`` works.
* **stderr** -- all diagnostics (status lines, warnings, errors).
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb`` and the
  ``--no-color`` flag.

Only the CLI layer writes here. The library modules (signing, resolver,
dispatcher, OAuth) never print; they return values or raise.

The module exposes :class:`OutputManager`, installed once by
:func:`~letterboxd_client.app.main_callback` via :func:`set_output`, and
module-level helpers (:func:`info`, :func:`error`, ...) that delegate to it.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """Supported output formats.

    ``AUTO`` resolves to ``RICH`` on an interactive, colour-capable TTY and
    to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    """Mask all but the last *visible* characters of a secret for display."""
    if not value:
        return "(not set)"
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


class OutputManager:
    """Routes CLI output to stdout (data) or stderr (diagnostics).

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational messages on stderr.
        verbose: Enable debug-level messages on stderr.
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

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any, content_type: str = "application/json") -> None:
        """Render *data* to stdout in the active format.

        Pydantic models are dumped to plain dicts first, so a
        :class:`~letterboxd_client.models.TokenPair` prints like any
        response body.

        Args:
            data: A dict, list, string or Pydantic model.
            content_type: MIME hint for the Rich renderer.
        """
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json", exclude_none=True)

        if self._format == OutputFormat.JSON:
            self._print_json(data)
        elif self._format == OutputFormat.PLAIN:
            self._print_plain(data)
        else:
            self._print_rich(data, content_type)

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print tabular data: a Rich table, JSON records or TSV."""
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            self.print_data("\t".join(headers))
            for row in rows:
                self.print_data("\t".join(row))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for h in headers:
                table.add_column(h)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def _emit(self, message: str, markup: str, plain_prefix: str = "") -> None:
        if self._no_color:
            print(f"{plain_prefix}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup)

    def info(self, message: str) -> None:
        """Informational message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, message)

    def success(self, message: str) -> None:
        """Green success message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Yellow warning. Not suppressed by ``--quiet``."""
        self._emit(message, f"[yellow]Warning:[/yellow] {message}", "Warning: ")

    def error(self, message: str) -> None:
        """Bold-red error. Never suppressed."""
        self._emit(message, f"[bold red]Error:[/bold red] {message}", "Error: ")

    def suggest(self, message: str) -> None:
        """Dimmed next-step hint. Suppressed by ``--quiet``."""
        if not self._quiet:
            formatted = f"→ {message}"
            self._emit(formatted, f"[dim]{formatted}[/dim]")

    def debug(self, message: str) -> None:
        """Debug message, shown only with ``--verbose``."""
        if self._verbose:
            self._emit(message, f"[dim][debug] {message}[/dim]", "[debug] ")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _print_json(self, data: Any) -> None:
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except (json.JSONDecodeError, TypeError):
                self.print_data(data)
                return
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def _print_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{value}")
        elif isinstance(data, list):
            for item in data:
                if isinstance(item, dict):
                    self.print_data("\t".join(str(v) for v in item.values()))
                else:
                    self.print_data(str(item))
        else:
            self.print_data(str(data))

    def _print_rich(self, data: Any, content_type: str) -> None:
        if isinstance(data, str) and "json" in content_type:
            try:
                data = json.loads(data)
            except (json.JSONDecodeError, TypeError):
                pass
        if isinstance(data, (dict, list)):
            json_str = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(json_str, "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(str(data), markup=False)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global :class:`OutputManager`. Used by the test suite."""
    global _output
    _output = None


def format_response(data: Any, content_type: str = "application/json") -> None:
    get_output().format_response(data, content_type)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


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
