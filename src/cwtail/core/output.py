"""Output formatting utilities using Rich."""

import json
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from cwtail.core.logs.base import LogRecord

error_console = Console(stderr=True)

STREAM_SEPARATOR = "-" * 78


class OutputFormat(str, Enum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"
    RAW = "raw"


class OutputFormatter:
    """Handles output formatting for CLI commands.

    Log records themselves are written verbatim to stdout (no Rich markup
    processing) since messages are opaque text. Listings are styled when
    color is True, never when it is False, and only on a terminal when it
    is None.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.TABLE,
        color: bool | None = None,
    ):
        self.format = format
        self._console = Console(force_terminal=True if color else None, no_color=color is False)
        self.color = color is not False and self._console.is_terminal

    def print_error(self, message: str) -> None:
        """Print an error message to stderr."""
        error_console.print(f"[red]Error:[/red] {escape(message)}")

    def print_info(self, message: str) -> None:
        """Print an info message to stderr."""
        error_console.print(f"[blue]ℹ[/blue] {message}")

    def write_record(
        self,
        record: LogRecord,
        show_time: bool = False,
        eol: bool = False,
    ) -> None:
        """Write a single log record to stdout."""
        if show_time:
            ts = datetime.fromtimestamp(record.timestamp / 1000, tz=timezone.utc)
            sys.stdout.write(f"[{ts.isoformat(timespec='milliseconds').replace('+00:00', 'Z')}] ")
        sys.stdout.write(record.message)
        if eol:
            sys.stdout.write("\n")
        sys.stdout.flush()

    def write_stream_boundary(self, stream: str) -> None:
        """Write a separator block announcing a new log stream."""
        sys.stdout.write(f"{STREAM_SEPARATOR}\n{stream}\n{STREAM_SEPARATOR}\n")
        sys.stdout.flush()

    def print_data(
        self,
        data: list[dict[str, Any]],
        headers: list[str] | None = None,
        title: str | None = None,
    ) -> None:
        """Print rows in the configured format."""
        if self.format == OutputFormat.JSON:
            self._print_json(data)
        elif self.format == OutputFormat.YAML:
            self._print_yaml(data)
        elif self.format == OutputFormat.RAW:
            self._print_raw(data, headers)
        else:
            self._print_table(data, headers, title)

    def _print_json(self, data: Any) -> None:
        json_str = json.dumps(data, indent=2, default=str)
        if self.color:
            self._console.print(Syntax(json_str, "json", theme="monokai"))
        else:
            print(json_str)

    def _print_yaml(self, data: Any) -> None:
        yaml_str = yaml.dump(data, default_flow_style=False, allow_unicode=True)
        if self.color:
            self._console.print(Syntax(yaml_str, "yaml", theme="monokai"))
        else:
            print(yaml_str)

    def _print_raw(self, data: list[dict[str, Any]], headers: list[str] | None = None) -> None:
        # First column only, one row per line
        for row in data:
            key = headers[0] if headers else next(iter(row), None)
            print(row.get(key, "") if key else "")

    def _print_table(
        self,
        data: list[dict[str, Any]],
        headers: list[str] | None = None,
        title: str | None = None,
    ) -> None:
        if not data:
            self._console.print("[dim]No data to display[/dim]")
            return

        if headers is None:
            headers = list(data[0].keys())

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in data:
            table.add_row(*[_cell(row.get(h)) for h in headers])
        self._console.print(table)


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    return str(value)
