"""Shared CLI output formatters."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, NoReturn

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from sales_intel.config import ServerSettings
    from sales_intel.http.client import ConnectionStatus
    from sales_intel.protocols.registry import ToolSpec

console = Console()


def fail(message: str, detail: object) -> NoReturn:
    """Print ``message: detail`` in red and exit with status 1."""
    console.print(f"[red]{message}:[/red] {escape(str(detail))}")
    sys.exit(1)


def print_tools_table(tools: tuple[ToolSpec, ...]) -> None:
    """Pretty-print registered tools as a table."""
    table = Table(title="Registered Tools")
    name_width = max((len(tool.name) for tool in tools), default=4)
    table.add_column("Name", style="cyan", no_wrap=True, min_width=name_width)
    table.add_column("Required")
    table.add_column("Description")

    for tool in tools:
        required = ", ".join(tool.input_schema.get("required", [])) or "-"
        table.add_row(tool.name, required, _truncate(tool.description))

    console.print(table)
    console.print(f"{len(tools)} tools")


def print_settings(settings: ServerSettings) -> None:
    mode = "api" if settings.api_enabled else "demo"
    console.print("\n[bold]Configuration[/bold]")
    console.print(f"  Mode: {mode}")
    console.print(f"  API base URL: {settings.api_base_url or '(not set)'}")
    console.print(f"  API key: {'set' if settings.api_key else '(not set)'}")
    console.print(f"  Timeout: {settings.timeout_ms}ms")
    console.print(f"  Log level: {settings.log_level}")


def print_connection_status(status: ConnectionStatus) -> None:
    if status.connected:
        console.print(f"[green]Connected[/green] to {status.base_url}")
    else:
        console.print(f"[red]Connection failed[/red] to {status.base_url}: {escape(str(status.error))}")


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
