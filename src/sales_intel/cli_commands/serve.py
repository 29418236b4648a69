"""``sales-intel serve``: run the MCP server on stdin/stdout."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
from rich.markup import escape

from sales_intel.config import ConfigError, ServerSettings
from sales_intel.utils.log import configure_logging, stderr_console


@click.command()
@click.option("--telemetry", is_flag=True, help="Export OpenTelemetry spans to stderr.")
def serve(telemetry: bool) -> None:
    """Serve the sales intelligence tools over MCP stdio.

    stdout carries JSON-RPC only; diagnostics go to stderr.
    """
    try:
        settings = ServerSettings.from_env()
    except ConfigError as exc:
        stderr_console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        sys.exit(1)

    log = configure_logging(settings.logging_level)

    if telemetry:
        from sales_intel.utils.telemetry import configure_telemetry

        try:
            configure_telemetry()
        except ImportError as exc:
            stderr_console.print(f"[red]Telemetry error:[/red] {escape(str(exc))}")
            sys.exit(1)

    asyncio.run(run_server(settings, log))


async def run_server(settings: ServerSettings, log: logging.Logger) -> None:
    """Build the registry and client from *settings* and serve until EOF or a signal."""
    from sales_intel.http.client import ResilientHttpClient
    from sales_intel.protocols.mcp.server import ProtocolServer, run_stdio
    from sales_intel.tools import build_registry

    registry = build_registry()
    config = settings.client_config()
    if config is None:
        log.warning("API_BASE_URL or API_KEY not set; tools will use demo data")
        await run_stdio(ProtocolServer(registry))
        return

    log.info("Using API at %s (timeout %dms)", config.base_url, config.timeout_ms)
    async with ResilientHttpClient(config) as client:
        await run_stdio(ProtocolServer(registry, client))
