"""``sales-intel check``: show the effective configuration and probe the API."""

from __future__ import annotations

import asyncio
import sys

import click

from sales_intel.cli_commands._output import console, fail, print_connection_status, print_settings
from sales_intel.config import ConfigError, ServerSettings
from sales_intel.http.client import ClientConfig, ConnectionStatus, ResilientHttpClient


@click.command()
def check() -> None:
    """Verify that the configured API answers on ``/health``."""
    try:
        settings = ServerSettings.from_env()
    except ConfigError as exc:
        fail("Configuration error", exc)

    print_settings(settings)
    config = settings.client_config()
    if config is None:
        console.print("[yellow]Demo mode: set API_BASE_URL and API_KEY to use a live API.[/yellow]")
        return

    status = asyncio.run(_probe(config))
    print_connection_status(status)
    if not status.connected:
        sys.exit(1)


async def _probe(config: ClientConfig) -> ConnectionStatus:
    async with ResilientHttpClient(config) as client:
        return await client.check_connection()
