"""``sales-intel tools``: list the built-in tools and run one locally."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import click

from sales_intel.cli_commands._output import fail, print_tools_table
from sales_intel.config import ConfigError, ServerSettings
from sales_intel.protocols.errors import ProtocolError


@click.group()
def tools() -> None:
    """List and run tools."""


@tools.command("list")
def list_tools() -> None:
    """Show every tool the server advertises in ``tools/list``."""
    from sales_intel.tools import build_registry

    print_tools_table(build_registry().list())


@tools.command("call")
@click.argument("name")
@click.option("--args", "raw_args", default="{}", help="Tool arguments as a JSON object.")
def call(name: str, raw_args: str) -> None:
    """Run the tool NAME once and print its text.

    Uses the API when API_BASE_URL and API_KEY are set, demo data otherwise.
    """
    try:
        arguments = json.loads(raw_args)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc.msg}", param_hint="--args") from exc
    if not isinstance(arguments, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--args")

    try:
        settings = ServerSettings.from_env()
    except ConfigError as exc:
        fail("Configuration error", exc)

    try:
        text = asyncio.run(_call(settings, name, arguments))
    except ProtocolError as exc:
        fail("Tool error", exc)

    click.echo(text)


async def _call(settings: ServerSettings, name: str, arguments: dict[str, Any]) -> str:
    from sales_intel.http.client import ResilientHttpClient
    from sales_intel.protocols.executor import ToolExecutionAdapter
    from sales_intel.tools import build_registry

    registry = build_registry().freeze()
    config = settings.client_config()
    if config is None:
        result = await ToolExecutionAdapter(registry).execute(name, arguments)
        return result.text

    async with ResilientHttpClient(config) as client:
        result = await ToolExecutionAdapter(registry, client).execute(name, arguments)
        return result.text
