"""sales-intel CLI entrypoint."""

from __future__ import annotations

import click

from sales_intel import SERVER_NAME, __version__


@click.group()
@click.version_option(version=__version__, prog_name=SERVER_NAME)
def main() -> None:
    """Sales Intelligence MCP server."""


# Register subcommands
from sales_intel.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
