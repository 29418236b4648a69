"""Sales Intelligence MCP server: sales lookup tools over stdio JSON-RPC."""

from __future__ import annotations

__version__ = "1.0.0"

SERVER_NAME = "sales-intelligence-mcp"
