"""MCP protocol: JSON-RPC models and the stdio server transport.

The server itself lives in :mod:`sales_intel.protocols.mcp.server`.
"""

from sales_intel.protocols.mcp.models import (
    PROTOCOL_VERSION,
    CallToolResult,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    MCPToolDef,
    TextContent,
    ToolCallParams,
)
from sales_intel.protocols.mcp.transport import ServerTransport, StdioServerTransport

__all__ = [
    "PROTOCOL_VERSION",
    "CallToolResult",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPToolDef",
    "ServerTransport",
    "StdioServerTransport",
    "TextContent",
    "ToolCallParams",
]
