"""Protocol layer: tool registry, execution adapter and the MCP stdio server."""

from sales_intel.protocols.errors import (
    DuplicateToolError,
    InvalidParamsError,
    ProtocolError,
    RegistryFrozenError,
    ToolExecutionError,
    ToolNotFoundError,
)
from sales_intel.protocols.executor import ToolExecutionAdapter
from sales_intel.protocols.registry import ToolHandler, ToolRegistry, ToolSpec

__all__ = [
    "DuplicateToolError",
    "InvalidParamsError",
    "ProtocolError",
    "RegistryFrozenError",
    "ToolExecutionAdapter",
    "ToolExecutionError",
    "ToolHandler",
    "ToolNotFoundError",
    "ToolRegistry",
    "ToolSpec",
]
