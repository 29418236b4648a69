"""Sales intelligence tools exposed over MCP.

Each module defines one :class:`~sales_intel.protocols.registry.ToolSpec`
named ``TOOL``. :func:`build_registry` collects them in listing order.
"""

from __future__ import annotations

from sales_intel.protocols.registry import ToolRegistry, ToolSpec
from sales_intel.tools import competitive_intel, playbooks, process_workflows, sales_content, standalone_plays

ALL_TOOLS: tuple[ToolSpec, ...] = (
    sales_content.TOOL,
    competitive_intel.TOOL,
    process_workflows.TOOL,
    playbooks.TOOL,
    standalone_plays.TOOL,
)


def build_registry() -> ToolRegistry:
    """A fresh, unfrozen registry holding every built-in tool."""
    return ToolRegistry(ALL_TOOLS)


__all__ = ["ALL_TOOLS", "build_registry"]
