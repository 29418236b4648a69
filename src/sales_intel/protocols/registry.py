"""ToolRegistry: the name-to-tool map the server lists and dispatches from."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from sales_intel.protocols.errors import DuplicateToolError, RegistryFrozenError
from sales_intel.protocols.mcp.models import MCPToolDef

if TYPE_CHECKING:
    from sales_intel.http.client import ResilientHttpClient

ToolHandler = Callable[[Any, "ResilientHttpClient | None"], Awaitable[str]]


@dataclass(frozen=True)
class ToolSpec:
    """A registered tool.

    ``input_schema`` is the JSON Schema advertised in ``tools/list``;
    ``input_model`` is the pydantic model arguments are validated with
    before ``handler`` runs.
    """

    name: str
    description: str
    input_schema: dict[str, Any]
    input_model: type[BaseModel]
    handler: ToolHandler = field(repr=False, compare=False)

    def to_definition(self) -> MCPToolDef:
        return MCPToolDef(
            name=self.name,
            description=self.description,
            input_schema=self.input_schema,
        )


class ToolRegistry:
    """Ordered, name-unique collection of :class:`ToolSpec`.

    Usage::

        registry = ToolRegistry([find_sales_content, discover_playbooks])
        registry.freeze()
        spec = registry.get("discover_playbooks")
    """

    def __init__(self, tools: Iterable[ToolSpec] = ()) -> None:
        self._tools: dict[str, ToolSpec] = {}
        self._frozen = False
        for tool in tools:
            self.register(tool)

    def register(self, tool: ToolSpec) -> None:
        if self._frozen:
            raise RegistryFrozenError(tool.name)
        if tool.name in self._tools:
            raise DuplicateToolError(tool.name)
        self._tools[tool.name] = tool

    def freeze(self) -> ToolRegistry:
        """Reject any further registrations."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> ToolSpec | None:
        return self._tools.get(name)

    def list(self) -> tuple[ToolSpec, ...]:
        """All tools in registration order."""
        return tuple(self._tools.values())

    def names(self) -> list[str]:
        return list(self._tools)

    def definitions(self) -> list[dict[str, Any]]:
        """Tool definitions as serialised in a ``tools/list`` result."""
        return [tool.to_definition().model_dump(by_alias=True) for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
