"""Shared fixtures: throwaway tools for registry, adapter and server tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from pydantic import BaseModel, ConfigDict, Field

from sales_intel.protocols.registry import ToolHandler, ToolRegistry, ToolSpec


class EchoInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str = Field(min_length=1)
    times: int = Field(default=1, ge=1, le=5)


ECHO_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "message": {"type": "string", "description": "Text to echo"},
        "times": {"type": "number", "minimum": 1, "maximum": 5, "default": 1},
    },
    "required": ["message"],
}


async def _echo(args: EchoInput, client: Any) -> str:
    return " ".join([args.message] * args.times)


ToolFactory = Callable[..., ToolSpec]


@pytest.fixture
def make_tool() -> ToolFactory:
    def factory(name: str = "echo", handler: ToolHandler | None = None, description: str = "") -> ToolSpec:
        return ToolSpec(
            name=name,
            description=description or f"{name} tool",
            input_schema=ECHO_SCHEMA,
            input_model=EchoInput,
            handler=handler or _echo,
        )

    return factory


@pytest.fixture
def registry(make_tool: ToolFactory) -> ToolRegistry:
    return ToolRegistry([make_tool("echo"), make_tool("shout")])
