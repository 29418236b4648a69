"""Shared error types for the protocol layer.

Each error carries the JSON-RPC ``code`` it is reported with.
"""

from __future__ import annotations

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""

    code = INTERNAL_ERROR


class InvalidParamsError(ProtocolError):
    """``params`` does not have the shape the method expects."""

    code = INVALID_PARAMS


class ToolNotFoundError(ProtocolError):
    """Requested tool does not exist in the registry."""

    code = METHOD_NOT_FOUND

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = list(available or [])
        msg = f'Tool "{name}" not found.'
        if self.available:
            msg += f" Available tools: {', '.join(self.available)}"
        super().__init__(msg)


class ToolExecutionError(ProtocolError):
    """A tool handler failed and had no fallback for the failure."""

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Tool execution failed: {name}" + (f": {detail}" if detail else ""))


class DuplicateToolError(ProtocolError):
    """A tool with the same name is already registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool already registered: {name}")


class RegistryFrozenError(ProtocolError):
    """The registry no longer accepts registrations."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot register {name}: tool registry is frozen")
