"""ToolExecutionAdapter: validates arguments, runs a handler, wraps the text.

Invalid arguments are not a protocol error: the adapter answers with an
"Invalid Input" text block so the assistant can correct itself and retry
in the same conversation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from sales_intel.http.errors import ClassifiedApiError
from sales_intel.protocols.errors import ToolExecutionError, ToolNotFoundError
from sales_intel.protocols.mcp.models import CallToolResult
from sales_intel.utils.telemetry import ATTR_ERROR_KIND, ATTR_TOOL_NAME, ATTR_TOOL_OUTCOME, get_tracer

if TYPE_CHECKING:
    from sales_intel.http.client import ResilientHttpClient
    from sales_intel.protocols.registry import ToolRegistry, ToolSpec

_tracer = get_tracer(__name__)


class ToolExecutionAdapter:
    """Bridges a ``tools/call`` to the registered handler."""

    def __init__(
        self,
        registry: ToolRegistry,
        client: ResilientHttpClient | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._registry = registry
        self._client = client
        self._log = logger if logger is not None else logging.getLogger(__name__)

    @property
    def client(self) -> ResilientHttpClient | None:
        return self._client

    async def execute(self, name: str, raw_args: dict[str, Any] | None = None) -> CallToolResult:
        """Run the tool *name* and return its text wrapped in a result envelope.

        Raises
        ------
        ToolNotFoundError
            If *name* is not registered.
        ToolExecutionError
            If the handler failed without rendering a fallback.
        """
        tool = self._registry.get(name)
        if tool is None:
            raise ToolNotFoundError(name, self._registry.names())

        with _tracer.start_as_current_span("sales_intel.tool.execute") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            try:
                args = tool.input_model.model_validate(raw_args or {})
            except ValidationError as exc:
                span.set_attribute(ATTR_TOOL_OUTCOME, "invalid_input")
                self._log.info("Invalid input for tool %s: %d issue(s)", name, exc.error_count())
                return CallToolResult.from_text(render_validation_error(tool, exc))

            self._log.info("Executing tool: %s", name)
            try:
                text = await tool.handler(args, self._client)
            except ToolExecutionError:
                span.set_attribute(ATTR_TOOL_OUTCOME, "failed")
                raise
            except ClassifiedApiError as exc:
                span.set_attribute(ATTR_TOOL_OUTCOME, "failed")
                span.set_attribute(ATTR_ERROR_KIND, exc.kind.value)
                self._log.error("Tool %s execution failed: %s", name, exc)
                raise ToolExecutionError(name, str(exc)) from exc
            except Exception as exc:
                span.set_attribute(ATTR_TOOL_OUTCOME, "failed")
                self._log.exception("Tool %s execution failed", name)
                raise ToolExecutionError(name, str(exc)) from exc

            span.set_attribute(ATTR_TOOL_OUTCOME, "ok")
            return CallToolResult.from_text(text)


def render_validation_error(tool: ToolSpec, exc: ValidationError) -> str:
    """List every violated field plus the parameters the tool expects."""
    lines = ["# Invalid Input", "", "Please check the following:", ""]
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "(arguments)"
        lines.append(f"- {location}: {error['msg']}")

    properties: dict[str, Any] = tool.input_schema.get("properties", {})
    required = set(tool.input_schema.get("required", []))
    required_names = [key for key in properties if key in required]
    optional_names = [key for key in properties if key not in required]

    if required_names:
        lines += ["", "## Required Parameters"]
        lines += [_describe_param(key, properties[key]) for key in required_names]
    if optional_names:
        lines += ["", "## Optional Parameters"]
        lines += [_describe_param(key, properties[key]) for key in optional_names]
    return "\n".join(lines)


def _describe_param(name: str, schema: dict[str, Any]) -> str:
    line = f"- **{name}**"
    if "enum" in schema:
        line += f" ({', '.join(str(v) for v in schema['enum'])})"
    elif "type" in schema:
        line += f" ({schema['type']})"
    if schema.get("description"):
        line += f": {schema['description']}"
    if "default" in schema:
        line += f" (default: {_json_literal(schema['default'])})"
    return line


def _json_literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
