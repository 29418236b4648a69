"""Tests for MCP JSON-RPC models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sales_intel.protocols.mcp.models import (
    CallToolResult,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    MCPToolDef,
    ToolCallParams,
)


class TestJsonRpcRequest:
    def test_defaults(self) -> None:
        req = JsonRpcRequest.model_validate({"method": "tools/list", "id": 1})
        assert req.jsonrpc == "2.0"
        assert req.params == {}
        assert not req.is_notification

    def test_missing_id_is_notification(self) -> None:
        req = JsonRpcRequest.model_validate({"jsonrpc": "2.0", "method": "notifications/initialized"})
        assert req.is_notification
        assert req.id is None

    def test_null_id_is_not_notification(self) -> None:
        req = JsonRpcRequest.model_validate({"method": "ping", "id": None})
        assert not req.is_notification

    def test_null_params_become_empty(self) -> None:
        req = JsonRpcRequest.model_validate({"method": "ping", "id": 3, "params": None})
        assert req.params == {}

    def test_method_required(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest.model_validate({"id": 1})

    def test_list_params_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest.model_validate({"method": "x", "id": 1, "params": [1, 2]})


class TestJsonRpcResponse:
    def test_success_wire_shape(self) -> None:
        wire = JsonRpcResponse.success(7, {"ok": True}).to_wire()
        assert wire == {"jsonrpc": "2.0", "result": {"ok": True}, "id": 7}

    def test_failure_wire_shape(self) -> None:
        wire = JsonRpcResponse.failure("abc", -32601, "Method not found: x").to_wire()
        assert wire == {
            "jsonrpc": "2.0",
            "error": {"code": -32601, "message": "Method not found: x"},
            "id": "abc",
        }

    def test_id_omitted_when_unknown(self) -> None:
        wire = JsonRpcResponse.failure(None, -32700, "Parse error").to_wire()
        assert "id" not in wire

    def test_never_both_result_and_error(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcResponse(id=1, result={}, error=JsonRpcError(code=-1, message="x"))

    def test_never_neither(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcResponse(id=1)

    def test_empty_result_is_a_result(self) -> None:
        assert JsonRpcResponse.success(1, {}).to_wire()["result"] == {}


class TestToolPayloads:
    def test_tool_def_alias(self) -> None:
        tool = MCPToolDef(name="t", description="d", input_schema={"type": "object"})
        assert tool.model_dump(by_alias=True) == {
            "name": "t",
            "description": "d",
            "inputSchema": {"type": "object"},
        }

    def test_call_params(self) -> None:
        params = ToolCallParams.model_validate({"name": "find_sales_content"})
        assert params.arguments == {}

    def test_call_params_require_name(self) -> None:
        with pytest.raises(ValidationError):
            ToolCallParams.model_validate({"arguments": {}})
        with pytest.raises(ValidationError):
            ToolCallParams.model_validate({"name": ""})

    def test_call_tool_result(self) -> None:
        result = CallToolResult.from_text("hello")
        assert result.model_dump() == {"content": [{"type": "text", "text": "hello"}]}
        assert result.text == "hello"
