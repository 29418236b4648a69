"""ProtocolServer: the MCP JSON-RPC message loop.

One line in, at most one line out, strictly in order. The loop holds no
state between requests beyond the tool registry and the shared API
client, and no single request can bring it down.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import signal
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from sales_intel import SERVER_NAME, __version__
from sales_intel.protocols.errors import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    ToolExecutionError,
    ToolNotFoundError,
)
from sales_intel.protocols.executor import ToolExecutionAdapter
from sales_intel.protocols.mcp.models import (
    PROTOCOL_VERSION,
    JsonRpcRequest,
    JsonRpcResponse,
    ToolCallParams,
)
from sales_intel.protocols.mcp.transport import OversizedLineError, StdioServerTransport
from sales_intel.utils.telemetry import ATTR_RPC_METHOD, get_tracer

if TYPE_CHECKING:
    from sales_intel.http.client import ResilientHttpClient
    from sales_intel.protocols.mcp.transport import ServerTransport
    from sales_intel.protocols.registry import ToolRegistry

_tracer = get_tracer(__name__)


class ServerState(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    CLOSING = "closing"


class ProtocolServer:
    """Dispatches ``initialize``, ``tools/list`` and ``tools/call``.

    Usage::

        server = ProtocolServer(registry, client)
        await server.serve(StdioServerTransport())

    The registry is frozen on construction.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        client: ResilientHttpClient | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._registry = registry.freeze()
        self._log = logger if logger is not None else logging.getLogger(__name__)
        self._adapter = ToolExecutionAdapter(registry, client, logger=self._log)
        self._state = ServerState.IDLE
        self._serve_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def capabilities(self) -> dict[str, Any]:
        return {"tools": {}}

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def serve(self, transport: ServerTransport) -> None:
        """Process lines from *transport* until EOF or :meth:`close`."""
        self._serve_task = asyncio.current_task()
        await transport.connect()
        self._log.info(
            "%s %s ready with %d tools: %s",
            SERVER_NAME,
            __version__,
            len(self._registry),
            ", ".join(self._registry.names()),
        )
        try:
            while self._state is not ServerState.CLOSING:
                try:
                    line = await transport.receive_line()
                except OversizedLineError as exc:
                    self._log.warning("Dropped message: %s", exc)
                    await transport.send(JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error").to_wire())
                    continue
                if line is None:
                    self._log.info("Input stream closed")
                    break
                if not line.strip():
                    continue

                self._state = ServerState.PROCESSING
                try:
                    response = await self.handle_line(line)
                except Exception as exc:
                    self._log.exception("Unhandled error for message: %r", line[:200])
                    response = JsonRpcResponse.failure(None, INTERNAL_ERROR, f"Internal error: {exc}").to_wire()
                if self._state is ServerState.CLOSING:
                    break
                if response is not None:
                    await transport.send(response)
                self._state = ServerState.IDLE
        except asyncio.CancelledError:
            if self._state is not ServerState.CLOSING:
                raise
        finally:
            self._state = ServerState.CLOSING
            self._serve_task = None
            await transport.close()

    def close(self) -> None:
        """Enter ``CLOSING``: stop reading and never write again."""
        if self._state is ServerState.CLOSING:
            return
        self._log.info("Shutting down")
        self._state = ServerState.CLOSING
        task = self._serve_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    # ------------------------------------------------------------------
    # Per-message handling
    # ------------------------------------------------------------------

    async def handle_line(self, line: str) -> dict[str, Any] | None:
        """Handle one raw line; return the wire response or ``None`` for notifications."""
        try:
            raw = json.loads(line)
        except (ValueError, RecursionError):
            self._log.warning("Unparsable message: %r", line[:200])
            return JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error").to_wire()

        if not isinstance(raw, dict):
            return JsonRpcResponse.failure(None, INVALID_REQUEST, "Invalid Request").to_wire()

        try:
            request = JsonRpcRequest.model_validate(raw)
        except ValidationError:
            request_id = raw.get("id")
            if not isinstance(request_id, int | float | str) or isinstance(request_id, bool):
                request_id = None
            return JsonRpcResponse.failure(request_id, INVALID_REQUEST, "Invalid Request").to_wire()

        response = await self.handle_request(request)
        if request.is_notification:
            return None
        return response.to_wire()

    async def handle_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Dispatch *request*; every failure becomes an error response."""
        with _tracer.start_as_current_span("sales_intel.rpc.dispatch") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            try:
                result = await self._dispatch(request)
            except ToolNotFoundError as exc:
                return JsonRpcResponse.failure(request.id, exc.code, str(exc))
            except ToolExecutionError as exc:
                return JsonRpcResponse.failure(request.id, exc.code, str(exc))
            except _MethodError as exc:
                return JsonRpcResponse.failure(request.id, exc.code, exc.message)
            except Exception as exc:
                self._log.exception("Internal error while handling %s", request.method)
                return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, f"Internal error: {exc}")
            return JsonRpcResponse.success(request.id, result)

    async def _dispatch(self, request: JsonRpcRequest) -> dict[str, Any]:
        method = request.method
        if method == "initialize":
            return self._initialize()
        if method == "tools/list":
            return {"tools": self._registry.definitions()}
        if method == "tools/call":
            return await self._call_tool(request.params)
        if method == "ping":
            return {}
        if method.startswith("notifications/"):
            return {}
        raise _MethodError(METHOD_NOT_FOUND, f"Method not found: {method}")

    def _initialize(self) -> dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": self.capabilities(),
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    async def _call_tool(self, params: dict[str, Any]) -> dict[str, Any]:
        try:
            call = ToolCallParams.model_validate(params)
        except ValidationError as exc:
            msg = "Invalid params: tools/call requires a tool 'name' and an 'arguments' object"
            raise _MethodError(INVALID_PARAMS, msg) from exc

        if call.name not in self._registry:
            raise ToolNotFoundError(call.name, self._registry.names())

        result = await self._adapter.execute(call.name, call.arguments)
        return result.model_dump()


class _MethodError(Exception):
    """A request-level error with a fixed JSON-RPC code."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


async def run_stdio(server: ProtocolServer, transport: ServerTransport | None = None) -> None:
    """Serve on stdin/stdout, mapping SIGINT/SIGTERM to :meth:`ProtocolServer.close`."""
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, server.close)
            installed.append(sig)
    try:
        await server.serve(transport or StdioServerTransport())
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
