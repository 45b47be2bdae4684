"""RPC Dispatch — routes JSON-RPC envelopes to initialize / tools/list / tools/call.

Invariants:
    - handle() never raises: every failure becomes a JSON-RPC error object
    - Response id echoes the request id (0 when absent or unreadable)
    - Exactly one of result / error in every response
    - Unknown method or tool -> -32601; any tool failure -> -32603 with its message
    - initialize never consults a collaborator and only reports whitelisted versions

Design Decisions:
    - Single catch point: tool handlers and ToolDispatch let errors propagate,
      this class converts them exactly once (ADR: no partial-success suppression)
    - match over RpcMethod with an explicit unknown arm instead of string branching
    - Non-gateway exceptions are logged with traceback; the message is still
      returned because callers act on collaborator messages verbatim
"""

import logging
from typing import Any

from pydantic import ValidationError

from record_gateway.core.domain_types import (
    DEFAULT_PROTOCOL_VERSION, SUPPORTED_PROTOCOL_VERSIONS, RpcMethod, parse_rpc_method,
)
from record_gateway.core.errors import (
    GatewayError, InvalidRequestError, RpcErrorCode,
    ToolValidationError, UnknownMethodError,
)
from record_gateway.schemas.rpc import RpcErrorBody, RpcRequest, RpcResponse, ToolCallParams
from record_gateway.services.tool_dispatch import ToolDispatch
from record_gateway.services.tools_registry import GatewayProfile, list_tools

logger = logging.getLogger(__name__)


def negotiate_protocol_version(requested: object) -> str:
    """Echo the peer's version when whitelisted, else the default."""
    if isinstance(requested, str) and requested in SUPPORTED_PROTOCOL_VERSIONS:
        return requested
    return DEFAULT_PROTOCOL_VERSION


def _echo_id(payload: Any) -> int | str:
    """Best-effort id for error responses to malformed requests."""
    if isinstance(payload, dict):
        rpc_id = payload.get("id")
        if isinstance(rpc_id, (int, str)) and not isinstance(rpc_id, bool):
            return rpc_id
    return 0


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err["loc"]) or "body"
    return f"{loc}: {err['msg']}"


class RpcDispatcher:
    """JSON-RPC front door for one gateway profile."""

    def __init__(self, profile: GatewayProfile, tools: ToolDispatch):
        self.profile = profile
        self.tools = tools

    async def handle(self, payload: Any) -> dict:
        """Dispatch one decoded JSON-RPC request body; always returns a response body."""
        rpc_id = _echo_id(payload)
        method: str | None = None
        try:
            request = self._parse(payload)
            method = request.method
            if request.id is not None:
                rpc_id = request.id
            result = await self._route(request)
            return RpcResponse(id=rpc_id, result=result).to_wire()
        except GatewayError as e:
            e.context.rpc_method = e.context.rpc_method or method
            logger.warning(
                f"RPC error: {e.message}",
                extra={
                    "error_code": e.code, "rpc_method": method,
                    "rpc_id": rpc_id, "tool_name": e.context.tool_name,
                    "debug_info": e.context.debug_info,
                },
            )
            return self.error_response(rpc_id, e.rpc_code, e.message)
        except Exception as e:
            logger.error(
                f"Unhandled error in {method}: {e}",
                exc_info=True,
                extra={"error_code": "INTERNAL_ERROR", "rpc_method": method, "rpc_id": rpc_id},
            )
            return self.error_response(rpc_id, RpcErrorCode.INTERNAL_ERROR, str(e))

    @staticmethod
    def error_response(rpc_id: int | str, code: int, message: str) -> dict:
        return RpcResponse(
            id=rpc_id, error=RpcErrorBody(code=int(code), message=message),
        ).to_wire()

    def _parse(self, payload: Any) -> RpcRequest:
        if not isinstance(payload, dict):
            raise InvalidRequestError("request body must be a JSON object")
        try:
            return RpcRequest.model_validate(payload)
        except ValidationError as e:
            raise InvalidRequestError(_first_error(e)) from e

    async def _route(self, request: RpcRequest) -> dict:
        logger.info(
            f"RPC {request.method}",
            extra={"rpc_method": request.method, "rpc_id": request.id},
        )
        match parse_rpc_method(request.method):
            case RpcMethod.INITIALIZE:
                return self.initialize(request.params or {})
            case RpcMethod.TOOLS_LIST:
                return {"tools": list_tools(self.profile)}
            case RpcMethod.TOOLS_CALL:
                return await self.call_tool(request.params)
            case None:
                raise UnknownMethodError(request.method)

    def initialize(self, params: dict) -> dict:
        server_info = {
            "name": self.profile.server_name,
            "version": self.profile.server_version,
            "description": self.profile.description,
        }
        return {
            "protocolVersion": negotiate_protocol_version(params.get("protocolVersion")),
            "capabilities": {"tools": {}},
            "serverInfo": server_info,
        }

    async def call_tool(self, params: dict | None) -> dict:
        try:
            call = ToolCallParams.model_validate(params or {})
        except ValidationError as e:
            raise ToolValidationError(
                f"tools/call requires params.name: {_first_error(e)}", "name",
            ) from e
        try:
            return await self.tools.execute(call.name, call.arguments or {})
        except GatewayError as e:
            e.context.tool_name = e.context.tool_name or call.name
            raise
