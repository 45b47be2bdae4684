"""Error Handlers — global exception handlers for the gateway API.

Invariants:
    - Anything escaping a route becomes a JSON-RPC -32603 envelope with HTTP 200
    - GatewayError keeps its own rpc code and message
    - Exception (catch-all) never leaks tracebacks, only the message

Design Decisions:
    - Two-layer handler: domain (GatewayError), catch-all (Exception)
    - Extracted from main.py to keep the app module wiring-only
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from record_gateway.core.errors import GatewayError, RpcErrorCode

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_gateway_error_handler(app)
    _register_generic_error_handler(app)


def _rpc_error_body(code: int, message: str) -> dict:
    return {"jsonrpc": "2.0", "id": 0, "error": {"code": int(code), "message": message}}


def _register_gateway_error_handler(app: FastAPI) -> None:
    """Register gateway domain/infrastructure error handler."""

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        logger.error(
            f"GatewayError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=200, content=_rpc_error_body(exc.rpc_code, exc.message),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=200,
            content=_rpc_error_body(RpcErrorCode.INTERNAL_ERROR, str(exc) or "Internal error"),
        )
