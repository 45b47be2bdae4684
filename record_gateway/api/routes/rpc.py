"""JSON-RPC Endpoint — POST / carries every initialize / tools/list / tools/call request.

Invariants:
    - Always HTTP 200 with a JSON-RPC envelope, including protocol errors
    - Undecodable body -> -32700 with id 0; everything else delegated to RpcDispatcher

Design Decisions:
    - Body decoded by hand instead of a Pydantic body model: a FastAPI 422 is not
      a JSON-RPC envelope
    - Dispatcher resolved through a dependency so tests swap in fakes via
      dependency_overrides
"""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from record_gateway.config import get_settings
from record_gateway.core.errors import ParseError
from record_gateway.services.rpc_dispatch import RpcDispatcher

logger = logging.getLogger(__name__)
router = APIRouter(tags=["rpc"])

BODY_PREVIEW_CHARS = 200


def get_rpc_dispatcher(request: Request) -> RpcDispatcher:
    """Dispatcher built by the lifespan for the configured profile."""
    return request.app.state.rpc_dispatcher


@router.post("/")
async def rpc_endpoint(
    request: Request,
    dispatcher: RpcDispatcher = Depends(get_rpc_dispatcher),
):
    raw = await request.body()
    settings = get_settings()
    if settings.log_request_bodies and not settings.is_production:
        logger.debug(
            f"Request body: {raw[:BODY_PREVIEW_CHARS].decode('utf-8', 'replace')}",
            extra={"path": request.url.path},
        )
    try:
        payload = json.loads(raw)
    except ValueError as e:
        error = ParseError(str(e))
        logger.warning(error.message, extra={"error_code": error.code})
        return JSONResponse(RpcDispatcher.error_response(0, error.rpc_code, error.message))
    return JSONResponse(await dispatcher.handle(payload))

