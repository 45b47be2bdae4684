"""Record Gateway API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Missing record-store credentials abort startup with ConfigurationError
    - A failed startup connection check aborts in production, only warns in development
    - The shared record-store client is closed on shutdown
    - Every request is logged (method, path) before dispatch
    - OPTIONS on any path -> 200 with an empty body and allow-all CORS headers,
      preflight or not

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - One profile per process: the profile picks the tool set and serverInfo
    - CORS allows every origin: callers are tool hosts, not browsers with cookies
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from record_gateway.api.error_handlers import register_error_handlers
from record_gateway.api.routes import health, rpc
from record_gateway.config import get_settings
from record_gateway.core.errors import ConfigurationError, RecordStoreError
from record_gateway.infrastructure.messaging import SmtpMessenger
from record_gateway.infrastructure.observability import setup_logging
from record_gateway.infrastructure.record_store import close_record_store, init_record_store
from record_gateway.services.rpc_dispatch import RpcDispatcher
from record_gateway.services.tool_dispatch import ToolDispatch
from record_gateway.services.tools_registry import get_profile

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    missing = settings.missing_record_store_settings()
    if missing:
        raise ConfigurationError(
            f"Missing required settings: {', '.join(missing)}", missing,
        )

    profile = get_profile(settings.gateway_profile)
    store = init_record_store(
        settings.sf_instance_url,
        settings.sf_access_token,
        api_version=settings.sf_api_version,
        timeout_seconds=settings.sf_timeout_seconds,
    )
    if settings.verify_record_store_on_startup:
        try:
            await store.verify_connection()
        except RecordStoreError as e:
            if settings.is_production:
                await close_record_store()
                raise
            logger.warning(f"Record store connection check failed (continuing in development): {e.message}")

    messenger = None
    if settings.smtp_host:
        messenger = SmtpMessenger(
            settings.smtp_host,
            settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )

    tools = ToolDispatch(
        profile, store, messenger,
        mail_from=settings.mail_from,
        mail_recipient_override=settings.mail_recipient_override,
    )
    app.state.rpc_dispatcher = RpcDispatcher(profile, tools)
    logger.info(f"Record Gateway started ({profile.server_name}, {len(profile.tools)} tools)")
    yield
    logger.info("Record Gateway shutting down")
    await close_record_store()


app = FastAPI(title="Record Gateway", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Added after CORSMiddleware, so it wraps it: no OPTIONS request reaches CORS
@app.middleware("http")
async def answer_options(request: Request, call_next):
    if request.method != "OPTIONS":
        return await call_next(request)
    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": request.headers.get(
                "access-control-request-headers", "*",
            ),
        },
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    logger.info(
        f"{request.method} {request.url.path}",
        extra={"http_method": request.method, "path": request.url.path},
    )
    response = await call_next(request)
    logger.debug(
        f"{request.method} {request.url.path} -> {response.status_code}",
        extra={
            "http_method": request.method, "path": request.url.path,
            "duration_ms": round((time.perf_counter() - started) * 1000, 1),
        },
    )
    return response


# Routes: explicit registration
app.include_router(health.router)
app.include_router(rpc.router)

register_error_handlers(app)
