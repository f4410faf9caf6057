"""
beautydesk/main.py – FastAPI application factory for the BeautyDesk admin API.

Features
────────
• Structured logging via structlog
• Request-ID middleware (X-Request-ID header)
• Basic rate limiting (slowapi, 60 req/min per IP by default)
• Backend failures (ApiError) rendered as {"status", "message"} with the
  backend's status code
• Shared RequestGateway closed on shutdown
"""
from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from beautydesk.config import settings
from beautydesk.routes.accounts import router as accounts_router
from beautydesk.routes.catalog import router as catalog_router
from beautydesk.routes.dashboard import router as dashboard_router
from beautydesk.routes.health import router as health_router
from beautydesk.services.gateway import ApiError, close_gateway

# ── Logging setup ─────────────────────────────────────────────────────────────


def _configure_logging() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer()
            if settings.debug
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
    )
    # Also configure standard logging to go through structlog
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )


_configure_logging()
logger = structlog.get_logger(__name__)

# ── Rate limiter ──────────────────────────────────────────────────────────────

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"],
)

# ── Request-ID middleware ─────────────────────────────────────────────────────


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Attaches a unique request ID to each incoming request.
    Reads X-Request-ID from the client if present, otherwise generates one.
    Echoes the request ID in the response header.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.perf_counter()
        response: Response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 1)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time-Ms"] = str(duration_ms)

        logger.info(
            "request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        structlog.contextvars.clear_contextvars()
        return response


# ── Error handling ────────────────────────────────────────────────────────────


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    logger.warning(
        "backend call failed",
        path=request.url.path,
        status=exc.status,
        message=exc.message,
    )
    return JSONResponse(
        status_code=exc.status,
        content={"status": exc.status, "message": exc.message},
    )


# ── Lifespan ──────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "BeautyDesk admin API starting",
        name=settings.app_name,
        version=settings.app_version,
        backend=settings.api_base_url or "NOT SET",
    )
    yield
    await close_gateway()
    logger.info("BeautyDesk admin API shutting down")


# ── Application factory ───────────────────────────────────────────────────────


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "**BeautyDesk** – admin back office for the beauty-services marketplace.\n\n"
            "Every endpoint is backed by the marketplace REST API. Collection reads "
            "are cached for a few minutes and concurrent identical calls share one "
            "backend request; writes drop the affected collection from the cache.\n\n"
            "Backend failures are returned as `{status, message}` with the backend's "
            "status code (408 on timeout)."
        ),
        openapi_tags=[
            {"name": "Catalog", "description": "Main categories, sub-categories, services and flags."},
            {"name": "Accounts", "description": "Login flow, profile and users."},
            {"name": "Dashboard", "description": "Dashboard stats, orders and cache control."},
            {"name": "Health", "description": "Liveness and readiness probes."},
        ],
        license_info={"name": "Proprietary"},
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # ── Middleware (order matters – outermost first) ───────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(SlowAPIMiddleware)

    # ── Error handlers ────────────────────────────────────────────────────────
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(ApiError, _api_error_handler)

    # ── Routers ───────────────────────────────────────────────────────────────
    app.include_router(health_router)
    app.include_router(catalog_router)
    app.include_router(accounts_router)
    app.include_router(dashboard_router)

    return app


app = create_app()
