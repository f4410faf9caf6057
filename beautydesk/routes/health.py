"""
beautydesk/routes/health.py – liveness and readiness endpoints.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter

from beautydesk.config import settings
from beautydesk.models import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/healthz",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns 200 as long as the application process is running.",
)
async def healthz() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=settings.app_version,
        backend_configured=bool(settings.api_base_url),
    )


@router.get(
    "/readyz",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description=(
        "Returns 200 when the service is ready to handle requests. "
        "Checks that the backend base URL is configured."
    ),
)
async def readyz() -> ReadinessResponse:
    checks: dict = {}

    url_ok = bool(settings.api_base_url)
    checks["api_base_url_configured"] = url_ok
    checks["api_prefix"] = settings.api_prefix or "NOT SET"
    checks["cache_ttl_seconds"] = settings.cache_ttl_seconds

    return ReadinessResponse(ready=url_ok, checks=checks)
