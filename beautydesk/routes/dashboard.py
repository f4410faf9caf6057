"""
beautydesk/routes/dashboard.py – dashboard stats, orders, backend health and cache control.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from beautydesk.models import CacheClearResponse, DashboardStats
from beautydesk.routes.deps import caller_gateway
from beautydesk.services.dashboard import DashboardLoader
from beautydesk.services.gateway import RequestGateway
from beautydesk.services.orders import HealthApi, OrdersApi

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["Dashboard"])


@router.get("/dashboard", response_model=DashboardStats, summary="Dashboard counts and profile")
async def dashboard(gateway: RequestGateway = Depends(caller_gateway)) -> DashboardStats:
    return await DashboardLoader(gateway).load()


@router.get(
    "/orders",
    summary="Booking details",
    description="Returns an empty list when the backend has no booking-details endpoint.",
)
async def list_orders(gateway: RequestGateway = Depends(caller_gateway)) -> Any:
    return await OrdersApi(gateway).get_booking_details()


@router.get(
    "/backend-health",
    summary="Backend health",
    description="Passes through the backend's own /health response.",
)
async def backend_health(gateway: RequestGateway = Depends(caller_gateway)) -> Any:
    return await HealthApi(gateway).check()


@router.delete("/cache", response_model=CacheClearResponse, summary="Clear every cached collection")
async def clear_all(gateway: RequestGateway = Depends(caller_gateway)) -> CacheClearResponse:
    gateway.invalidate()
    return CacheClearResponse(cleared="all")


@router.delete(
    "/cache/{resource_key}",
    response_model=CacheClearResponse,
    summary="Clear one cached collection",
)
async def clear_one(
    resource_key: str, gateway: RequestGateway = Depends(caller_gateway)
) -> CacheClearResponse:
    gateway.invalidate(resource_key)
    return CacheClearResponse(cleared=resource_key)
