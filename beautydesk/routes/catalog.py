"""
beautydesk/routes/catalog.py – main category, sub-category and service endpoints.

Handlers let ApiError propagate; the app-level handler renders it.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from beautydesk.models import (
    MainCategoryCreate,
    MainCategoryUpdate,
    ServiceCreate,
    ServiceFlag,
    ServiceFlagToggle,
    ServicesBySubCategoriesRequest,
    ServiceUpdate,
    SubCategoryCreate,
    SubCategoryUpdate,
)
from beautydesk.routes.deps import caller_gateway
from beautydesk.services.catalog import MainCategoriesApi, ServicesApi, SubCategoriesApi
from beautydesk.services.gateway import RequestGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["Catalog"])


def _main(gateway: RequestGateway = Depends(caller_gateway)) -> MainCategoriesApi:
    return MainCategoriesApi(gateway)


def _sub(gateway: RequestGateway = Depends(caller_gateway)) -> SubCategoriesApi:
    return SubCategoriesApi(gateway)


def _services(gateway: RequestGateway = Depends(caller_gateway)) -> ServicesApi:
    return ServicesApi(gateway)


# ── Main categories ───────────────────────────────────────────────────────────


@router.get("/main-categories", summary="List main categories (cached)")
async def list_main_categories(api: MainCategoriesApi = Depends(_main)) -> Any:
    return await api.get_all()


@router.post("/main-categories", status_code=201, summary="Create a main category")
async def create_main_category(
    payload: MainCategoryCreate, api: MainCategoriesApi = Depends(_main)
) -> Any:
    return await api.create(payload)


@router.get("/main-categories/{category_id}")
async def get_main_category(category_id: str, api: MainCategoriesApi = Depends(_main)) -> Any:
    return await api.get_by_id(category_id)


@router.put("/main-categories/{category_id}")
async def update_main_category(
    category_id: str, payload: MainCategoryUpdate, api: MainCategoriesApi = Depends(_main)
) -> Any:
    return await api.update(category_id, payload)


@router.delete("/main-categories/{category_id}")
async def delete_main_category(category_id: str, api: MainCategoriesApi = Depends(_main)) -> Any:
    return await api.delete(category_id)


@router.get(
    "/main-categories/{category_id}/sub-categories",
    summary="List the sub-categories of one main category",
)
async def list_sub_categories_of(category_id: str, api: MainCategoriesApi = Depends(_main)) -> Any:
    return await api.get_sub_categories(category_id)


# ── Sub-categories ────────────────────────────────────────────────────────────


@router.get("/sub-categories", summary="List sub-categories (cached)")
async def list_sub_categories(api: SubCategoriesApi = Depends(_sub)) -> Any:
    return await api.get_all()


@router.post("/sub-categories", status_code=201, summary="Create a sub-category")
async def create_sub_category(payload: SubCategoryCreate, api: SubCategoriesApi = Depends(_sub)) -> Any:
    return await api.create(payload)


@router.get("/sub-categories/{category_id}")
async def get_sub_category(category_id: str, api: SubCategoriesApi = Depends(_sub)) -> Any:
    return await api.get_by_id(category_id)


@router.put("/sub-categories/{category_id}")
async def update_sub_category(
    category_id: str, payload: SubCategoryUpdate, api: SubCategoriesApi = Depends(_sub)
) -> Any:
    return await api.update(category_id, payload)


@router.delete("/sub-categories/{category_id}")
async def delete_sub_category(category_id: str, api: SubCategoriesApi = Depends(_sub)) -> Any:
    return await api.delete(category_id)


# ── Services ──────────────────────────────────────────────────────────────────


@router.get("/services", summary="List services (cached)")
async def list_services(api: ServicesApi = Depends(_services)) -> Any:
    return await api.get_all()


@router.post("/services", status_code=201, summary="Create a service")
async def create_service(payload: ServiceCreate, api: ServicesApi = Depends(_services)) -> Any:
    return await api.create(payload)


@router.post(
    "/services/by-sub-categories",
    summary="List services belonging to any of the given sub-categories",
)
async def services_by_sub_categories(
    payload: ServicesBySubCategoriesRequest, api: ServicesApi = Depends(_services)
) -> Any:
    return await api.get_by_sub_categories(payload.sub_category_ids)


@router.get(
    "/services/flags/{flag}",
    summary="List services carrying a flag",
    description="Filters the cached services collection; no extra backend call when it is fresh.",
)
async def list_flagged_services(flag: ServiceFlag, api: ServicesApi = Depends(_services)) -> Any:
    return await api.list_flagged(flag)


@router.get("/services/{service_id}")
async def get_service(service_id: str, api: ServicesApi = Depends(_services)) -> Any:
    return await api.get_by_id(service_id)


@router.put("/services/{service_id}")
async def update_service(
    service_id: str, payload: ServiceUpdate, api: ServicesApi = Depends(_services)
) -> Any:
    return await api.update(service_id, payload)


@router.delete("/services/{service_id}")
async def delete_service(service_id: str, api: ServicesApi = Depends(_services)) -> Any:
    return await api.delete(service_id)


@router.put("/services/{service_id}/flags/{flag}", summary="Mark or unmark a service flag")
async def toggle_service_flag(
    service_id: str,
    flag: ServiceFlag,
    payload: ServiceFlagToggle,
    api: ServicesApi = Depends(_services),
) -> Any:
    return await api.set_flag(service_id, flag, payload.enabled)
