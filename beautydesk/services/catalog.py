"""
beautydesk/services/catalog.py – main categories, sub-categories and services.

Each collection is cached on the gateway under a fixed resource key; every
successful write drops that key before returning, so the next get_all()
goes back to the backend.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from beautydesk.models import (
    MainCategoryCreate,
    MainCategoryUpdate,
    ServiceCreate,
    ServiceFlag,
    ServiceUpdate,
    SubCategoryCreate,
    SubCategoryUpdate,
)
from beautydesk.services.gateway import RequestGateway

logger = logging.getLogger(__name__)

MAIN_CATEGORIES_KEY = "main-categories"
SUB_CATEGORIES_KEY = "sub-categories"
SERVICES_KEY = "services"


class _CrudApi:
    """CRUD over one backend collection with a cached list read."""

    resource_key: str
    endpoint: str
    collection_field: str

    def __init__(self, gateway: RequestGateway) -> None:
        self._gateway = gateway

    async def get_all(self) -> list[dict[str, Any]]:
        return await self._gateway.cached_read(
            self.resource_key, self.endpoint, unwrap=self.collection_field
        )

    async def get_by_id(self, item_id: str) -> Any:
        return await self._gateway.request(f"{self.endpoint}/{item_id}")

    async def _write(self, endpoint: str, method: str, body: Any = None) -> Any:
        response = await self._gateway.request(endpoint, method=method, body=body)
        self._gateway.invalidate(self.resource_key)
        return response

    async def _create(self, body: dict[str, Any]) -> Any:
        return await self._write(self.endpoint, "POST", body)

    async def _update(self, item_id: str, body: dict[str, Any]) -> Any:
        return await self._write(f"{self.endpoint}/{item_id}", "PUT", body)

    async def delete(self, item_id: str) -> Any:
        return await self._write(f"{self.endpoint}/{item_id}", "DELETE")


class MainCategoriesApi(_CrudApi):
    resource_key = MAIN_CATEGORIES_KEY
    endpoint = "/main-categories"
    collection_field = "mainCategories"

    async def create(self, data: MainCategoryCreate) -> Any:
        return await self._create(data.to_backend())

    async def update(self, item_id: str, data: MainCategoryUpdate) -> Any:
        return await self._update(item_id, data.to_backend())

    async def get_sub_categories(self, main_category_id: str) -> Any:
        return await self._gateway.request(f"/sub-categories/main/{main_category_id}")


class SubCategoriesApi(_CrudApi):
    resource_key = SUB_CATEGORIES_KEY
    endpoint = "/sub-categories"
    collection_field = "subCategories"

    async def create(self, data: SubCategoryCreate) -> Any:
        return await self._create(data.to_backend())

    async def update(self, item_id: str, data: SubCategoryUpdate) -> Any:
        return await self._update(item_id, data.to_backend())


# ── Service flags ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class FlagRoute:
    mark_endpoint: str
    unmark_endpoint: str
    attribute: str


def _route(slug: str, attribute: str) -> FlagRoute:
    return FlagRoute(f"/services/{slug}", f"/services/remove-{slug}", attribute)


FLAG_ROUTES: dict[ServiceFlag, FlagRoute] = {
    ServiceFlag.TRENDING_NEAR_YOU: _route("trending-near-you", "isTrendingNearYou"),
    ServiceFlag.BEST_SELLER: _route("best-seller", "isBestSeller"),
    ServiceFlag.LAST_MINUTE_ADDON: _route("last-minute-addon", "isLastMinuteAddon"),
    ServiceFlag.PEOPLE_ALSO_AVAILED: _route("people-also-availed", "isPeopleAlsoAvailed"),
    ServiceFlag.SPA_RETREAT_FOR_WOMEN: _route("spa-retreat-for-women", "isSpaRetreatForWomen"),
    ServiceFlag.WHATS_NEW: _route("whats-new", "isWhatsNew"),
}


def filter_by_flag(services: Iterable[dict[str, Any]], flag: ServiceFlag) -> list[dict[str, Any]]:
    """Return the services that currently carry *flag*."""
    attribute = FLAG_ROUTES[flag].attribute
    return [s for s in services if s.get(attribute)]


class ServicesApi(_CrudApi):
    resource_key = SERVICES_KEY
    endpoint = "/services"
    collection_field = "services"

    async def create(self, data: ServiceCreate) -> Any:
        return await self._create(data.to_backend())

    async def update(self, item_id: str, data: ServiceUpdate) -> Any:
        return await self._update(item_id, data.to_backend())

    async def get_by_sub_categories(self, sub_category_ids: list[str]) -> Any:
        return await self._gateway.request(
            "/services/by-subcategories",
            method="POST",
            body={"subCategoryIds": sub_category_ids},
        )

    async def get_by_sub_category(self, sub_category_id: str) -> Any:
        return await self._gateway.request(f"/services/subcategory/{sub_category_id}")

    async def set_flag(self, service_id: str, flag: ServiceFlag, enabled: bool) -> Any:
        """Mark or unmark *service_id* with *flag*."""
        route = FLAG_ROUTES[flag]
        endpoint = route.mark_endpoint if enabled else route.unmark_endpoint
        logger.info(
            "Toggling service flag",
            extra={"service_id": service_id, "flag": flag.value, "enabled": enabled},
        )
        return await self._write(endpoint, "POST", {"serviceId": service_id})

    async def list_flagged(self, flag: ServiceFlag) -> list[dict[str, Any]]:
        return filter_by_flag(await self.get_all(), flag)
