"""
beautydesk/services/dashboard.py – counts and profile for the dashboard home.

The four reads run one after another with a pause in between; the backend
rate-limits bursts. A failed read is recorded and the loader moves on.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from beautydesk.config import settings
from beautydesk.models import ApiErrorBody, DashboardStats
from beautydesk.services.accounts import AuthApi
from beautydesk.services.catalog import MainCategoriesApi, ServicesApi, SubCategoriesApi
from beautydesk.services.gateway import ApiError, RequestGateway

logger = logging.getLogger(__name__)


class DashboardLoader:
    def __init__(
        self,
        gateway: RequestGateway,
        delay_seconds: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._main = MainCategoriesApi(gateway)
        self._sub = SubCategoriesApi(gateway)
        self._services = ServicesApi(gateway)
        self._auth = AuthApi(gateway)
        self._delay = (
            settings.dashboard_request_delay_seconds if delay_seconds is None else delay_seconds
        )
        self._sleep = sleep

    async def load(self) -> DashboardStats:
        stats = DashboardStats()

        async def attempt(name: str, fetch: Callable[[], Awaitable[Any]], pause: bool) -> Any:
            try:
                result = await fetch()
            except ApiError as exc:
                logger.warning("Dashboard: %s fetch failed [%d] %s", name, exc.status, exc.message)
                stats.errors[name] = ApiErrorBody(status=exc.status, message=exc.message)
                return None
            if pause and self._delay > 0:
                await self._sleep(self._delay)
            return result

        main_categories = await attempt("main-categories", self._main.get_all, True) or []
        sub_categories = await attempt("sub-categories", self._sub.get_all, True) or []
        services = await attempt("services", self._services.get_all, True) or []
        stats.profile = await attempt("profile", self._auth.get_profile, False)

        stats.total_main_categories = len(main_categories)
        stats.total_sub_categories = len(sub_categories)
        stats.total_services = len(services)

        collections_failed = any(
            key in stats.errors for key in ("main-categories", "sub-categories", "services")
        )
        if collections_failed and not (main_categories or sub_categories or services):
            logger.warning("Dashboard: every collection is empty – backend may be rate limiting")
            stats.rate_limited = True

        logger.info(
            "Dashboard data loaded",
            extra={
                "main_categories": stats.total_main_categories,
                "sub_categories": stats.total_sub_categories,
                "services": stats.total_services,
                "errors": len(stats.errors),
            },
        )
        return stats
