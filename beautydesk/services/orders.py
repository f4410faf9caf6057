"""
beautydesk/services/orders.py – cart, checkout and booking details.
"""
from __future__ import annotations

import logging
from typing import Any

from beautydesk.services.gateway import ApiError, RequestGateway

logger = logging.getLogger(__name__)


class OrdersApi:
    def __init__(self, gateway: RequestGateway) -> None:
        self._gateway = gateway

    async def get_booking_details(self) -> Any:
        """Return the booking list; an absent endpoint counts as no bookings."""
        try:
            return await self._gateway.request("/cart/booking-details")
        except ApiError as exc:
            if exc.status == 404:
                logger.warning("Booking details endpoint not available, returning empty data")
                return []
            raise

    async def get_cart(self) -> Any:
        return await self._gateway.request("/cart")

    async def add(self, service_id: str, quantity: int = 1) -> Any:
        return await self._post("/cart/add", {"serviceId": service_id, "quantity": quantity})

    async def remove(self, service_id: str) -> Any:
        return await self._post("/cart/remove", {"serviceId": service_id})

    async def increase(self, service_id: str, amount: int = 1) -> Any:
        return await self._post("/cart/increase", {"serviceId": service_id, "amount": amount})

    async def decrease(self, service_id: str, amount: int = 1) -> Any:
        return await self._post("/cart/decrease", {"serviceId": service_id, "amount": amount})

    async def clear(self) -> Any:
        return await self._post("/cart/clear")

    async def checkout(self) -> Any:
        return await self._post("/cart/checkout")

    async def checkout_with_details(
        self,
        checkout_id: str,
        professional_type: str,
        date: str,
        time: str,
        address: str,
    ) -> Any:
        return await self._post(
            "/cart/checkout-with-details",
            {
                "checkoutId": checkout_id,
                "professionalType": professional_type,
                "date": date,
                "time": time,
                "address": address,
            },
        )

    async def _post(self, endpoint: str, body: Any = None) -> Any:
        return await self._gateway.request(endpoint, method="POST", body=body)


class HealthApi:
    def __init__(self, gateway: RequestGateway) -> None:
        self._gateway = gateway

    async def check(self) -> Any:
        return await self._gateway.request("/health")
