"""
beautydesk/services/accounts.py – OTP login, admin profile and users listing.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from beautydesk.models import FeatureUnavailable, ProfileUpdate
from beautydesk.services.gateway import ApiError, RequestGateway
from beautydesk.services.session import Session

logger = logging.getLogger(__name__)

PROFILE_KEY = "user-profile"


def _field(response: Any, name: str) -> Any:
    """Read *name* from the top level of *response* or from its ``data`` object."""
    if not isinstance(response, dict):
        return None
    value = response.get(name)
    if value is None and isinstance(response.get("data"), dict):
        value = response["data"].get(name)
    return value


class AuthApi:
    def __init__(self, gateway: RequestGateway) -> None:
        self._gateway = gateway

    async def register(self, name: str, phone_number: str, email: str) -> Any:
        return await self._gateway.request(
            "/auth/register",
            method="POST",
            body={"name": name, "phoneNumber": phone_number, "email": email},
        )

    async def login(self, phone_number: str) -> Any:
        """Ask the backend to send a login OTP to *phone_number*."""
        return await self._gateway.request(
            "/auth/login", method="POST", body={"phoneNumber": phone_number}
        )

    async def verify_login(self, phone_number: str, otp: str) -> Session:
        """Exchange the OTP for a token and store it as the active session.

        Raises ApiError(401) when the backend accepts the OTP but returns no
        token.
        """
        response = await self._gateway.request(
            "/auth/verify-login",
            method="POST",
            body={"phoneNumber": phone_number, "otp": otp},
        )
        token = _field(response, "token")
        if not token:
            raise ApiError(401, "Login response did not include a token")

        user = _field(response, "user") or {}
        session = Session(
            token=token,
            role=user.get("role") or "user",
            phone_number=phone_number,
            user_id=str(user.get("id") or user.get("_id") or ""),
        )
        self._gateway.session.save(session)
        # Cached data belongs to the previous session.
        self._gateway.invalidate()
        return session

    async def send_otp(self, phone_number: str) -> Any:
        return await self._gateway.request(
            "/auth/send-otp", method="POST", body={"phoneNumber": phone_number}
        )

    async def verify_otp(self, phone_number: str, otp: str) -> Any:
        return await self._gateway.request(
            "/auth/verify-otp",
            method="POST",
            body={"phoneNumber": phone_number, "otp": otp},
        )

    async def get_profile(self) -> Optional[dict[str, Any]]:
        return await self._gateway.cached_read(
            self._gateway.caller_key(PROFILE_KEY), "/auth/profile"
        )

    async def update_profile(self, data: ProfileUpdate) -> Any:
        response = await self._gateway.request(
            "/auth/profile", method="PUT", body=data.to_backend()
        )
        self._gateway.invalidate(PROFILE_KEY)
        return response

    async def save_address(self, address: str) -> Any:
        return await self._gateway.request(
            "/auth/address", method="POST", body={"address": address}
        )

    async def get_addresses(self) -> Any:
        return await self._gateway.request("/auth/address")

    def logout(self) -> None:
        self._gateway.session.clear()
        self._gateway.invalidate()
        logger.info("Logged out; session and cache cleared")


class UsersApi:
    """The backend exposes no users collection yet."""

    def __init__(self, gateway: RequestGateway) -> None:
        self._gateway = gateway

    async def list_users(self) -> FeatureUnavailable:
        return FeatureUnavailable(
            feature="users",
            reason="The backend does not provide a users endpoint.",
        )
