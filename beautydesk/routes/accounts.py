"""
beautydesk/routes/accounts.py – login flow, admin profile and users listing.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, status

from beautydesk.models import (
    FeatureUnavailable,
    LoginRequest,
    LoginResponse,
    ProfileUpdate,
    VerifyLoginRequest,
)
from beautydesk.routes.deps import anonymous_gateway, caller_gateway
from beautydesk.services.accounts import AuthApi, UsersApi
from beautydesk.services.gateway import RequestGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["Accounts"])


def _login(gateway: RequestGateway = Depends(anonymous_gateway)) -> AuthApi:
    return AuthApi(gateway)


def _auth(gateway: RequestGateway = Depends(caller_gateway)) -> AuthApi:
    return AuthApi(gateway)


@router.post("/auth/login", summary="Send a login OTP")
async def login(payload: LoginRequest, api: AuthApi = Depends(_login)) -> Any:
    return await api.login(payload.phone_number)


@router.post(
    "/auth/verify-login",
    response_model=LoginResponse,
    summary="Verify the OTP and start a session",
    description="Returns the backend token; send it as a bearer token on every other /v1 call.",
)
async def verify_login(
    payload: VerifyLoginRequest, api: AuthApi = Depends(_login)
) -> LoginResponse:
    session = await api.verify_login(payload.phone_number, payload.otp)
    return LoginResponse(
        token=session.token,
        role=session.role,
        user_id=session.user_id,
        phone_number=session.phone_number,
        is_admin=session.role == "admin",
    )


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(api: AuthApi = Depends(_auth)) -> None:
    api.logout()


@router.get("/auth/profile", summary="Current admin profile (cached)")
async def get_profile(api: AuthApi = Depends(_auth)) -> Any:
    return await api.get_profile()


@router.put("/auth/profile")
async def update_profile(payload: ProfileUpdate, api: AuthApi = Depends(_auth)) -> Any:
    return await api.update_profile(payload)


@router.get(
    "/users",
    response_model=FeatureUnavailable,
    summary="List users",
    description="The backend has no users endpoint; this reports the feature as unavailable.",
)
async def list_users(gateway: RequestGateway = Depends(caller_gateway)) -> FeatureUnavailable:
    return await UsersApi(gateway).list_users()
