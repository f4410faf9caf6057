"""
beautydesk/routes/deps.py – per-request gateway views.

Every /v1 call acts with the bearer token the caller sent. The token is
forwarded to the backend, which decides whether it is valid; nothing a
caller logs in with is ever attached to another caller's requests.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from beautydesk.services.gateway import RequestGateway, get_gateway

bearer = HTTPBearer(auto_error=False)


def caller_gateway(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    gateway: RequestGateway = Depends(get_gateway),
) -> RequestGateway:
    """Gateway view for an authenticated caller; 401 without a bearer token."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return gateway.for_caller(credentials.credentials)


def anonymous_gateway(gateway: RequestGateway = Depends(get_gateway)) -> RequestGateway:
    """Gateway view that sends no token (login flow)."""
    return gateway.for_caller(None)
