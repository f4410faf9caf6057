"""
beautydesk/services/session.py – ambient storage for the admin session.

Holds the bearer token (plus the role / phone / id returned at login) that
the gateway attaches to every outbound call. Process-local and in-memory.
Each caller view of the gateway gets its own store.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class Session:
    token: str
    role: str = "user"
    phone_number: str = ""
    user_id: str = ""


class SessionStore:
    def __init__(self, session: Optional[Session] = None) -> None:
        self._session = session

    @property
    def token(self) -> Optional[str]:
        return self._session.token if self._session else None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def save(self, session: Session) -> None:
        self._session = session
        logger.info("Session stored", extra={"role": session.role})

    def clear(self) -> None:
        self._session = None
