"""
beautydesk/services/gateway.py – the single choke point for backend calls.

Key design decisions
────────────────────
• One RequestGateway per process (see get_gateway) owns both pieces of shared
  state: the TTL cache of collections and the table of in-flight requests.
  Routes work on a per-caller view (for_caller) that shares that state but
  carries the caller's own bearer token.
• Concurrent calls with the same request key ("<METHOD>_<endpoint>", scoped to
  the caller's token when there is one) share one network call. The body is
  not part of the key, so two concurrent POSTs to the same endpoint collapse
  into one call.
• Every failure surfaces as ApiError(status, message). Nothing is retried
  here; retry is a caller concern.
• Writes never touch the cache themselves; resource APIs call invalidate()
  after a successful write.
"""
from __future__ import annotations

import asyncio
import copy
import hashlib
import json
import logging
import time
from typing import Any, Callable, Optional

import httpx

from beautydesk.config import settings
from beautydesk.services.cache import TTLCache
from beautydesk.services.session import Session, SessionStore

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests. Please wait a few minutes and try again."


# ── Custom exception ──────────────────────────────────────────────────────────


class ApiError(Exception):
    """A classified backend failure.

    ``status`` is the HTTP status of the response, or a synthetic one:
    408 for a timeout, 500 for missing configuration, 502 for an undecodable
    success body and 503 for a transport failure.
    """

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, message={self.message!r})"


# ── Helpers ───────────────────────────────────────────────────────────────────


def request_key(method: str, endpoint: str) -> str:
    return f"{method.upper()}_{endpoint}"


def token_scope(token: str) -> str:
    """Short stable digest of a bearer token, used to scope shared keys."""
    return hashlib.sha256(token.encode()).hexdigest()[:12]


def unwrap_resource(body: Any, name: str) -> Any:
    """Pull the *name* collection out of a response body.

    The backend returns either ``{name: [...]}`` or ``{"data": {name: [...]}}``.
    Anything else yields an empty list.
    """
    if isinstance(body, dict):
        if body.get(name) is not None:
            return body[name]
        nested = body.get("data")
        if isinstance(nested, dict) and nested.get(name) is not None:
            return nested[name]
    return []


# ── Gateway ───────────────────────────────────────────────────────────────────


class RequestGateway:
    """Mediates every outbound call: auth, timeout, dedup, cache, errors."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_prefix: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        cache_ttl: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        session: Optional[SessionStore] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._base_url = (settings.api_base_url if base_url is None else base_url).rstrip("/")
        self._prefix = settings.api_prefix if api_prefix is None else api_prefix
        self._timeout = settings.request_timeout_seconds if timeout is None else timeout
        self._client = client or httpx.AsyncClient(timeout=self._timeout)
        self._cache = TTLCache(
            ttl_seconds=settings.cache_ttl_seconds if cache_ttl is None else cache_ttl,
            clock=clock,
        )
        self._pending: dict[str, asyncio.Future] = {}
        self.session = session or SessionStore()

    @property
    def cache(self) -> TTLCache:
        return self._cache

    @property
    def configured(self) -> bool:
        return bool(self._base_url)

    def is_pending(self, method: str, endpoint: str) -> bool:
        return self._scoped_key(method, endpoint) in self._pending

    def for_caller(self, token: Optional[str]) -> RequestGateway:
        """Return a view of this gateway that authenticates as *token*.

        The view shares the HTTP client, the cache and the in-flight table,
        but has its own SessionStore, so a token saved by one caller is never
        attached to another caller's requests. ``None`` gives an anonymous view.
        """
        view = copy.copy(self)
        view.session = SessionStore(Session(token=token) if token else None)
        return view

    def caller_key(self, resource_key: str) -> str:
        """Cache key for data that belongs to the current session (the profile)."""
        token = self.session.token
        return f"{resource_key}:{token_scope(token)}" if token else resource_key

    # ── Public API ────────────────────────────────────────────────────────────

    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        body: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        Send one call to the backend and return the decoded JSON body.

        Args:
            endpoint: path below the API prefix, e.g. "/services/42".
            method:   HTTP method.
            body:     JSON-serialisable payload, sent as the request body.
            headers:  extra headers; these override the defaults.

        Returns:
            The decoded JSON body, or None when the response has no content.

        Raises:
            ValueError: if *endpoint* is empty.
            ApiError:   for any failure (see ApiError for the status values).
        """
        if not endpoint:
            raise ValueError("endpoint must be a non-empty path")
        if not self._base_url:
            raise ApiError(500, "API base URL not configured")

        method = method.upper()
        key = self._scoped_key(method, endpoint)

        pending = self._pending.get(key)
        if pending is not None:
            logger.debug("Reusing pending request for %s", key)
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(self._send(key, endpoint, method, body, headers))
        self._pending[key] = task
        # Shielded so a cancelled waiter leaves the shared call running for the others.
        return await asyncio.shield(task)

    async def cached_read(
        self,
        resource_key: str,
        endpoint: str,
        *,
        unwrap: Optional[str] = None,
    ) -> Any:
        """Return the *resource_key* collection, from cache while it is fresh.

        When *unwrap* is given, the collection is pulled out of the response
        with unwrap_resource(); otherwise the whole body is cached.
        """
        cached = self._cache.get(resource_key)
        if cached is not None:
            return cached

        body = await self.request(endpoint)
        data = unwrap_resource(body, unwrap) if unwrap else body
        self._cache.set(resource_key, data)
        return data

    def invalidate(self, resource_key: Optional[str] = None) -> None:
        """Drop one cached collection, or all of them when no key is given.

        A named key also drops the current session's copy (see caller_key).
        """
        if resource_key:
            self._cache.delete(resource_key)
            self._cache.delete(self.caller_key(resource_key))
        else:
            self._cache.clear()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── Internals ─────────────────────────────────────────────────────────────

    def _scoped_key(self, method: str, endpoint: str) -> str:
        key = request_key(method, endpoint)
        token = self.session.token
        return f"{key}#{token_scope(token)}" if token else key

    def _build_headers(self, extra: Optional[dict[str, str]]) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.session.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    async def _send(
        self,
        key: str,
        endpoint: str,
        method: str,
        body: Any,
        headers: Optional[dict[str, str]],
    ) -> Any:
        # The in-flight entry goes on every exit, including an unencodable body.
        try:
            url = f"{self._base_url}{self._prefix}{endpoint}"
            content = json.dumps(body) if body is not None else None
            t0 = time.perf_counter()
            logger.debug("API request: %s %s", method, url)

            try:
                response = await asyncio.wait_for(
                    self._client.request(
                        method,
                        url,
                        headers=self._build_headers(headers),
                        content=content,
                    ),
                    timeout=self._timeout,
                )
            except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
                logger.warning("API request timed out: %s %s", method, endpoint)
                raise ApiError(408, "Request timeout") from exc
            except httpx.RequestError as exc:
                logger.warning("API request failed: %s %s – %s", method, endpoint, exc)
                raise ApiError(503, f"Network error: {exc}") from exc

            latency_ms = round((time.perf_counter() - t0) * 1000, 1)
            logger.debug(
                "API response",
                extra={"key": key, "status_code": response.status_code, "latency_ms": latency_ms},
            )
            return self._decode(endpoint, response)
        finally:
            self._pending.pop(key, None)

    @staticmethod
    def _decode(endpoint: str, response: httpx.Response) -> Any:
        status = response.status_code

        if not response.is_success:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {"message": "Unknown error"}
            logger.warning("API error [%d] for %s: %s", status, endpoint, error_data)

            if status == 429:
                logger.warning("Rate limit exceeded – wait a few minutes before retrying")
                raise ApiError(status, RATE_LIMIT_MESSAGE)
            if status == 404:
                raise ApiError(status, f"Endpoint not available: {endpoint}")

            message = error_data.get("message") if isinstance(error_data, dict) else None
            raise ApiError(status, message or f"HTTP {status}")

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(502, "Invalid JSON response") from exc


# ── Module-level singleton (lazy init) ────────────────────────────────────────

_gateway_instance: Optional[RequestGateway] = None


def get_gateway() -> RequestGateway:
    """Return the shared RequestGateway (created on first call)."""
    global _gateway_instance
    if _gateway_instance is None:
        _gateway_instance = RequestGateway()
    return _gateway_instance


async def close_gateway() -> None:
    """Close the shared gateway's HTTP client and forget the instance."""
    global _gateway_instance
    if _gateway_instance is not None:
        await _gateway_instance.aclose()
        _gateway_instance = None


def clear_cache(resource_key: Optional[str] = None) -> None:
    """Invalidate one collection (or everything) on the shared gateway."""
    get_gateway().invalidate(resource_key)
