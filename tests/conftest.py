"""
tests/conftest.py – shared pytest configuration and fixtures.

Integration tests (marked with @pytest.mark.integration) are skipped by
default. Pass --integration to opt in:

    pytest --integration tests/test_integration.py -v

Everything else talks to FakeBackend through httpx.MockTransport; no real
network requests are made.
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

import httpx
import pytest
import pytest_asyncio

from beautydesk.services.gateway import RequestGateway

BASE_URL = "http://backend.test"


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="Run integration tests that call the real marketplace backend.",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if not config.getoption("--integration"):
        skip = pytest.mark.skip(reason="Pass --integration to run this test.")
        for item in items:
            if item.get_closest_marker("integration"):
                item.add_marker(skip)


# ── Fakes ─────────────────────────────────────────────────────────────────────


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBackend:
    """Scripted stand-in for the marketplace REST API.

    Routes are keyed by (METHOD, path-below-/api). A route is either a
    ``(status, json)`` pair or a callable taking the httpx.Request and
    returning an httpx.Response (sync or async). Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[httpx.Request] = []
        self.latency: float = 0.0

    def on(self, method: str, path: str, status: int = 200, json: Any = None) -> None:
        self.routes[(method.upper(), path)] = (status, json)

    def on_call(self, method: str, path: str, handler: Callable) -> None:
        self.routes[(method.upper(), path)] = handler

    def count(self, method: str, path: str) -> int:
        return sum(
            1
            for r in self.calls
            if r.method == method.upper() and r.url.path == f"/api{path}"
        )

    def last(self, method: str, path: str) -> Optional[httpx.Request]:
        for r in reversed(self.calls):
            if r.method == method.upper() and r.url.path == f"/api{path}":
                return r
        return None

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.latency:
            await asyncio.sleep(self.latency)

        path = request.url.path.removeprefix("/api")
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"message": "Route not found"})
        if callable(route):
            result = route(request)
            if asyncio.iscoroutine(result):
                result = await result
            return result
        status, body = route
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_gateway(backend: FakeBackend, clock: FakeClock):
    """Factory for gateways wired to *backend*; keyword args override defaults."""

    def _make(**overrides: Any) -> RequestGateway:
        kwargs: dict[str, Any] = {
            "base_url": BASE_URL,
            "api_prefix": "/api",
            "timeout": 2.0,
            "cache_ttl": 600,
            "client": httpx.AsyncClient(transport=httpx.MockTransport(backend.handle)),
            "clock": clock,
        }
        kwargs.update(overrides)
        return RequestGateway(**kwargs)

    return _make


@pytest_asyncio.fixture
async def gateway(make_gateway):
    gw = make_gateway()
    yield gw
    await gw.aclose()
