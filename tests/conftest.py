"""
Pytest fixtures for TZInfer tests. A fake activity provider replaces the Sim API,
so no test touches the network.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from typing import Any

import pytest

from backend_tzinfer.activity.models import ActivityEvent, FetchOutcome
from backend_tzinfer.cache.result_cache import ResultCache
from backend_tzinfer.service import TimezoneInferenceService

CHAIN_IDS = ("1", "137", "8453", "10", "42161")


def events_at_hours(address: str, hours: list[int], *, day: int = 1) -> list[ActivityEvent]:
    """One event per entry of `hours` (UTC), on 2024-05-<day>."""
    return [
        ActivityEvent(
            wallet_address=address,
            block_time=f"2024-05-{day:02d}T{hour:02d}:15:00Z",
            kind="send",
        )
        for hour in hours
    ]


class FakeProvider:
    """
    In-memory ActivityProvider.

    activity maps (address_lower, chain_id) -> events; failing is a set of chain ids
    (or (address_lower, chain_id) pairs) that return a failure outcome. Tracks call
    counts and the peak number of concurrent fetches.
    """

    def __init__(
        self,
        activity: dict[tuple[str, str], list[ActivityEvent]] | None = None,
        *,
        failing: set[Any] | None = None,
        delay_sec: float = 0.0,
    ) -> None:
        self.activity = activity or {}
        self.failing = failing or set()
        self.delay_sec = delay_sec
        self.calls: Counter[tuple[str, str]] = Counter()
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def fetch_activity(self, address: str, chain_id: str) -> FetchOutcome:
        key = (address.lower(), chain_id)
        self.calls[key] += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay_sec)
        finally:
            self.in_flight -= 1
        if chain_id in self.failing or key in self.failing:
            return FetchOutcome.failure(chain_id, "activity request returned HTTP 502")
        return FetchOutcome.success(chain_id, self.activity.get(key, []))

    async def aclose(self) -> None:
        self.closed = True

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def provider_factory():
    """FakeProvider class, for tests that need activity or failures."""
    return FakeProvider


@pytest.fixture
def make_events():
    return events_at_hours


@pytest.fixture
def service_factory():
    """Build a TimezoneInferenceService around a provider with a fresh cache."""

    def _build(provider, *, workers: int = 5, chain_ids=CHAIN_IDS, ttl_sec: float = 300.0):
        return TimezoneInferenceService(
            provider,
            ResultCache(ttl_sec),
            chain_ids=chain_ids,
            workers=workers,
        )

    return _build


@pytest.fixture
def client_factory():
    """FastAPI TestClient with an injected service; app state is reset afterwards."""
    from fastapi.testclient import TestClient

    from backend_tzinfer.api_server.server import app

    def _build(service):
        app.state.service = service
        return TestClient(app)

    yield _build
    app.state.service = None
