"""
Activity fetcher — one outbound call per address/chain pair.

Responsibilities:
- Call the Sim /evm/activity endpoint (through the configured proxy) for one
  address on one chain, filtered by activity type and capped by limit.
- Enforce the per-call timeout.
- Turn every failure mode (timeout, transport error, non-2xx, malformed payload)
  into a failed FetchOutcome. Nothing is raised past fetch_activity; no retries.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence
from urllib.parse import quote

import httpx

from backend_tzinfer.activity.models import ActivityEvent, FetchOutcome
from backend_tzinfer.config.settings import (
    DEFAULT_ACTIVITY_LIMIT,
    DEFAULT_ACTIVITY_TYPES,
    DEFAULT_FETCH_TIMEOUT_SEC,
    Settings,
)
from backend_tzinfer.core.exceptions import ProviderError
from backend_tzinfer.tzinfer_logging import get_logger

logger = get_logger(__name__)


class ActivityProvider(Protocol):
    """Anything that can fetch activity for one address on one chain."""

    async def fetch_activity(self, address: str, chain_id: str) -> FetchOutcome:
        ...


class SimActivityProvider:
    """
    Async client for the Sim activity API.

    One httpx.AsyncClient is created lazily and reused for every call until
    aclose(); use as an async context manager or close it from the app lifespan.
    """

    def __init__(
        self,
        base_url: str,
        *,
        activity_types: Sequence[str] = tuple(DEFAULT_ACTIVITY_TYPES.split(",")),
        limit: int = DEFAULT_ACTIVITY_LIMIT,
        timeout_sec: float = DEFAULT_FETCH_TIMEOUT_SEC,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Proxy base URL (e.g. https://proxy.example.workers.dev/v1); the proxy adds X-API-Key.
            activity_types: Activity kinds to request (send, receive, mint, burn, swap, transfer).
            limit: Page size per address per chain.
            timeout_sec: HTTP timeout for each call.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
        """
        if not base_url.strip():
            raise ValueError("base_url must be non-empty")
        if limit < 1:
            raise ValueError("limit must be positive")
        if timeout_sec <= 0:
            raise ValueError("timeout_sec must be positive")
        self._base_url = base_url.strip().rstrip("/")
        self._activity_types = ",".join(activity_types)
        self._limit = limit
        self._timeout_sec = timeout_sec
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "SimActivityProvider":
        return cls(
            settings.sim_proxy_url,
            activity_types=settings.activity_types,
            limit=settings.activity_limit,
            timeout_sec=settings.fetch_timeout_sec,
            **kwargs,
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout_sec),
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "SimActivityProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def activity_url(self, address: str) -> str:
        # One path segment: "?", "#" and "/" in an address must not leak into the URL.
        return f"{self._base_url}/evm/activity/{quote(address.strip().lower(), safe='')}"

    def activity_params(self, chain_id: str) -> dict[str, Any]:
        return {
            "chain_ids": chain_id,
            "type": self._activity_types,
            "limit": self._limit,
            "sort_by": "block_time",
            "sort_order": "asc",
        }

    async def fetch_activity(self, address: str, chain_id: str) -> FetchOutcome:
        """Fetch one page of activity; failures come back as FetchOutcome.failure."""
        try:
            items = await self._get_activity(address, chain_id)
        except ProviderError as e:
            logger.warning(
                "activity_fetch_failed",
                address=address,
                chain_id=chain_id,
                status_code=e.status_code,
                error=str(e),
            )
            return FetchOutcome.failure(chain_id, str(e))

        events = [
            ActivityEvent.from_api_item(item, chain_id)
            for item in items
            if isinstance(item, dict)
        ]
        logger.debug(
            "activity_fetched",
            address=address,
            chain_id=chain_id,
            event_count=len(events),
        )
        return FetchOutcome.success(chain_id, events)

    async def _get_activity(self, address: str, chain_id: str) -> list[Any]:
        """Perform the GET; raise ProviderError on transport, status or payload error."""
        client = self._get_client()
        try:
            resp = await client.get(self.activity_url(address), params=self.activity_params(chain_id))
            resp.raise_for_status()
            data = resp.json()
        except httpx.InvalidURL as e:
            raise ProviderError(f"invalid activity URL: {e}", chain_id=chain_id) from e
        except httpx.TimeoutException as e:
            raise ProviderError(
                f"activity request timed out after {self._timeout_sec}s", chain_id=chain_id
            ) from e
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"activity request returned HTTP {e.response.status_code}",
                chain_id=chain_id,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"activity request failed: {e}", chain_id=chain_id) from e
        except ValueError as e:
            raise ProviderError("activity response is not valid JSON", chain_id=chain_id) from e

        if not isinstance(data, dict):
            raise ProviderError("activity response is not a JSON object", chain_id=chain_id)
        activity = data.get("activity")
        if activity is None:
            return []
        if not isinstance(activity, list):
            raise ProviderError("activity field is not a list", chain_id=chain_id)
        return activity
