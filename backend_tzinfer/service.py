"""
Timezone inference service — the request-level orchestration.

Received → validate → canonical key → cache lookup
    hit:  respond with the cached results
    miss: address pool (chain pool → histogram → scorer) → store → respond

Configuration is passed in explicitly; the service never reads the environment.
"""

from __future__ import annotations

from typing import Any, Sequence

from backend_tzinfer.activity.fetcher import ActivityProvider, SimActivityProvider
from backend_tzinfer.agent_worker.address_pool import infer_addresses
from backend_tzinfer.analysis_engine.scorer import InferenceResult
from backend_tzinfer.cache.result_cache import ResultCache, canonical_key
from backend_tzinfer.config.settings import Settings
from backend_tzinfer.core.exceptions import ValidationError
from backend_tzinfer.tzinfer_logging import get_logger

logger = get_logger(__name__)

ADDRESSES_REQUIRED = "addresses array required"


def normalize_addresses(addresses: Any) -> list[str]:
    """
    Validate request input and drop case-insensitive duplicates (first spelling kept).

    Raises:
        ValidationError: input is not a non-empty list of non-blank strings.
    """
    if not isinstance(addresses, (list, tuple)) or not addresses:
        raise ValidationError(ADDRESSES_REQUIRED)
    unique: list[str] = []
    seen: set[str] = set()
    for raw in addresses:
        if not isinstance(raw, str) or not raw.strip():
            raise ValidationError("addresses must be non-empty strings")
        address = raw.strip()
        key = address.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(address)
    return unique


class TimezoneInferenceService:
    """Infer timezones for address batches, memoized by canonical address set."""

    def __init__(
        self,
        provider: ActivityProvider,
        cache: ResultCache,
        *,
        chain_ids: Sequence[str],
        workers: int,
    ) -> None:
        if not chain_ids:
            raise ValueError("chain_ids must be non-empty")
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self._provider = provider
        self._cache = cache
        self._chain_ids = tuple(chain_ids)
        self._workers = workers

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        provider: ActivityProvider | None = None,
        cache: ResultCache | None = None,
    ) -> "TimezoneInferenceService":
        return cls(
            provider or SimActivityProvider.from_settings(settings),
            cache or ResultCache(settings.cache_ttl_sec),
            chain_ids=settings.chain_ids,
            workers=settings.workers,
        )

    @property
    def cache(self) -> ResultCache:
        return self._cache

    @property
    def chain_ids(self) -> tuple[str, ...]:
        return self._chain_ids

    async def infer_timezones(self, addresses: Any) -> list[InferenceResult]:
        """
        Return one InferenceResult per distinct address, in request order.

        Raises:
            ValidationError: empty or malformed input (no fetch is attempted).
            AggregationError: merging or scoring failed unexpectedly.
        """
        unique = normalize_addresses(addresses)
        key = canonical_key(unique)
        cached = self._cache.get(key)
        if cached is not None:
            logger.info("timezone_cache_hit", address_count=len(unique))
            return list(cached)

        logger.info(
            "timezone_cache_miss",
            address_count=len(unique),
            chain_count=len(self._chain_ids),
            workers=self._workers,
        )
        results = await infer_addresses(
            unique,
            provider=self._provider,
            chain_ids=self._chain_ids,
            workers=self._workers,
        )
        self._cache.set(key, tuple(results))
        return results

    async def aclose(self) -> None:
        close = getattr(self._provider, "aclose", None)
        if close is not None:
            await close()
