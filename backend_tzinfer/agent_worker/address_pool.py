"""
Address worker pool — fetch, accumulate and score every requested address.

Each worker takes an address from the shared queue and runs
chain pool → histogram → scorer for it before taking the next one. Results come
back in request order. Upstream failures never reach this level (they are
zero-activity chains); anything that goes wrong while merging or scoring is
wrapped in AggregationError.
"""

from __future__ import annotations

import math
from typing import Sequence

from backend_tzinfer.activity.chain_pool import fetch_address_activity
from backend_tzinfer.activity.fetcher import ActivityProvider
from backend_tzinfer.agent_worker.pool import run_bounded
from backend_tzinfer.analysis_engine.histogram import build_histogram
from backend_tzinfer.analysis_engine.scorer import InferenceResult, analyze_hourly_counts
from backend_tzinfer.core.exceptions import AggregationError
from backend_tzinfer.tzinfer_logging import bind_address


def address_worker_count(configured_limit: int, address_count: int) -> int:
    """min(configured, max(1, ceil(n / 2))): two addresses per worker, never above the limit."""
    return min(configured_limit, max(1, math.ceil(address_count / 2)))


async def infer_address(
    address: str,
    *,
    provider: ActivityProvider,
    chain_ids: Sequence[str],
    workers: int,
) -> InferenceResult:
    """Run the full pipeline for one address."""
    log = bind_address(address, __name__)
    outcomes = await fetch_address_activity(provider, address, chain_ids, workers)
    try:
        counts = build_histogram(outcomes, address)
        score = analyze_hourly_counts(counts)
    except AggregationError:
        raise
    except Exception as e:
        raise AggregationError(f"failed to score activity for {address}: {e}") from e
    result = InferenceResult.from_score(address, score)
    log.info(
        "address_inferred",
        event_count=sum(counts),
        failed_chains=sum(1 for o in outcomes if not o.ok),
        utc_offset_hours=result.utc_offset_hours,
        ratio=round(result.ratio, 4),
        passes_rule=result.passes_rule,
    )
    return result


async def infer_addresses(
    addresses: Sequence[str],
    *,
    provider: ActivityProvider,
    chain_ids: Sequence[str],
    workers: int,
) -> list[InferenceResult]:
    """
    Infer timezones for all addresses with a bounded address pool.

    Args:
        addresses: Addresses to analyze (already validated and de-duplicated).
        provider: Activity provider shared by every fetch.
        chain_ids: Chains to query for each address.
        workers: Configured pool size; bounds both the address pool and each chain pool.

    Returns:
        One InferenceResult per address, in the order of `addresses`.
    """

    async def handle(address: str) -> InferenceResult:
        return await infer_address(
            address, provider=provider, chain_ids=chain_ids, workers=workers
        )

    return await run_bounded(
        list(addresses),
        handle,
        address_worker_count(workers, len(addresses)),
        name="address_pool",
    )
