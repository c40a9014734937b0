"""
Chain worker pool — fetch one address across all configured chains.

Every chain id is attempted exactly once, at most `workers` fetches are in
flight, and a failed or slow chain never blocks or cancels the others.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from backend_tzinfer.activity.fetcher import ActivityProvider
from backend_tzinfer.activity.models import ActivityEvent, FetchOutcome
from backend_tzinfer.agent_worker.pool import run_bounded
from backend_tzinfer.tzinfer_logging import get_logger

logger = get_logger(__name__)


async def fetch_address_activity(
    provider: ActivityProvider,
    address: str,
    chain_ids: Sequence[str],
    workers: int,
) -> list[FetchOutcome]:
    """Return one FetchOutcome per chain id (failed chains included, tagged)."""

    async def fetch_chain(chain_id: str) -> FetchOutcome:
        return await provider.fetch_activity(address, chain_id)

    outcomes = await run_bounded(list(chain_ids), fetch_chain, workers, name="chain_pool")
    failed = [o.chain_id for o in outcomes if not o.ok]
    if failed:
        logger.info(
            "chain_fetch_partial",
            address=address,
            failed_chains=failed,
            chain_count=len(outcomes),
        )
    return outcomes


def merge_events(outcomes: Iterable[FetchOutcome]) -> list[ActivityEvent]:
    """Union of events from successful outcomes; failures contribute zero events."""
    events: list[ActivityEvent] = []
    for outcome in outcomes:
        if outcome.ok:
            events.extend(outcome.events)
    return events
