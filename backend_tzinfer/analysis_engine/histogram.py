"""
Histogram accumulator — fold activity events into 24 UTC hour buckets.

Events whose block_time does not parse are dropped, as are events attributed to
a different wallet when an address filter is given. Accumulation is commutative,
so the result does not depend on event order.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

from backend_tzinfer.activity.chain_pool import merge_events
from backend_tzinfer.activity.models import ActivityEvent, FetchOutcome

HOURS_PER_DAY = 24


def empty_histogram() -> list[int]:
    return [0] * HOURS_PER_DAY


def parse_block_time(value: Any) -> datetime | None:
    """
    Parse a provider block_time into an aware UTC datetime.

    Accepts ISO 8601 strings (trailing 'Z' allowed; naive values are UTC) and
    unix seconds as int/float. Returns None when the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        if not isinstance(value, str):
            return None
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    except (ValueError, OverflowError, OSError):
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def accumulate_hours(
    events: Iterable[ActivityEvent],
    filter_address: str | None = None,
    counts: list[int] | None = None,
) -> list[int]:
    """
    Increment the UTC-hour bucket of every usable event.

    Args:
        events: Activity events (any order).
        filter_address: Keep only events whose wallet_address matches (case-insensitive).
            Events without a wallet_address are kept.
        counts: Existing 24-bucket histogram to add to; a fresh one when None.

    Returns:
        The 24-bucket histogram (the same list as `counts` when given).
    """
    if counts is None:
        counts = empty_histogram()
    elif len(counts) != HOURS_PER_DAY:
        raise ValueError(f"histogram must have {HOURS_PER_DAY} buckets, got {len(counts)}")
    wanted = filter_address.strip().lower() if filter_address else None
    for event in events:
        ts = parse_block_time(event.block_time)
        if ts is None:
            continue
        if wanted and event.wallet_address and event.wallet_address.lower() != wanted:
            continue
        counts[ts.hour] += 1
    return counts


def build_histogram(outcomes: Iterable[FetchOutcome], address: str) -> list[int]:
    """Histogram for one address from its per-chain outcomes (failed chains count as zero)."""
    return accumulate_hours(merge_events(outcomes), filter_address=address)
