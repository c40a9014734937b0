"""
Pytest tests for the bounded worker pools (agent_worker.pool, activity.chain_pool,
agent_worker.address_pool). Async code runs under asyncio.run.
"""

from __future__ import annotations

import asyncio

import pytest

from backend_tzinfer.activity.chain_pool import fetch_address_activity, merge_events
from backend_tzinfer.agent_worker.address_pool import address_worker_count, infer_addresses
from backend_tzinfer.agent_worker.pool import run_bounded
from backend_tzinfer.core.exceptions import AggregationError

CHAINS = ["1", "137", "8453", "10", "42161"]
ADDRESS = "0xAbC0000000000000000000000000000000000001"


# --- run_bounded ---


def test_run_bounded_respects_limit_and_drains():
    state = {"in_flight": 0, "peak": 0}
    done: list[int] = []

    async def handler(item: int) -> int:
        state["in_flight"] += 1
        state["peak"] = max(state["peak"], state["in_flight"])
        await asyncio.sleep(0.001 * (item % 3))
        state["in_flight"] -= 1
        done.append(item)
        return item * 2

    results = asyncio.run(run_bounded(list(range(20)), handler, 3))
    assert results == [i * 2 for i in range(20)]
    assert sorted(done) == list(range(20))
    assert state["peak"] <= 3
    assert state["in_flight"] == 0


def test_run_bounded_empty_and_invalid_limit():
    async def handler(item):
        return item

    assert asyncio.run(run_bounded([], handler, 4)) == []
    with pytest.raises(ValueError):
        asyncio.run(run_bounded([1], handler, 0))


def test_run_bounded_propagates_handler_error():
    async def handler(item: int) -> int:
        if item == 2:
            raise RuntimeError("boom")
        await asyncio.sleep(0)
        return item

    with pytest.raises(RuntimeError, match="boom"):
        asyncio.run(run_bounded([1, 2, 3, 4], handler, 2))


# --- chain pool ---


def test_every_chain_attempted_exactly_once(provider_factory):
    provider = provider_factory(delay_sec=0.001)
    outcomes = asyncio.run(fetch_address_activity(provider, ADDRESS, CHAINS, 2))
    assert sorted(o.chain_id for o in outcomes) == sorted(CHAINS)
    for chain in CHAINS:
        assert provider.calls[(ADDRESS.lower(), chain)] == 1
    assert provider.max_in_flight <= 2


def test_chain_failure_does_not_block_others(provider_factory, make_events):
    activity = {
        (ADDRESS.lower(), "1"): make_events(ADDRESS, [9, 10]),
        (ADDRESS.lower(), "8453"): make_events(ADDRESS, [11]),
    }
    provider = provider_factory(activity, failing={"137", "10"})
    outcomes = asyncio.run(fetch_address_activity(provider, ADDRESS, CHAINS, 5))
    failed = {o.chain_id for o in outcomes if not o.ok}
    assert failed == {"137", "10"}
    events = merge_events(outcomes)
    assert len(events) == 3


def test_chain_pool_single_worker_is_sequential(provider_factory):
    provider = provider_factory(delay_sec=0.001)
    asyncio.run(fetch_address_activity(provider, ADDRESS, CHAINS, 1))
    assert provider.max_in_flight == 1
    assert provider.total_calls == len(CHAINS)


# --- address pool ---


@pytest.mark.parametrize(
    "configured, count, expected",
    [
        (5, 1, 1),
        (5, 2, 1),
        (5, 3, 2),
        (5, 10, 5),
        (5, 40, 5),
        (2, 7, 2),
        (1, 100, 1),
        (5, 0, 1),
    ],
)
def test_address_worker_count(configured, count, expected):
    assert address_worker_count(configured, count) == expected


def test_infer_addresses_one_result_per_address_in_order(provider_factory, make_events):
    addresses = [f"0x{i:040x}" for i in range(1, 8)]
    # every address busy 13:00-22:00 UTC on chain 1 -> UTC-5
    activity = {(a.lower(), "1"): make_events(a, list(range(13, 23)) * 3) for a in addresses}
    provider = provider_factory(activity, delay_sec=0.001)
    results = asyncio.run(infer_addresses(addresses, provider=provider, chain_ids=CHAINS, workers=3))
    assert [r.address for r in results] == addresses
    assert all(r.utc_offset_hours == -5 for r in results)
    assert provider.total_calls == len(addresses) * len(CHAINS)
    # nested pools: min(3, ceil(7 / 2)) = 3 address workers x 3 chain workers
    assert provider.max_in_flight <= 3 * 3


def test_infer_addresses_total_upstream_failure(provider_factory):
    provider = provider_factory(failing=set(CHAINS))
    results = asyncio.run(infer_addresses([ADDRESS], provider=provider, chain_ids=CHAINS, workers=5))
    assert len(results) == 1
    result = results[0]
    assert result.address == ADDRESS
    assert result.utc_offset_hours == 0
    assert result.iana_tz_example == "Etc/UTC"
    assert result.ratio == 0
    assert result.passes_rule is False


def test_scoring_failure_is_aggregation_error(provider_factory, monkeypatch):
    import backend_tzinfer.agent_worker.address_pool as address_pool

    def broken(outcomes, address):
        raise KeyError("bucket")

    monkeypatch.setattr(address_pool, "build_histogram", broken)
    provider = provider_factory()
    with pytest.raises(AggregationError, match="failed to score"):
        asyncio.run(infer_addresses([ADDRESS], provider=provider, chain_ids=CHAINS, workers=2))
