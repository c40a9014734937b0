"""
Pytest tests for the histogram accumulator (analysis_engine.histogram).
"""

from __future__ import annotations

import random
from datetime import datetime, timezone

import pytest

from backend_tzinfer.activity.models import ActivityEvent, FetchOutcome
from backend_tzinfer.analysis_engine.histogram import (
    accumulate_hours,
    build_histogram,
    empty_histogram,
    parse_block_time,
)

ADDRESS = "0xAbCdEf0000000000000000000000000000000001"
OTHER = "0x9999999999999999999999999999999999999999"


def _event(block_time, wallet=ADDRESS, kind="send") -> ActivityEvent:
    return ActivityEvent(wallet_address=wallet, block_time=block_time, kind=kind)


@pytest.mark.parametrize(
    "value, hour",
    [
        ("2024-05-01T13:45:00Z", 13),
        ("2024-05-01T13:45:00.123Z", 13),
        ("2024-05-01T13:45:00+00:00", 13),
        ("2024-05-01T13:45:00", 13),
        ("2024-05-01T08:30:00+02:00", 6),
        (1714571100, 13),
        (1714571100.5, 13),
    ],
)
def test_parse_block_time(value, hour):
    parsed = parse_block_time(value)
    assert parsed is not None
    assert parsed.tzinfo is not None
    assert parsed.astimezone(timezone.utc).hour == hour


@pytest.mark.parametrize("value", [None, "", "   ", "not a date", "2024-13-45T99:00:00Z", True, {"t": 1}])
def test_parse_block_time_rejects_garbage(value):
    assert parse_block_time(value) is None


def test_accumulate_counts_utc_hours():
    events = [
        _event("2024-05-01T00:05:00Z"),
        _event("2024-05-01T13:00:00Z"),
        _event("2024-05-02T13:59:59Z"),
        _event("2024-05-03T23:10:00Z"),
    ]
    counts = accumulate_hours(events)
    assert len(counts) == 24
    assert counts[0] == 1
    assert counts[13] == 2
    assert counts[23] == 1
    assert sum(counts) == 4


def test_accumulate_drops_unparsable_times():
    events = [_event("garbage"), _event(None), _event("2024-05-01T10:00:00Z")]
    counts = accumulate_hours(events)
    assert sum(counts) == 1
    assert counts[10] == 1


def test_accumulate_address_filter_is_case_insensitive():
    events = [
        _event("2024-05-01T10:00:00Z", wallet=ADDRESS.lower()),
        _event("2024-05-01T11:00:00Z", wallet=ADDRESS.upper().replace("0X", "0x")),
        _event("2024-05-01T12:00:00Z", wallet=OTHER),
        # no wallet attribution: kept
        _event("2024-05-01T14:00:00Z", wallet=None),
    ]
    counts = accumulate_hours(events, filter_address=ADDRESS)
    assert counts[10] == 1
    assert counts[11] == 1
    assert counts[12] == 0
    assert counts[14] == 1
    # without a filter every parsable event counts
    assert sum(accumulate_hours(events)) == 4


def test_accumulate_is_order_independent():
    base = datetime(2024, 5, 1, tzinfo=timezone.utc).timestamp()
    rng = random.Random(7)
    events = [_event(base + rng.randrange(0, 7 * 86400)) for _ in range(200)]
    expected = accumulate_hours(events)
    for _ in range(3):
        shuffled = list(events)
        rng.shuffle(shuffled)
        assert accumulate_hours(shuffled) == expected


def test_accumulate_into_existing_histogram():
    counts = empty_histogram()
    counts[5] = 2
    result = accumulate_hours([_event("2024-05-01T05:00:00Z")], counts=counts)
    assert result is counts
    assert counts[5] == 3
    with pytest.raises(ValueError):
        accumulate_hours([], counts=[0] * 12)


def test_build_histogram_ignores_failed_chains():
    outcomes = [
        FetchOutcome.success("1", [_event("2024-05-01T09:00:00Z"), _event("2024-05-01T09:30:00Z")]),
        FetchOutcome.failure("137", "activity request timed out after 25.0s"),
        FetchOutcome.success("8453", [_event("2024-05-01T17:00:00Z"), _event("2024-05-01T18:00:00Z", wallet=OTHER)]),
    ]
    counts = build_histogram(outcomes, ADDRESS)
    assert counts[9] == 2
    assert counts[17] == 1
    assert counts[18] == 0
    assert sum(counts) == 3


def test_build_histogram_all_failed_is_zero():
    outcomes = [FetchOutcome.failure(c, "HTTP 500") for c in ("1", "10")]
    assert build_histogram(outcomes, ADDRESS) == [0] * 24
