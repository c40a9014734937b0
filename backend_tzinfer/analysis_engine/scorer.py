"""
Timezone scoring — pick the UTC offset that best explains an activity histogram.

Responsibilities:
- Evaluate every candidate offset (-12..+14) by how much activity falls inside
  local waking hours [8, 18).
- Report confidence metrics (ratio of activity inside the window, number of
  pronounced hours) and whether the estimate passes the acceptance rule.
- Map the chosen offset to a representative IANA zone name.

Pure functions of the histogram; no ML, fully explainable.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Sequence

from backend_tzinfer.analysis_engine.histogram import HOURS_PER_DAY
from backend_tzinfer.core.exceptions import AggregationError

MIN_OFFSET = -12
MAX_OFFSET = 14
OFFSET_CANDIDATES = tuple(range(MIN_OFFSET, MAX_OFFSET + 1))

# Local hours treated as "plausibly awake": [DAY_START_HOUR, DAY_END_HOUR)
DAY_START_HOUR = 8
DAY_END_HOUR = 18

# Acceptance rule: more than half the activity in the window, and at least
# MIN_HIGH_BARS hours at HIGH_BAR_MULTIPLIER x the median or above
MIN_RATIO = 0.5
HIGH_BAR_MULTIPLIER = 3
MIN_HIGH_BARS = 3

DEFAULT_TIMEZONE = "Etc/UTC"

TZ_EXAMPLES: dict[int, str] = {
    -12: "Etc/GMT+12",
    -11: "Pacific/Pago_Pago",
    -10: "Pacific/Honolulu",
    -9: "America/Anchorage",
    -8: "America/Los_Angeles",
    -7: "America/Denver",
    -6: "America/Chicago",
    -5: "America/New_York",
    -4: "America/Halifax",
    -3: "America/Sao_Paulo",
    -2: "Atlantic/South_Georgia",
    -1: "Atlantic/Azores",
    0: "Etc/UTC",
    1: "Europe/Berlin",
    2: "Europe/Kaliningrad",
    3: "Europe/Moscow",
    4: "Asia/Dubai",
    5: "Asia/Karachi",
    6: "Asia/Dhaka",
    7: "Asia/Bangkok",
    8: "Asia/Shanghai",
    9: "Asia/Tokyo",
    10: "Australia/Sydney",
    11: "Pacific/Noumea",
    12: "Pacific/Auckland",
    13: "Pacific/Tongatapu",
    14: "Pacific/Kiritimati",
}


@dataclass(frozen=True)
class TimezoneScore:
    """Scoring output for one histogram."""

    utc_offset_hours: int
    utc_label: str
    iana_tz_example: str
    median: int
    ratio: float
    bars_high_over_mult: int
    passes_rule: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class InferenceResult:
    """Per-address result returned to callers: the address plus its TimezoneScore fields."""

    address: str
    utc_offset_hours: int
    utc_label: str
    iana_tz_example: str
    median: int
    ratio: float
    bars_high_over_mult: int
    passes_rule: bool

    @classmethod
    def from_score(cls, address: str, score: TimezoneScore) -> "InferenceResult":
        return cls(address=address, **score.to_dict())

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def example_timezone(offset: int) -> str:
    """Representative IANA zone for an offset; Etc/UTC when unmapped."""
    return TZ_EXAMPLES.get(offset, DEFAULT_TIMEZONE)


def utc_label(offset: int) -> str:
    """'UTC+0', 'UTC+9', 'UTC-5'."""
    return f"UTC{'+' if offset >= 0 else ''}{offset}"


def daytime_sum(counts: Sequence[int], offset: int) -> int:
    """Sum of counts whose UTC hour maps to local hour [8, 18) at this offset."""
    total = 0
    for hour in range(HOURS_PER_DAY):
        local_hour = (hour + offset) % HOURS_PER_DAY
        if DAY_START_HOUR <= local_hour < DAY_END_HOUR:
            total += counts[hour]
    return total


def literal_median(counts: Sequence[int]) -> int:
    """
    Upper middle element of the sorted histogram (sorted[12] for 24 buckets).

    Not the averaged median of an even-length list; the acceptance rule was
    calibrated against this value.
    """
    ordered = sorted(counts)
    return ordered[len(ordered) // 2]


def best_offset(counts: Sequence[int]) -> tuple[int, int]:
    """
    Return (offset, daytime_sum) with the strictly largest daytime sum.

    Candidates are evaluated from -12 upward with a strict '>' comparison, so on
    ties the most negative offset wins. An empty histogram has no evidence and
    yields (0, 0).
    """
    if not any(counts):
        return 0, 0
    chosen = 0
    chosen_score: int | None = None
    for offset in OFFSET_CANDIDATES:
        score = daytime_sum(counts, offset)
        if chosen_score is None or score > chosen_score:
            chosen_score = score
            chosen = offset
    return chosen, chosen_score or 0


def analyze_hourly_counts(counts: Sequence[int]) -> TimezoneScore:
    """
    Score a 24-bucket UTC histogram.

    Args:
        counts: Non-negative event counts indexed by UTC hour (0-23).

    Returns:
        TimezoneScore with the best offset, its label and example zone, the median,
        the in-window ratio, the number of high bars and the acceptance verdict.

    Raises:
        AggregationError: counts is not a 24-bucket histogram of non-negative integers.
    """
    if len(counts) != HOURS_PER_DAY:
        raise AggregationError(f"histogram must have {HOURS_PER_DAY} buckets, got {len(counts)}")
    if any(c < 0 for c in counts):
        raise AggregationError("histogram buckets must be non-negative")

    total = sum(counts)
    median = literal_median(counts)
    offset, score = best_offset(counts)
    ratio = score / total if total else 0.0
    high_bars = sum(1 for c in counts if c >= median * HIGH_BAR_MULTIPLIER)
    passes_rule = ratio > MIN_RATIO and high_bars >= MIN_HIGH_BARS

    return TimezoneScore(
        utc_offset_hours=offset,
        utc_label=utc_label(offset),
        iana_tz_example=example_timezone(offset),
        median=median,
        ratio=ratio,
        bars_high_over_mult=high_bars,
        passes_rule=passes_rule,
    )
