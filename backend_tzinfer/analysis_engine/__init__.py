"""
Analysis engine — histogram accumulation and timezone scoring.

Pure functions: no I/O, no shared state.
"""

from backend_tzinfer.analysis_engine.histogram import (
    HOURS_PER_DAY,
    accumulate_hours,
    build_histogram,
    empty_histogram,
    parse_block_time,
)
from backend_tzinfer.analysis_engine.scorer import (
    InferenceResult,
    TimezoneScore,
    analyze_hourly_counts,
    daytime_sum,
    example_timezone,
)

__all__ = [
    "HOURS_PER_DAY",
    "InferenceResult",
    "TimezoneScore",
    "accumulate_hours",
    "analyze_hourly_counts",
    "build_histogram",
    "daytime_sum",
    "empty_histogram",
    "example_timezone",
    "parse_block_time",
]
