"""
Application-level exceptions.

Failures are isolated to the smallest unit possible: a ProviderError never leaves
the fetcher (it becomes a failed FetchOutcome), a ValidationError is a client-side
failure (HTTP 400) and an AggregationError is a server-side failure (HTTP 500).
"""

from __future__ import annotations


class TZInferError(Exception):
    """Base class for all Backend TZInfer errors."""


class ValidationError(TZInferError):
    """Malformed or empty address input; rejected before any fetch."""


class ProviderError(TZInferError):
    """Activity fetch failed for one address/chain pair (timeout, non-2xx, bad payload)."""

    def __init__(self, message: str, *, chain_id: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.chain_id = chain_id
        self.status_code = status_code


class AggregationError(TZInferError):
    """Unexpected failure while merging activity or scoring a histogram."""


class ConfigError(TZInferError):
    """Missing or invalid configuration value."""
