"""
Data models for activity fetched from the provider.

ActivityEvent is one discrete on-chain action; FetchOutcome tags the result of
one address/chain fetch as success (with events) or failure (with a reason), so
partial failure is explicit rather than hidden in an except block.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ActivityEvent:
    """
    One item of a Sim /evm/activity page.

    block_time is kept as the raw provider value (ISO string or unix seconds);
    parsing happens in the histogram accumulator so unparsable events are dropped there.
    """

    wallet_address: str | None
    block_time: Any
    kind: str | None
    chain_id: str | None = None

    @classmethod
    def from_api_item(cls, item: dict[str, Any], chain_id: str | None = None) -> "ActivityEvent":
        """Build from a single activity item of the provider response."""
        wallet = item.get("wallet_address")
        raw_chain = item.get("chain_id", chain_id)
        return cls(
            wallet_address=str(wallet) if wallet else None,
            block_time=item.get("block_time"),
            kind=item.get("type"),
            chain_id=str(raw_chain) if raw_chain is not None else None,
        )


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one fetch: events on success, error reason on failure."""

    chain_id: str
    events: tuple[ActivityEvent, ...] = field(default_factory=tuple)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, chain_id: str, events: list[ActivityEvent]) -> "FetchOutcome":
        return cls(chain_id=chain_id, events=tuple(events))

    @classmethod
    def failure(cls, chain_id: str, reason: str) -> "FetchOutcome":
        return cls(chain_id=chain_id, error=reason)
