"""
Activity package — fetch on-chain activity for an address across chains.

The fetcher talks to the Sim activity API (through a key-adding proxy) and
returns tagged outcomes; the chain pool fans out over the configured chains.
"""

from backend_tzinfer.activity.chain_pool import fetch_address_activity, merge_events
from backend_tzinfer.activity.fetcher import ActivityProvider, SimActivityProvider
from backend_tzinfer.activity.models import ActivityEvent, FetchOutcome

__all__ = [
    "ActivityEvent",
    "ActivityProvider",
    "FetchOutcome",
    "SimActivityProvider",
    "fetch_address_activity",
    "merge_events",
]
