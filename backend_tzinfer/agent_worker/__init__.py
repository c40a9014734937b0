"""
Agent worker package — bounded concurrent orchestration.

run_bounded is the shared queue + N workers primitive used by the chain pool and
by the address pool (agent_worker.address_pool), which runs
fetch → histogram → score for every requested address.
"""

from backend_tzinfer.agent_worker.pool import run_bounded

__all__ = ["run_bounded"]
