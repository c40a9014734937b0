"""
Result cache — memoizes per-request inference results by canonical address set.
"""

from backend_tzinfer.cache.result_cache import DEFAULT_CACHE_TTL_SEC, ResultCache, canonical_key

__all__ = ["DEFAULT_CACHE_TTL_SEC", "ResultCache", "canonical_key"]
