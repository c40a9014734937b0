"""
Application settings.

Responsibilities:
- Load configuration from environment variables and the .env file.
- Validate required settings (SIM_PROXY_URL) and provide defaults for optional ones.
- Expose a typed, immutable Settings object for the API server, CLI and main.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend_tzinfer.config.env import (
    env_float,
    env_int,
    env_list,
    env_str,
    load_tzinfer_env,
)
from backend_tzinfer.core.exceptions import ConfigError

DEFAULT_CHAIN_IDS = "1,137,8453,10,42161"
DEFAULT_ACTIVITY_TYPES = "send,receive,mint,burn,swap,transfer"
DEFAULT_ACTIVITY_LIMIT = 1000
DEFAULT_WORKERS = 5
DEFAULT_CACHE_TTL_SEC = 300.0
DEFAULT_FETCH_TIMEOUT_SEC = 25.0
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 3001


@dataclass(frozen=True)
class Settings:
    """Typed settings for provider, worker pools, cache and API server."""

    sim_proxy_url: str
    chain_ids: tuple[str, ...] = tuple(DEFAULT_CHAIN_IDS.split(","))
    activity_types: tuple[str, ...] = tuple(DEFAULT_ACTIVITY_TYPES.split(","))
    activity_limit: int = DEFAULT_ACTIVITY_LIMIT
    workers: int = DEFAULT_WORKERS
    cache_ttl_sec: float = DEFAULT_CACHE_TTL_SEC
    fetch_timeout_sec: float = DEFAULT_FETCH_TIMEOUT_SEC
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT


def get_settings() -> Settings:
    """
    Build Settings from the environment (after loading .env).

    Raises:
        ConfigError: SIM_PROXY_URL is unset, or a numeric value is invalid.
    """
    load_tzinfer_env()
    proxy_url = env_str("SIM_PROXY_URL")
    if not proxy_url:
        raise ConfigError("SIM_PROXY_URL environment variable not set")
    chain_ids = env_list("SIM_CHAIN_IDS", DEFAULT_CHAIN_IDS)
    if not chain_ids:
        raise ConfigError("SIM_CHAIN_IDS must list at least one chain id")
    return Settings(
        sim_proxy_url=proxy_url.rstrip("/"),
        chain_ids=chain_ids,
        activity_types=env_list("SIM_ACTIVITY_TYPES", DEFAULT_ACTIVITY_TYPES),
        activity_limit=env_int("SIM_ACTIVITY_LIMIT", DEFAULT_ACTIVITY_LIMIT),
        workers=env_int("WORKERS", DEFAULT_WORKERS),
        cache_ttl_sec=env_float("CACHE_TTL_SEC", DEFAULT_CACHE_TTL_SEC),
        fetch_timeout_sec=env_float("FETCH_TIMEOUT_SEC", DEFAULT_FETCH_TIMEOUT_SEC),
        api_host=env_str("API_HOST", DEFAULT_API_HOST),
        api_port=env_int("PORT", DEFAULT_API_PORT),
    )
