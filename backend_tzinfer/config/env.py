"""
Environment variable loading for Backend TZInfer.

- SIM_PROXY_URL: proxy in front of the Sim activity API (adds the API key), e.g. https://proxy.example.workers.dev/v1
- SIM_CHAIN_IDS: comma-separated chain ids (default: Ethereum, Polygon, Base, Optimism, Arbitrum)
- SIM_ACTIVITY_LIMIT / SIM_ACTIVITY_TYPES: per address per chain page size and activity filter
- WORKERS: concurrent fetchers (address pool and chain pool)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from backend_tzinfer.core.exceptions import ConfigError

# Project root: config is backend_tzinfer/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"


def load_tzinfer_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    load_dotenv(_ENV_PATH, override=False)


def env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def env_int(name: str, default: int, *, minimum: int = 1) -> int:
    """Read an integer env var; raise ConfigError when it is not an int or below minimum."""
    raw = env_str(name)
    if not raw:
        return default
    try:
        value = int(raw, 10)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


def env_float(name: str, default: float) -> float:
    raw = env_str(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def env_list(name: str, default: str) -> tuple[str, ...]:
    """Comma-separated list; blanks dropped."""
    raw = env_str(name, default)
    return tuple(s.strip() for s in raw.split(",") if s.strip())
