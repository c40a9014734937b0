"""
Configuration management for Backend TZInfer.

Loads and validates settings from environment variables and an optional .env
file. The core never reads the environment itself: settings are passed in as
explicit constructor arguments.
"""

from backend_tzinfer.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
