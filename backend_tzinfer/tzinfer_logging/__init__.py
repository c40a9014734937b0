"""
Structured logging for Backend TZInfer.

JSON logs with timestamp, event_type, address and chain_id.
Use get_logger() in all modules for aggregation-friendly output.
"""

from backend_tzinfer.tzinfer_logging.logger import bind_address, configure_logging, get_logger

__all__ = ["bind_address", "configure_logging", "get_logger"]
