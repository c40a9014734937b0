"""
Main entrypoint: FastAPI timezone inference server.

Env: SIM_PROXY_URL (required), SIM_CHAIN_IDS, SIM_ACTIVITY_LIMIT, WORKERS, CACHE_TTL_SEC,
FETCH_TIMEOUT_SEC, API_HOST, PORT, LOG_LEVEL, LOG_FORMAT.

Equivalent: uvicorn backend_tzinfer.api_server.app:app --host 0.0.0.0 --port 3001
"""

import os
import sys

# Configure structured JSON logging before other imports that may log
from backend_tzinfer.tzinfer_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Validate settings, then run the FastAPI server in the main thread."""
    from backend_tzinfer.config.settings import get_settings
    from backend_tzinfer.core.exceptions import ConfigError

    try:
        settings = get_settings()
    except ConfigError as e:
        logger.error("main_config_error", message=str(e))
        sys.exit(1)

    from backend_tzinfer.api_server.app import app
    import uvicorn

    logger.info(
        "main_server_starting",
        host=settings.api_host,
        port=settings.api_port,
        chain_ids=list(settings.chain_ids),
        workers=settings.workers,
    )
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
