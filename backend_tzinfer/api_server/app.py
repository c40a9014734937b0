"""
FastAPI/ASGI application entrypoint.

Run with: uvicorn backend_tzinfer.api_server.app:app --host 0.0.0.0 --port 3001
"""

from backend_tzinfer.api_server.server import app

__all__ = ["app"]
