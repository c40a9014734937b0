"""
FastAPI server — timezone inference over HTTP.

POST /api/timezone {"addresses": [...]} returns one result per distinct address.
Settings come from env (see config.settings); the service, its provider client
and its result cache live for the lifetime of the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend_tzinfer.config.settings import get_settings
from backend_tzinfer.core.exceptions import AggregationError, ValidationError
from backend_tzinfer.service import ADDRESSES_REQUIRED, TimezoneInferenceService
from backend_tzinfer.tzinfer_logging import get_logger

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Request / response models
# -----------------------------------------------------------------------------


class TimezoneResult(BaseModel):
    """One inferred timezone."""

    address: str = Field(..., description="Address as submitted")
    utc_offset_hours: int = Field(..., ge=-12, le=14, description="Best-fit UTC offset")
    utc_label: str = Field(..., description="e.g. UTC+9, UTC-5")
    iana_tz_example: str = Field(..., description="Representative IANA zone for the offset")
    median: int = Field(..., ge=0, description="sorted(hourly counts)[12]")
    ratio: float = Field(..., ge=0, le=1, description="Share of activity inside local 08:00-18:00")
    bars_high_over_mult: int = Field(..., ge=0, le=24, description="Hours with count >= 3x median")
    passes_rule: bool = Field(..., description="ratio > 0.5 and at least 3 high bars")


# -----------------------------------------------------------------------------
# Lifespan and dependency
# -----------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the inference service from settings unless one was injected; close its client on shutdown."""
    service = getattr(app.state, "service", None)
    owned = service is None
    if owned:
        settings = get_settings()
        service = TimezoneInferenceService.from_settings(settings)
        app.state.service = service
        logger.info(
            "api_service_started",
            chain_ids=list(settings.chain_ids),
            workers=settings.workers,
            cache_ttl_sec=settings.cache_ttl_sec,
        )

    yield

    if owned:
        await service.aclose()
        app.state.service = None
        logger.info("api_service_stopped")


def get_service(request: Request) -> TimezoneInferenceService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="service not ready")
    return service


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Backend TZInfer API",
    description="Infer the probable UTC offset of blockchain addresses from on-chain activity.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.post("/api/timezone", response_model=list[TimezoneResult])
async def infer_timezones(
    body: Any = Body(None, examples=[{"addresses": ["0xd8da6bf26964af9d7eed9e03e53415d37aa96045"]}]),
    service: TimezoneInferenceService = Depends(get_service),
) -> list[dict[str, Any]]:
    """
    Infer timezones for a batch of addresses.

    Body is {"addresses": [...]}; its shape is checked by the service so any other
    JSON (a bare array, a string, null) is a 400 rather than a 422. 500 when scoring fails.
    Upstream provider failures are not errors: affected chains count as no activity.
    """
    try:
        addresses = body.get("addresses") if isinstance(body, dict) else None
        results = await service.infer_timezones(addresses)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except AggregationError as e:
        logger.exception("timezone_inference_failed", error=str(e))
        raise HTTPException(status_code=500, detail="failed to infer timezones") from e
    except Exception as e:
        logger.exception("timezone_inference_unexpected_error", error=str(e))
        raise HTTPException(status_code=500, detail="failed to infer timezones") from e
    return [r.to_dict() for r in results]


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness check: API is up."""
    return {"status": "ok"}


@app.exception_handler(RequestValidationError)
async def timezone_body_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Unparseable JSON on /api/timezone is a 400 like any other bad body."""
    if request.url.path == "/api/timezone":
        return JSONResponse(status_code=400, content={"detail": ADDRESSES_REQUIRED})
    return await request_validation_exception_handler(request, exc)
