from __future__ import annotations
import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from .models import HealthResponse, TelemetrySnapshot, PollResponse, ErrorResponse
from .errors import TelemetryError
from .service import TelemetryService

logger = logging.getLogger(__name__)

router = APIRouter()
svc: TelemetryService | None = None


def get_service() -> TelemetryService:
    global svc
    if svc is None:
        svc = TelemetryService()
    return svc


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns service health, the reading source mode (sim or real) and whether the last acquisition succeeded",
    tags=["Health"]
)
def health(service: TelemetryService = Depends(get_service)) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok", mode=service.mode, connected=service.connected)


@router.get(
    "/api/data",
    summary="Latest raw reading",
    description="Fetches the latest reading from the sensor source and relays its JSON body unchanged",
    responses={
        200: {"description": "Upstream body, verbatim"},
        500: {"model": ErrorResponse, "description": "Upstream unreachable, non-OK status or invalid body"}
    },
    tags=["Sensor"]
)
async def proxy_data(service: TelemetryService = Depends(get_service)) -> JSONResponse:
    """Relay the upstream reading."""
    try:
        data: Dict[str, Any] = await run_in_threadpool(service.fetch_raw)
    except TelemetryError as e:
        logger.error(f"API route error: {e}")
        return _proxy_error(e)
    except Exception as e:
        logger.exception("API route error: unexpected failure in reading source")
        return _proxy_error(e)
    return JSONResponse(content=data)


def _proxy_error(err: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": f"Failed to fetch sensor data: {err}"},
    )


@router.get(
    "/telemetry",
    response_model=TelemetrySnapshot,
    summary="Live chart data",
    description="Returns the sliding window of chart points, per-channel trends and connection health",
    tags=["Telemetry"]
)
def get_telemetry(service: TelemetryService = Depends(get_service)) -> TelemetrySnapshot:
    return service.snapshot()


@router.post(
    "/telemetry/poll",
    response_model=PollResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Poll now",
    description="Starts an acquisition cycle immediately. Not accepted while a cycle is in flight or the poller is stopped.",
    tags=["Telemetry"]
)
async def poll_now(service: TelemetryService = Depends(get_service)) -> PollResponse:
    return PollResponse(accepted=service.poll_now())
