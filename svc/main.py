from __future__ import annotations
from dotenv import load_dotenv
load_dotenv()  # Load .env file before importing app modules

import time
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from sensorwatch.config import LOG_LEVEL
from sensorwatch.routes import router, get_service

logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s: %(name)s: %(message)s'
)
# Our own modules follow SVC_LOG_LEVEL (DEBUG shows every acquisition cycle)
logging.getLogger("sensorwatch").setLevel(LOG_LEVEL)

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request with status and timing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)
        process_time = time.time() - start_time

        # the dashboard polls these constantly; keep them out of INFO
        level = logging.DEBUG if request.method in ("GET", "OPTIONS") else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} | "
            f"IP: {client_ip} | "
            f"Status: {response.status_code} | "
            f"Time: {process_time:.3f}s"
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    service = get_service()
    service.start()
    try:
        yield
    finally:
        await service.stop()


def create_app() -> FastAPI:
    app = FastAPI(title="Sensor Telemetry Service", version="0.1.0", lifespan=lifespan)

    # Request logging middleware (add first so it wraps everything)
    app.add_middleware(LoggingMiddleware)

    # CORS for local web dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
