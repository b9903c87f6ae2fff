from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import partial

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .api.v1.routes import get_tracker_service
from .api.v1.routes import router as v1_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .middleware import RequestLoggingMiddleware
from .tracker import FileStateStore, StateWriteError, TrackerService, load_tracker_config
from .tracker.render import render_page

logger = logging.getLogger(__name__)


def build_tracker_service(settings: Settings) -> TrackerService:
    return TrackerService(
        FileStateStore(settings.state_file),
        partial(load_tracker_config, settings.tracker_config_file),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Wire the tracker service and logging on startup."""

    configure_logging()
    settings: Settings = get_settings()

    app.state.settings = settings
    app.state.tracker_service = build_tracker_service(settings)

    logger.info(
        "Starting tracker %s state_file=%s config_file=%s",
        settings.version,
        settings.state_file,
        settings.tracker_config_file,
    )
    yield


app = FastAPI(title="Mental Health Tracker", version=get_settings().version, lifespan=lifespan)
app.add_middleware(RequestLoggingMiddleware)
app.include_router(v1_router)


@app.exception_handler(StateWriteError)
async def state_write_error_handler(request: Request, exc: StateWriteError) -> JSONResponse:
    logger.error("State write failed: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "state storage unavailable"},
    )


@app.get("/", response_class=HTMLResponse)
def tracker_page(
    request: Request,
    service: TrackerService = Depends(get_tracker_service),
) -> HTMLResponse:
    result = service.handle_query(request.url.query)
    return HTMLResponse(render_page(result.state, result.config, result.now))


@app.get("/healthz")
async def healthz(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {"status": "ok", "version": settings.version}


@app.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
