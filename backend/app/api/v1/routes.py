from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...schemas.tracker import ConfigResponse, StateResponse
from ...tracker import TrackerService

router = APIRouter(prefix="/api/v1", tags=["tracker"])


def get_tracker_service(request: Request) -> TrackerService:
    return request.app.state.tracker_service


@router.get("/state", response_model=StateResponse)
def read_state(service: TrackerService = Depends(get_tracker_service)) -> StateResponse:
    result = service.snapshot()
    return StateResponse.from_state(result.state)


@router.get("/config", response_model=ConfigResponse)
def read_config(service: TrackerService = Depends(get_tracker_service)) -> ConfigResponse:
    result = service.snapshot()
    return ConfigResponse.from_config(result.config)
