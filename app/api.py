"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import ValidationError

from app.schemas import (
    ActiveTarget,
    HealthResponse,
    LatestReadingResponse,
    SetActiveRequest,
    SetActiveResponse,
)
from app.security import require_node_secret
from services.bridge import BridgeService, build_default_bridge

router = APIRouter()


def get_bridge() -> BridgeService:
    return build_default_bridge()


async def _read_selection(request: Request) -> SetActiveRequest:
    # read after the secret check; an empty or undecodable body counts as missing fields
    raw = await request.body()
    try:
        return SetActiveRequest.model_validate_json(raw)
    except ValidationError:
        return SetActiveRequest()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> HealthResponse:
    return HealthResponse()


@router.post(
    "/set-active-id",
    response_model=SetActiveResponse,
    summary="Select the active instance for a device class and notify devices.",
    dependencies=[Depends(require_node_secret)],
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": SetActiveRequest.model_json_schema()}},
        }
    },
)
async def set_active_id(
    request: Request,
    bridge: BridgeService = Depends(get_bridge),
) -> SetActiveResponse:
    selection = await _read_selection(request)
    try:
        identity = bridge.set_active(selection.type, selection.id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return SetActiveResponse(active=ActiveTarget.from_identity(identity))


@router.get(
    "/latest/{device_type}/{device_id}",
    response_model=LatestReadingResponse,
    summary="Fetch the latest temperature for a device.",
    responses={status.HTTP_204_NO_CONTENT: {"description": "No data for this device yet."}},
    dependencies=[Depends(require_node_secret)],
)
async def get_latest(
    device_type: str,
    device_id: str,
    bridge: BridgeService = Depends(get_bridge),
):
    reading = bridge.get_latest(device_type, device_id)
    if reading is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return LatestReadingResponse.from_reading(reading)
