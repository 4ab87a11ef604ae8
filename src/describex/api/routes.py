"""JSON API route definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, UploadFile, status

from describex.api.schemas import ErrorResponse, HealthResponse, ModeRequest, UIStateResponse
from describex.errors import BusyError, SubmitUnavailableError

if TYPE_CHECKING:
    from describex.config import Settings
    from describex.ui.controller import UIController

router = APIRouter(prefix="/api/v1")

_CONFLICT = {status.HTTP_409_CONFLICT: {"model": ErrorResponse}}


def _get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def _get_controller(request: Request) -> UIController:
    controller: UIController = request.app.state.controller
    return controller


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(request: Request) -> HealthResponse:
    """Return service health status."""
    settings = _get_settings(request)
    controller = _get_controller(request)
    return HealthResponse(
        status="ok",
        backend_url=settings.backend_url,
        phase=controller.state.phase.value,
    )


@router.get(
    "/state",
    response_model=UIStateResponse,
    summary="Current UI state",
)
async def get_state(request: Request) -> UIStateResponse:
    """Return the current UI state snapshot."""
    return UIStateResponse.from_state(_get_controller(request).state)


@router.post(
    "/image",
    response_model=UIStateResponse,
    responses=_CONFLICT,
    summary="Select an image",
)
async def select_image(request: Request, file: UploadFile) -> UIStateResponse:
    """Load an uploaded image. Unreadable files are reported in the state message."""
    controller = _get_controller(request)
    data = await file.read()
    try:
        state = await controller.select_image(data, file.content_type)
    except BusyError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return UIStateResponse.from_state(state)


@router.put(
    "/mode",
    response_model=UIStateResponse,
    responses=_CONFLICT,
    summary="Choose the consistency mode",
)
async def set_mode(request: Request, body: ModeRequest) -> UIStateResponse:
    """Switch between the replicated and the fast query classification call."""
    controller = _get_controller(request)
    try:
        state = controller.set_replicated(body.replicated)
    except BusyError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return UIStateResponse.from_state(state)


@router.post(
    "/classify",
    response_model=UIStateResponse,
    responses=_CONFLICT,
    summary="Classify and describe the selected image",
)
async def classify(request: Request) -> UIStateResponse:
    """Run the submit action and return the rendered outcome.

    Failures of the remote calls are part of the returned state, not HTTP errors.
    """
    controller = _get_controller(request)
    try:
        state = await controller.submit()
    except SubmitUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return UIStateResponse.from_state(state)
