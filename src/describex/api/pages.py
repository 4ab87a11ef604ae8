"""Browser page routes. Form actions redirect back to the page."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Form, Request, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse

from describex.errors import BusyError, SubmitUnavailableError
from describex.ui.view import render_page

if TYPE_CHECKING:
    from describex.config import Settings
    from describex.ui.controller import UIController

logger = logging.getLogger(__name__)

router = APIRouter(include_in_schema=False)


def _get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def _get_controller(request: Request) -> UIController:
    controller: UIController = request.app.state.controller
    return controller


def _back_to_page() -> RedirectResponse:
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    return HTMLResponse(render_page(_get_controller(request).state, _get_settings(request)))


@router.post("/select")
async def select(request: Request, file: UploadFile) -> RedirectResponse:
    data = await file.read()
    try:
        await _get_controller(request).select_image(data, file.content_type)
    except BusyError:
        logger.info("Ignoring image selection while busy")
    return _back_to_page()


@router.post("/mode")
async def mode(request: Request, replicated: Annotated[bool, Form()] = False) -> RedirectResponse:
    try:
        _get_controller(request).set_replicated(replicated)
    except BusyError:
        logger.info("Ignoring mode change while busy")
    return _back_to_page()


@router.post("/classify")
async def classify(request: Request) -> RedirectResponse:
    try:
        _get_controller(request).start_submit()
    except SubmitUnavailableError:
        logger.info("Ignoring submit while the control is disabled")
    return _back_to_page()
