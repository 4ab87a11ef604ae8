"""Pydantic request/response schemas for the describex API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from describex.ui.state import UIState


class UIStateResponse(BaseModel):
    """Snapshot of the page state."""

    phase: str = Field(description="'idle_no_image', 'idle_image_selected', 'busy' or 'displaying'")
    submit_enabled: bool
    mode_toggle_visible: bool
    busy: bool
    replicated: bool = Field(description="True for the replicated call, False for the fast query call")
    message: str
    result: str | None = None
    preview_url: str | None = Field(default=None, description="Data URL of the selected image")

    @classmethod
    def from_state(cls, state: UIState) -> UIStateResponse:
        return cls(
            phase=state.phase.value,
            submit_enabled=state.submit_enabled,
            mode_toggle_visible=state.mode_toggle_visible,
            busy=state.busy,
            replicated=state.replicated,
            message=state.message,
            result=state.result,
            preview_url=state.preview_url,
        )


class ModeRequest(BaseModel):
    """Consistency mode selection."""

    replicated: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    backend_url: str
    phase: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
