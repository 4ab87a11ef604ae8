"""Explicit UI state and its pure transition functions.

The page is a projection of ``UIState``; nothing else holds UI state.

    IDLE_NO_IMAGE --select--> IDLE_IMAGE_SELECTED --submit--> BUSY --done--> DISPLAYING

Selecting an image is allowed in every phase except BUSY and always lands
in IDLE_IMAGE_SELECTED.

Submit is re-enabled only by a new selection, never by completion.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

MSG_COMPUTING = "Computing..."
MSG_RESULTS = "Results:"
MSG_SELECT_FAILED = "Failed to select image: %s"


class Phase(StrEnum):
    IDLE_NO_IMAGE = "idle_no_image"
    IDLE_IMAGE_SELECTED = "idle_image_selected"
    BUSY = "busy"
    DISPLAYING = "displaying"


@dataclass(frozen=True)
class UIState:
    """Snapshot of everything the page shows."""

    phase: Phase = Phase.IDLE_NO_IMAGE
    submit_enabled: bool = False
    mode_toggle_visible: bool = False
    busy: bool = False
    replicated: bool = False
    message: str = ""
    result: str | None = None
    preview_url: str | None = None


def initial_state(*, replicated: bool = False) -> UIState:
    return UIState(replicated=replicated)


def image_selected(state: UIState, preview_url: str) -> UIState:
    """A new image was loaded: enable submit, reveal the toggle, clear output."""
    return replace(
        state,
        phase=Phase.IDLE_IMAGE_SELECTED,
        submit_enabled=True,
        mode_toggle_visible=True,
        busy=False,
        message="",
        result=None,
        preview_url=preview_url,
    )


def selection_failed(state: UIState, error: object) -> UIState:
    """Show the selection error; controls keep whatever state they had."""
    return replace(state, message=MSG_SELECT_FAILED % error)


def mode_changed(state: UIState, *, replicated: bool) -> UIState:
    return replace(state, replicated=replicated)


def submit_started(state: UIState) -> UIState:
    return replace(
        state,
        phase=Phase.BUSY,
        submit_enabled=False,
        mode_toggle_visible=False,
        busy=True,
        message=MSG_COMPUTING,
        result=None,
    )


def result_rendered(state: UIState, text: str) -> UIState:
    return replace(state, phase=Phase.DISPLAYING, busy=False, message=MSG_RESULTS, result=text)


def error_rendered(state: UIState, message: str) -> UIState:
    return replace(state, phase=Phase.DISPLAYING, busy=False, message=message, result=None)
