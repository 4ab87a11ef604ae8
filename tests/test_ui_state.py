"""Tests for the pure UI state transitions."""

from __future__ import annotations

from describex.ui.state import (
    MSG_COMPUTING,
    MSG_RESULTS,
    Phase,
    UIState,
    error_rendered,
    image_selected,
    initial_state,
    mode_changed,
    result_rendered,
    selection_failed,
    submit_started,
)

_URL = "data:image/png;base64,AAAA"


class TestTransitions:
    def test_initial_state(self) -> None:
        state = initial_state()
        assert state.phase is Phase.IDLE_NO_IMAGE
        assert not state.submit_enabled
        assert not state.mode_toggle_visible
        assert not state.busy
        assert state.message == ""

    def test_initial_mode_is_configurable(self) -> None:
        assert initial_state(replicated=True).replicated is True

    def test_select_enables_submit_and_toggle(self) -> None:
        state = image_selected(initial_state(), _URL)
        assert state.phase is Phase.IDLE_IMAGE_SELECTED
        assert state.submit_enabled
        assert state.mode_toggle_visible
        assert state.preview_url == _URL

    def test_submit_enters_busy(self) -> None:
        state = submit_started(image_selected(initial_state(), _URL))
        assert state.phase is Phase.BUSY
        assert not state.submit_enabled
        assert not state.mode_toggle_visible
        assert state.busy
        assert state.message == MSG_COMPUTING

    def test_result_keeps_submit_disabled(self) -> None:
        busy = submit_started(image_selected(initial_state(), _URL))
        state = result_rendered(busy, "A small cat.")
        assert state.phase is Phase.DISPLAYING
        assert not state.busy
        assert not state.submit_enabled
        assert state.message == MSG_RESULTS
        assert state.result == "A small cat."

    def test_error_keeps_submit_disabled(self) -> None:
        busy = submit_started(image_selected(initial_state(), _URL))
        state = error_rendered(busy, "Failed to classify image: {}")
        assert not state.busy
        assert not state.submit_enabled
        assert state.result is None
        assert state.message == "Failed to classify image: {}"

    def test_reselect_after_display_re_enables(self) -> None:
        done = error_rendered(submit_started(image_selected(initial_state(), _URL)), "boom")
        state = image_selected(done, _URL)
        assert state.submit_enabled
        assert state.message == ""

    def test_selection_failure_leaves_controls(self) -> None:
        state = selection_failed(initial_state(), "Cannot read image")
        assert state.message == "Failed to select image: Cannot read image"
        assert not state.submit_enabled
        assert state.phase is Phase.IDLE_NO_IMAGE

    def test_mode_change(self) -> None:
        assert mode_changed(UIState(), replicated=True).replicated


class TestIdempotence:
    def test_selecting_same_image_twice_is_stable(self) -> None:
        once = image_selected(initial_state(), _URL)
        twice = image_selected(once, _URL)
        assert once == twice

    def test_reselect_clears_stale_output(self) -> None:
        busy = submit_started(image_selected(initial_state(), _URL))
        assert image_selected(busy, _URL) == image_selected(initial_state(), _URL)
