"""UI controller: runs select/submit actions and keeps ``UIState`` current.

A submit is one linear chain: encode -> classify -> describe -> render.
Encoding and classification share one error scope ("Failed to classify
image"), description has its own ("Failed to call <service>"). Every failure
ends the action and is rendered as text; nothing is retried.

The state enters BUSY synchronously; the chain itself runs as a background
task so the page can show the busy state while it is in flight.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING

from describex.clients.classification import ClassificationClient, top_label
from describex.clients.description import DescriptionClient
from describex.errors import (
    BackendError,
    BusyError,
    ClassificationFailedError,
    DescriptionError,
    ImageEncodingError,
    ImageSelectionError,
    SubmitUnavailableError,
)
from describex.imaging.encoder import encode, load_image, to_data_url
from describex.ui.state import (
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

if TYPE_CHECKING:
    from PIL import Image

    from describex.backend.service import BackendService
    from describex.config import Settings
    from describex.imaging.workers import WorkerPool

logger = logging.getLogger(__name__)

MSG_CLASSIFY_FAILED = "Failed to classify image: %s"
MSG_DESCRIBE_FAILED = "Failed to call %s: %s"


def error_details(exc: BaseException) -> str:
    """Render ``exc`` as compact JSON for display."""
    if isinstance(exc, ClassificationFailedError):
        payload = exc.error.model_dump()
    else:
        payload = {"message": str(exc) or type(exc).__name__}
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


class UIController:
    """Owns the single session's UI state and the currently loaded image."""

    def __init__(
        self,
        settings: Settings,
        pool: WorkerPool,
        classifier: ClassificationClient,
        describer: DescriptionClient,
    ) -> None:
        self._settings = settings
        self._pool = pool
        self._classifier = classifier
        self._describer = describer
        self._image: Image.Image | None = None
        self._task: asyncio.Task[UIState] | None = None
        self.state: UIState = initial_state(replicated=settings.default_replicated)

    async def select_image(self, data: bytes, content_type: str | None) -> UIState:
        """Load a newly selected file and prepare its preview.

        Raises:
            BusyError: If a submit is in progress.
        """
        self._ensure_idle()
        try:
            image = await self._pool.run(load_image, data, self._settings)
        except ImageSelectionError as exc:
            logger.warning("Image selection failed: %s", exc)
            self.state = selection_failed(self.state, str(exc) or type(exc).__name__)
            return self.state

        self._ensure_idle()
        self._image = image
        self.state = image_selected(self.state, to_data_url(data, content_type))
        logger.info("Selected %dx%d image", image.width, image.height)
        return self.state

    def set_replicated(self, replicated: bool) -> UIState:
        """Switch between the replicated and the fast query call.

        Raises:
            BusyError: If a submit is in progress.
        """
        self._ensure_idle()
        self.state = mode_changed(self.state, replicated=replicated)
        return self.state

    def start_submit(self) -> asyncio.Task[UIState]:
        """Enter BUSY immediately and run the submit chain in the background.

        Raises:
            SubmitUnavailableError: If submit is disabled.
        """
        image = self._image
        if not self.state.submit_enabled or image is None:
            raise SubmitUnavailableError("Submit is disabled until a new image is selected")

        replicated = self.state.replicated
        self.state = submit_started(self.state)
        task = asyncio.create_task(self._run_submit(image, replicated))
        task.add_done_callback(self._submit_done)
        self._task = task
        return task

    async def submit(self) -> UIState:
        """Classify the loaded image, describe the top label and return the outcome."""
        return await self.start_submit()

    async def wait_idle(self) -> UIState:
        """Wait for a running submit, if any, and return the settled state."""
        if self._task is not None:
            await asyncio.wait({self._task})
        return self.state

    async def _run_submit(self, image: Image.Image, replicated: bool) -> UIState:
        try:
            encoded = await self._pool.run(encode, image, self._settings)
            result = await self._classifier.classify(encoded, replicated=replicated)
            label = top_label(result)
        except (ImageEncodingError, BackendError, ClassificationFailedError) as exc:
            logger.warning("Classification failed: %s", exc)
            self.state = error_rendered(self.state, MSG_CLASSIFY_FAILED % error_details(exc))
            return self.state
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error while classifying")
            self.state = error_rendered(self.state, MSG_CLASSIFY_FAILED % error_details(exc))
            return self.state

        self.state = await self._describe(label)
        return self.state

    async def _describe(self, label: str | None) -> UIState:
        try:
            if label is None:
                raise DescriptionError("Classification returned no labels")
            text = await self._describer.describe(label)
        except (BackendError, DescriptionError) as exc:
            logger.warning("Description failed: %s", exc)
            return self._describe_failed(exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error while describing %r", label)
            return self._describe_failed(exc)

        logger.info("Described %r", label)
        return result_rendered(self.state, text)

    def _submit_done(self, task: asyncio.Task[UIState]) -> None:
        if task.cancelled():
            logger.warning("Submit cancelled before it finished")
            details = error_details(asyncio.CancelledError())
        elif (exc := task.exception()) is not None:
            logger.error("Submit failed", exc_info=exc)
            details = error_details(exc)
        else:
            return
        if self.state.phase is Phase.BUSY:
            self.state = error_rendered(self.state, MSG_CLASSIFY_FAILED % details)

    def _describe_failed(self, exc: Exception) -> UIState:
        message = MSG_DESCRIBE_FAILED % (self._settings.text_service_name, error_details(exc))
        return error_rendered(self.state, message)

    def _ensure_idle(self) -> None:
        if self.state.phase is Phase.BUSY:
            raise BusyError("A submit is in progress")


def build_controller(settings: Settings, pool: WorkerPool, backend: BackendService) -> UIController:
    """Wire both clients around ``backend`` and return a fresh controller."""
    return UIController(
        settings,
        pool,
        ClassificationClient(backend),
        DescriptionClient(backend, suffix_length=settings.completion_suffix_length),
    )
