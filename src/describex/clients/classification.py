"""Classification client: sends transport bytes in the chosen consistency mode."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from describex.errors import ClassificationFailedError

if TYPE_CHECKING:
    from describex.backend.schemas import ClassificationResult
    from describex.backend.service import BackendService
    from describex.imaging.encoder import EncodedImage

logger = logging.getLogger(__name__)


class ClassificationClient:
    """Calls ``classify`` (replicated) or ``classify_query`` (fast) on the backend."""

    def __init__(self, backend: BackendService) -> None:
        self._backend = backend

    async def classify(self, image: EncodedImage, *, replicated: bool) -> ClassificationResult:
        """Classify ``image`` and return the raw Ok/Err result.

        Raises:
            BackendError: If the call itself fails.
        """
        logger.info("Classifying %d bytes (mode=%s)", len(image.data), "replicated" if replicated else "query")
        if replicated:
            return await self._backend.classify(image.data)
        return await self._backend.classify_query(image.data)


def top_label(result: ClassificationResult) -> str | None:
    """Return the first label of an Ok result, or None when the list is empty.

    Raises:
        ClassificationFailedError: If ``result`` is an Err.
    """
    error = result.err
    if error is not None:
        raise ClassificationFailedError(error)
    classifications = result.ok or []
    return classifications[0].label if classifications else None
