"""Exception hierarchy shared by the encoder, the clients and the UI controller."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from describex.backend.schemas import ClassificationError


class DescribexError(Exception):
    """Base class for all describex failures."""


class ImageSelectionError(DescribexError):
    """The selected file could not be read as an image."""


class ImageEncodingError(DescribexError):
    """The loaded image could not be resized or encoded."""


class BackendError(DescribexError):
    """A remote call failed at the transport level or returned an unusable body."""


class ClassificationFailedError(DescribexError):
    """The classification service answered with an Err result."""

    def __init__(self, error: ClassificationError) -> None:
        super().__init__(error.message)
        self.error = error


class DescriptionError(DescribexError):
    """The completion response could not be turned into a message."""


class SubmitUnavailableError(DescribexError):
    """Submit was requested while the control is disabled."""


class BusyError(DescribexError):
    """The UI cannot change while a submit is in progress."""
