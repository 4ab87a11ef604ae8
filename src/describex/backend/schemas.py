"""Wire types of the remote classification backend.

These mirror the backend's interface declarations. ``ClassificationResult``
is a tagged union: exactly one of ``Ok`` or ``Err`` is present.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, RootModel


class Classification(BaseModel):
    """A single (label, score) prediction, ranked by the service."""

    model_config = ConfigDict(frozen=True)

    label: str
    score: float


class ClassificationError(BaseModel):
    """Failure payload of a classification call."""

    model_config = ConfigDict(frozen=True)

    message: str


class ClassificationOk(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    Ok: list[Classification]


class ClassificationErr(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    Err: ClassificationError


class ClassificationResult(RootModel[ClassificationOk | ClassificationErr]):
    """``{"Ok": [...]}`` or ``{"Err": {"message": ...}}``."""

    @property
    def ok(self) -> list[Classification] | None:
        return self.root.Ok if isinstance(self.root, ClassificationOk) else None

    @property
    def err(self) -> ClassificationError | None:
        return self.root.Err if isinstance(self.root, ClassificationErr) else None

