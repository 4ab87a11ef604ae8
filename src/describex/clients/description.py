"""Description client: turns a label into text via the backend's completion call.

The backend returns the upstream chat-completion body followed by a
fixed-length trailer added by its transport framing. The trailer is cut
off by length, not by content, so any upstream format change breaks
parsing; the length is configurable for that reason.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from describex.errors import DescriptionError

if TYPE_CHECKING:
    from describex.backend.service import BackendService

logger = logging.getLogger(__name__)

COMPLETION_SUFFIX_LENGTH = 90


class CompletionMessage(BaseModel):
    content: str


class CompletionChoice(BaseModel):
    message: CompletionMessage


class CompletionResponse(BaseModel):
    choices: list[CompletionChoice]


def extract_message(raw: str, suffix_length: int = COMPLETION_SUFFIX_LENGTH) -> str:
    """Strip the trailer from ``raw`` and return the first choice's content.

    Raises:
        DescriptionError: If the remainder is not a completion document or
            has no choices.
    """
    payload = raw[: max(len(raw) - suffix_length, 0)]
    try:
        completion = CompletionResponse.model_validate_json(payload)
    except ValidationError as exc:
        raise DescriptionError(f"Malformed completion response: {exc.errors()[0]['msg']}") from exc
    if not completion.choices:
        raise DescriptionError("Completion response has no choices")
    return completion.choices[0].message.content


class DescriptionClient:
    """Calls the backend ``llm`` operation and extracts the message text."""

    def __init__(self, backend: BackendService, suffix_length: int = COMPLETION_SUFFIX_LENGTH) -> None:
        self._backend = backend
        self._suffix_length = suffix_length

    async def describe(self, label: str) -> str:
        """Return a human-readable description for ``label``.

        Raises:
            BackendError: If the call itself fails.
            DescriptionError: If the response cannot be parsed.
        """
        logger.info("Requesting description for %r", label)
        raw = await self._backend.llm(label)
        return extract_message(raw, self._suffix_length)
