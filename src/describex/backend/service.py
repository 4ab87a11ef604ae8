"""Remote backend interface and its HTTP adapter.

The backend exposes three operations the client consumes:

    classify        bytes -> ClassificationResult   (replicated, strongly consistent)
    classify_query  bytes -> ClassificationResult   (read-only, faster)
    llm             str   -> str                    (raw completion response)

``HttpBackend`` maps them onto POST endpoints of ``backend_url``. It is a
thin stub over a fixed contract; the transport itself lives elsewhere.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from describex.backend.schemas import ClassificationResult
from describex.errors import BackendError

if TYPE_CHECKING:
    from describex.config import Settings

logger = logging.getLogger(__name__)

_TEXT_ADAPTER: TypeAdapter[str] = TypeAdapter(str)


class BackendService(Protocol):
    """Protocol for the remote classification backend (kept for test fakes)."""

    async def classify(self, image: bytes) -> ClassificationResult:
        """Classify with strong consistency."""
        ...

    async def classify_query(self, image: bytes) -> ClassificationResult:
        """Classify on the fast read-only path."""
        ...

    async def llm(self, prompt: str) -> str:
        """Return the raw completion response for ``prompt``."""
        ...


class HttpBackend:
    """``BackendService`` implementation speaking JSON over HTTP."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> HttpBackend:
        client = httpx.AsyncClient(
            base_url=settings.backend_url,
            timeout=settings.backend_timeout,
        )
        return cls(client)

    async def classify(self, image: bytes) -> ClassificationResult:
        return await self._classify("/classify", image)

    async def classify_query(self, image: bytes) -> ClassificationResult:
        return await self._classify("/classify_query", image)

    async def llm(self, prompt: str) -> str:
        response = await self._post("/llm", json=prompt)
        try:
            return _TEXT_ADAPTER.validate_json(response.content)
        except ValidationError as exc:
            raise BackendError(f"llm returned a non-string body: {exc}") from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _classify(self, path: str, image: bytes) -> ClassificationResult:
        response = await self._post(
            path,
            content=image,
            headers={"Content-Type": "application/octet-stream"},
        )
        try:
            return ClassificationResult.model_validate_json(response.content)
        except ValidationError as exc:
            raise BackendError(f"{path} returned a malformed result: {exc}") from exc

    async def _post(self, path: str, **kwargs: object) -> httpx.Response:
        logger.debug("POST %s", path)
        try:
            response = await self._client.post(path, **kwargs)  # type: ignore[arg-type]
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise BackendError(f"{path} failed with status {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise BackendError(f"{path} failed: {exc}") from exc
        return response
