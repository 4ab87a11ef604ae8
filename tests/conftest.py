"""Shared fixtures: in-memory backend fake, image factories, settings."""

from __future__ import annotations

import asyncio
import io
import json
from typing import TYPE_CHECKING

import pytest
from PIL import Image

from describex.backend.schemas import ClassificationResult
from describex.config import Settings
from describex.imaging.workers import WorkerPool

if TYPE_CHECKING:
    from collections.abc import Iterator


def completion_response(content: str, suffix: str = "#" * 90) -> str:
    """Build a raw completion body followed by a transport trailer."""
    body = {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
    }
    return json.dumps(body) + suffix


def image_bytes(width: int, height: int, fmt: str = "PNG", color: tuple[int, int, int] = (200, 120, 40)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


def ok_result(*labels: str) -> ClassificationResult:
    return ClassificationResult.model_validate({"Ok": [{"label": label, "score": 0.98} for label in labels]})


def err_result(message: str) -> ClassificationResult:
    return ClassificationResult.model_validate({"Err": {"message": message}})


class FakeBackend:
    """Records calls and answers with canned results."""

    def __init__(
        self,
        result: ClassificationResult | None = None,
        completion: str | None = None,
        *,
        classify_error: Exception | None = None,
        llm_error: Exception | None = None,
    ) -> None:
        self.result = result if result is not None else ok_result("cat")
        self.completion = completion if completion is not None else completion_response("A small cat.")
        self.classify_error = classify_error
        self.llm_error = llm_error
        self.calls: list[tuple[str, object]] = []
        self.classify_started = asyncio.Event()
        self.release: asyncio.Event | None = None

    async def classify(self, image: bytes) -> ClassificationResult:
        self.calls.append(("classify", image))
        return await self._classify()

    async def classify_query(self, image: bytes) -> ClassificationResult:
        self.calls.append(("classify_query", image))
        return await self._classify()

    async def llm(self, prompt: str) -> str:
        self.calls.append(("llm", prompt))
        if self.llm_error is not None:
            raise self.llm_error
        return self.completion

    @property
    def methods(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def _classify(self) -> ClassificationResult:
        self.classify_started.set()
        if self.release is not None:
            await self.release.wait()
        if self.classify_error is not None:
            raise self.classify_error
        return self.result


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def worker_pool(settings: Settings) -> Iterator[WorkerPool]:
    pool = WorkerPool(settings)
    yield pool
    pool.shutdown()


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()
