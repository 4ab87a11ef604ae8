"""Thread pool for blocking Pillow work.

Decoding and encoding run off the event loop so page and state requests
are still answered while a submit is encoding.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from describex.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WorkerPool:
    def __init__(self, settings: Settings) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=settings.max_concurrent,
            thread_name_prefix="image-worker",
        )

    async def run(self, func: Callable[..., T], *args: object) -> T:
        """Run ``func(*args)`` on a worker thread and await its result."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    def shutdown(self) -> None:
        logger.debug("Shutting down image workers")
        self._executor.shutdown(wait=True)
