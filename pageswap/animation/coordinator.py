"""Animation coordinator — runs one effect over many elements and joins them."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Sequence

from bs4 import Tag

from pageswap.animation.animator import Animator, StyleAnimator
from pageswap.core.config import Effect

logger = logging.getLogger(__name__)


class AnimationCoordinator:
    """Runs an effect on every element concurrently; completes once all have finished."""

    def __init__(self, animator: Animator | None = None) -> None:
        self._animator = animator or StyleAnimator()
        self._running: set[asyncio.Task] = set()

    async def run(
        self,
        kind: str,
        effect: Effect,
        elements: Sequence[Tag],
        on_complete: Callable[[], Any] | None = None,
    ) -> None:
        """
        Animate ``elements`` and call ``on_complete`` after the last one finishes.

        With no elements the completion fires immediately, without yielding
        to the event loop.
        """
        remaining = len(elements)
        if remaining == 0:
            if on_complete is not None:
                on_complete()
            return

        loop = asyncio.get_running_loop()
        all_done = loop.create_future()

        def _one_finished(task: asyncio.Task) -> None:
            nonlocal remaining
            self._running.discard(task)
            if not task.cancelled() and task.exception() is not None:
                logger.error(
                    "%s animation failed on <%s>", kind, task.get_name(), exc_info=task.exception()
                )
            remaining -= 1
            if remaining == 0 and not all_done.done():
                all_done.set_result(None)

        for element in elements:
            task = loop.create_task(
                self._animator.animate(element, kind, effect), name=element.name
            )
            self._running.add(task)
            task.add_done_callback(_one_finished)

        await all_done
        if on_complete is not None:
            on_complete()
