"""Fallback executor — hands a navigation back to the browser's native behaviour."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence, runtime_checkable

from pageswap.core.errors import NavigatorUnavailableError
from pageswap.core.types import Fallback, FormFallback, LinkFallback

logger = logging.getLogger(__name__)


@runtime_checkable
class Navigator(Protocol):
    """Native navigation primitives of the browsing context."""

    async def follow_link(self, url: str) -> None: ...

    async def submit_form(
        self, method: str, action: str, fields: Sequence[tuple[str, str]]
    ) -> None: ...


class FallbackExecutor:
    def __init__(self, navigator: Navigator | None) -> None:
        self._navigator = navigator

    async def execute(self, fallback: Fallback | None) -> None:
        """Perform the native equivalent of the intercepted link click or form submit."""
        if fallback is None:
            logger.warning("No fallback descriptor recorded; leaving the current page in place")
            return
        if self._navigator is None:
            raise NavigatorUnavailableError(
                f"Cannot fall back to native navigation for {fallback!r}: no navigator attached"
            )

        if isinstance(fallback, LinkFallback):
            logger.info("Falling back to native navigation: %s", fallback.url)
            await self._navigator.follow_link(fallback.url)
        elif isinstance(fallback, FormFallback):
            logger.info("Falling back to native form submission: %s %s", fallback.method, fallback.action)
            await self._navigator.submit_form(fallback.method, fallback.action, list(fallback.fields))
        else:
            raise TypeError(f"Unsupported fallback descriptor: {fallback!r}")
