"""Activation API — load(), unload() and supported()."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Mapping

from pageswap.animation.animator import Animator
from pageswap.core.config import PageSwapConfig
from pageswap.core.orchestrator import NavigationOrchestrator
from pageswap.fallback.executor import Navigator
from pageswap.scripts.runner import ScriptRunner
from pageswap.transport.base import Transport
from pageswap.transport.http import HttpxTransport

if TYPE_CHECKING:
    from pageswap.host.window import Window

logger = logging.getLogger(__name__)


def supported(window: Window) -> bool:
    """
    True when the window offers everything PageSwap needs: structured form
    submission, history push/replace-state and a document parser.
    """
    if not callable(getattr(window, "form_encoder", None)):
        return False

    history = getattr(window, "history", None)
    if history is None:
        return False
    if not callable(getattr(history, "push_state", None)):
        return False
    if not callable(getattr(history, "replace_state", None)):
        return False

    return callable(getattr(window, "parse_document", None))


def load(
    window: Window,
    options: PageSwapConfig | Mapping[str, Any] | None = None,
    *,
    transport: Transport | None = None,
    animator: Animator | None = None,
    script_runner: ScriptRunner | None = None,
    navigator: Navigator | None = None,
) -> NavigationOrchestrator | None:
    """
    Start intercepting navigation on ``window``.

    Returns the active session, or None when PageSwap is already active on
    the window or the window lacks a required capability.
    """
    if not supported(window):
        logger.info("Window lacks a required capability; PageSwap stays inactive")
        return None
    if window.page_swap is not None:
        return None

    if isinstance(options, PageSwapConfig):
        config = options
    else:
        config = PageSwapConfig.from_options(options)

    session = NavigationOrchestrator(
        window,
        config,
        transport=transport if transport is not None else HttpxTransport(),
        animator=animator,
        script_runner=script_runner,
        navigator=navigator,
        owns_transport=transport is None,
    )
    session.bind()
    window.page_swap = session
    logger.debug("PageSwap loaded on %s (container=%r)", window.location, config.container)
    return session


def unload(window: Window) -> asyncio.Task | None:
    """
    Stop intercepting navigation and clear the window's session slot.

    A transport that ``load()`` created itself is closed too. Inside a running
    event loop the close is scheduled and its task returned; otherwise it runs
    to completion before returning.
    """
    session = window.page_swap
    if session is None:
        return None
    session.unbind()
    window.page_swap = None

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(session.close())
        return None
    return loop.create_task(session.close())
