"""Navigation orchestrator — sequences every page transition of a session."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import TYPE_CHECKING, Any, Awaitable, Callable
from urllib.parse import urljoin

from bs4 import Tag

from pageswap.animation.animator import Animator
from pageswap.animation.coordinator import AnimationCoordinator
from pageswap.core.config import ROOT_SELECTOR, TITLE_SELECTOR, PageSwapConfig
from pageswap.core.eligibility import (
    is_fragment_navigation,
    is_handleable_element,
    is_handleable_event,
    is_handleable_url,
    is_navigable_response,
    is_primary_activation,
)
from pageswap.core.errors import (
    ContainerMismatchError,
    FailureKind,
    NetworkError,
    RequestAborted,
)
from pageswap.core.join import PendingTransition
from pageswap.core.timing import TransitionTimer
from pageswap.core.types import (
    Fallback,
    FetchOutcome,
    FormFallback,
    HistoryEntry,
    LinkFallback,
    NavigationRequest,
    TransitionStatus,
)
from pageswap.dom.document import Document, hide_element
from pageswap.dom.forms import form_fields, with_query
from pageswap.dom.replacer import MissingContainer, replace_containers
from pageswap.fallback.executor import FallbackExecutor, Navigator
from pageswap.host.events import ClickEvent, PopStateEvent, SubmitEvent
from pageswap.scripts.lifecycle import ScriptEnvironment
from pageswap.scripts.reloader import ScriptReloader
from pageswap.scripts.runner import ScriptRunner
from pageswap.transport.base import Transport

if TYPE_CHECKING:
    from pageswap.host.window import Window

logger = logging.getLogger(__name__)

# Events fired once a transition has completed and the queue has been drained
_SHOWN = ("new_page_shown",)
_RESTORED = ("new_page_shown", "original_page_shown")


class NavigationOrchestrator:
    """
    Replaces full page loads on a host window with fetch + partial swap.

    One instance is one session: it owns the Idle/Busy state, the queue of
    navigation requests that arrived while busy, and the wiring between the
    transport, the animation coordinator, the document replacer, the script
    reloader and the fallback executor.

    Transition outline:
        exit animation ─┐
                        ├─ join ─ swap ─ scripts ─ entrance animation ─ Idle
        fetch ──────────┘
    """

    def __init__(
        self,
        window: Window,
        config: PageSwapConfig | None = None,
        *,
        transport: Transport,
        animator: Animator | None = None,
        script_runner: ScriptRunner | None = None,
        navigator: Navigator | None = None,
        owns_transport: bool = False,
    ) -> None:
        self.window = window
        self.config = config or PageSwapConfig()
        self.status = TransitionStatus.IDLE
        self.timings = TransitionTimer()

        self.last_error: BaseException | None = None

        self._transport = transport
        self._owns_transport = owns_transport
        self._animations = AnimationCoordinator(animator)
        self._scripts = ScriptReloader(script_runner)
        self._fallback = FallbackExecutor(navigator if navigator is not None else window.navigator)

        self._queue: deque[Callable[[], None]] = deque()
        self._idle = asyncio.Event()
        self._idle.set()
        self._transition_count = 0
        self._current_task: asyncio.Task | None = None
        self._current_fetch: asyncio.Task | None = None
        self._bound = False

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        return self.status is TransitionStatus.BUSY

    @property
    def queue_length(self) -> int:
        return len(self._queue)

    @property
    def current_task(self) -> asyncio.Task | None:
        """
        Task running the latest transition.

        A failed transition drains the queue before its exception propagates,
        so this may already point at the next transition. ``last_error`` keeps
        the most recent failure.
        """
        return self._current_task

    async def wait_until_idle(self) -> None:
        """Return once no transition is running and nothing is queued."""
        await self._idle.wait()

    def bind(self) -> None:
        if self._bound:
            return
        self.window.add_event_listener("click", self._on_click)
        self.window.add_event_listener("submit", self._on_submit)
        self.window.add_event_listener("popstate", self._on_pop_state)
        self._bound = True

    def unbind(self) -> None:
        self.window.remove_event_listener("click", self._on_click)
        self.window.remove_event_listener("submit", self._on_submit)
        self.window.remove_event_listener("popstate", self._on_pop_state)
        self._bound = False

    async def close(self) -> None:
        """Unbind and release the transport if this session created it."""
        self.unbind()
        if not self._owns_transport:
            return
        aclose = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()
        self._owns_transport = False

    def abort(self) -> bool:
        """Cancel the in-flight fetch, if any. The transition then resolves as aborted."""
        if self._current_fetch is None or self._current_fetch.done():
            return False
        self._current_fetch.cancel()
        return True

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def submit(self, request: NavigationRequest) -> None:
        """Start a transition for ``request``, or queue it while another one runs."""
        if self.is_busy:
            logger.debug("Busy; queueing %s %s", request.method, request.url)
            self._queue.append(lambda: self.submit(request))
            return
        self._begin(self._navigate, request)

    def replay(self, state: Any) -> None:
        """Restore the page stored in a history entry's state (back/forward)."""
        entry = HistoryEntry.from_state(state)
        if entry is None:
            logger.debug("Ignoring history entry without a snapshot")
            return
        if self.is_busy:
            logger.debug("Busy; queueing history replay of %s", self.window.location)
            self._queue.append(lambda: self.replay(state))
            return
        self._begin(self._restore, entry)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_click(self, event: ClickEvent) -> None:
        if event.target is None:
            return
        link = event.target.css.closest(self.config.link_selector)
        if link is None:
            return
        href = link.get("href")
        if href is None:
            return

        location = self.window.location
        if is_fragment_navigation(href, location):
            return
        if not is_primary_activation(event):
            return
        if not (
            is_handleable_element(link)
            and is_handleable_url(href, location)
            and is_handleable_event(event)
        ):
            return

        event.prevent_default()
        url = urljoin(location, href)
        self.submit(NavigationRequest(url=url, method="GET", fallback=LinkFallback(url)))

    def _on_submit(self, event: SubmitEvent) -> None:
        form = event.target
        if form is None or not form.css.match(self.config.form_selector):
            return

        location = self.window.location
        method = (form.get("method") or "GET").upper()
        raw_action = form.get("action") or location
        if not (
            is_handleable_element(form)
            and is_handleable_url(raw_action, location)
            and is_handleable_event(event)
        ):
            return

        event.prevent_default()
        action = urljoin(location, raw_action)
        if method == "GET":
            fields = form_fields(form)
            request = NavigationRequest(
                url=with_query(action, fields),
                method=method,
                fallback=FormFallback(method=method, action=action, fields=tuple(fields)),
            )
        else:
            body = self.window.form_encoder(form)
            request = NavigationRequest(
                url=action,
                method=method,
                body=body,
                fallback=FormFallback(method=method, action=action, fields=body.fields),
            )
        self.submit(request)

    def _on_pop_state(self, event: PopStateEvent) -> None:
        self.replay(event.state)

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _begin(self, transition: Callable[..., Awaitable[tuple[str, ...]]], *args: Any) -> None:
        loop = asyncio.get_running_loop()
        self.status = TransitionStatus.BUSY
        self._idle.clear()
        self._transition_count += 1
        self._current_task = loop.create_task(self._run(self._transition_count, transition, *args))

    async def _run(
        self,
        number: int,
        transition: Callable[..., Awaitable[tuple[str, ...]]],
        *args: Any,
    ) -> None:
        t0 = time.monotonic()
        try:
            shown_events = await transition(*args)
        except Exception as exc:
            # Recorded before _complete() may start the next queued transition
            self.last_error = exc
            raise
        finally:
            self.timings.record(number, "total", (time.monotonic() - t0) * 1000)
            logger.debug("Transition %d phases: %s", number, self.timings.for_transition(number))
            self._complete()
        for name in shown_events:
            self._emit(name)

    def _complete(self) -> None:
        self.status = TransitionStatus.IDLE
        self._current_fetch = None
        while self._queue and not self.is_busy:
            operation = self._queue.popleft()
            operation()
        if not self.is_busy:
            self._idle.set()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def _navigate(self, request: NavigationRequest) -> tuple[str, ...]:
        number = self._transition_count
        loop = asyncio.get_running_loop()
        t0 = time.monotonic()
        ready: asyncio.Future = loop.create_future()
        pending = PendingTransition(ready.set_result)
        logger.debug("Transition %d: %s %s", number, request.method, request.url)

        def _hidden(task: asyncio.Task) -> None:
            if not task.cancelled() and task.exception() is not None:
                logger.error("Exit animation failed", exc_info=task.exception())
            self.timings.record(number, "exit", (time.monotonic() - t0) * 1000)
            pending.exit_animation_finished()

        def _settled(task: asyncio.Task) -> None:
            self.timings.record(number, "fetch", (time.monotonic() - t0) * 1000)
            pending.fetch_settled(self._settle_fetch(request, task))

        hide = loop.create_task(
            self._animations.run(
                "hide", self.config.effects.hide, self._containers(), self._old_page_hidden
            )
        )
        hide.add_done_callback(_hidden)

        fetch = loop.create_task(
            self._transport.send(
                request,
                on_upload_progress=self.config.events.new_page_upload_progress,
                on_download_progress=self.config.events.new_page_download_progress,
                timeout=self.config.request_timeout,
            )
        )
        self._current_fetch = fetch
        fetch.add_done_callback(_settled)

        outcome: FetchOutcome = await ready
        self._current_fetch = None

        if outcome.failure is FailureKind.ABORTED:
            logger.warning("Request for %s was aborted; keeping the current page", request.url)
            await self._restore_visuals()
            return ()

        if outcome.failure is FailureKind.NETWORK_ERROR:
            logger.warning("Request for %s failed: %s", request.url, outcome.status_text)
            await self._restore_visuals()
            self._emit("request_error", outcome.response, outcome.status_text, outcome.error)
            return ()

        response = outcome.response
        if not is_navigable_response(
            response.header("content-type"), response.header("content-disposition")
        ):
            logger.warning(
                "Response for %s is not a page (%s); using native navigation",
                request.url,
                FailureKind.NON_NAVIGABLE_RESPONSE.value,
            )
            await self._restore_visuals()
            await self._fallback.execute(request.fallback)
            return ()

        return await self._swap(response.url, response.body, request.fallback, replayed=False)

    async def _restore(self, entry: HistoryEntry) -> tuple[str, ...]:
        number = self._transition_count
        with self.timings.measure(number, "exit"):
            await self._animations.run(
                "hide", self.config.effects.hide, self._containers(), self._old_page_hidden
            )
        return await self._swap(self.window.location, entry.html, entry.fallback, replayed=True)

    async def _swap(
        self,
        url: str,
        html: str,
        fallback: Fallback | None,
        *,
        replayed: bool,
    ) -> tuple[str, ...]:
        number = self._transition_count
        document = self.window.document

        if not replayed:
            self._snapshot_current_entry(document)

        new_document = self.window.parse_document(html)
        if new_document is None:
            logger.warning(
                "Response for %s could not be parsed (%s); using native navigation",
                url,
                FailureKind.PARSE_FAILURE.value,
            )
            await self._restore_visuals()
            await self._fallback.execute(fallback)
            return ()

        with self.timings.measure(number, "swap"):
            self._emit("before_containers_replaced")
            container = self._replace(document, new_document)
            self._emit("after_containers_replaced")

            elements = document.select(container)
            for element in elements:
                hide_element(element)

            if not replayed:
                entry = HistoryEntry(html=html, fallback=fallback)
                self.window.history.push_state(entry.to_state(), document.title, url)

        self.window.hold_ready(True)
        try:
            # Load registrations made while scripts run are held, not attached
            with ScriptEnvironment(self.window) as environment:
                with self.timings.measure(number, "scripts"):
                    await self._scripts.reload(self.config.scripts_to_reload, environment)
            with self.timings.measure(number, "entrance"):
                await self._animations.run("show", self.config.effects.show, elements)
        finally:
            self.window.hold_ready(False)
        environment.dispatch_load()

        logger.info("Transition %d complete: %s", number, self.window.location)
        return _RESTORED if replayed else _SHOWN

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _settle_fetch(self, request: NavigationRequest, task: asyncio.Task) -> FetchOutcome:
        if task.cancelled():
            return FetchOutcome.aborted()

        exc = task.exception()
        if exc is None:
            response = task.result()
            if not response.ok and not response.body:
                return FetchOutcome.network_error(response, response.status_text or "error", None)
            return FetchOutcome.received(response)

        if isinstance(exc, RequestAborted):
            return FetchOutcome.aborted()
        if isinstance(exc, NetworkError):
            if exc.response is not None and exc.response.body:
                return FetchOutcome.received(exc.response)
            return FetchOutcome.network_error(exc.response, exc.status_text, exc.error or exc)

        logger.error("Transport raised while fetching %s", request.url, exc_info=exc)
        return FetchOutcome.network_error(None, "error", exc)

    def _replace(self, document: Document, new_document: Document) -> str:
        """Swap the configured containers, retrying with the whole document on a mismatch."""
        selectors = self.config.container_selectors + [TITLE_SELECTOR]
        result = replace_containers(selectors, document, new_document)
        if not isinstance(result, MissingContainer):
            return self.config.container

        logger.warning(
            "Container %r missing from the %s document; replacing the whole document",
            result.selector,
            result.side,
        )
        result = replace_containers([ROOT_SELECTOR], document, new_document)
        if isinstance(result, MissingContainer):
            raise ContainerMismatchError(result.selector, result.side)
        return ROOT_SELECTOR

    def _snapshot_current_entry(self, document: Document) -> None:
        history = self.window.history
        current = HistoryEntry.from_state(history.state)
        if current is not None and current.fallback is not None:
            fallback = current.fallback
        else:
            fallback = LinkFallback(self.window.location)
        snapshot = HistoryEntry(html=document.outer_html(), fallback=fallback)
        history.replace_state(snapshot.to_state(), document.title, self.window.location)

    def _containers(self) -> list[Tag]:
        return self.window.document.select(self.config.container)

    async def _restore_visuals(self) -> None:
        await self._animations.run("show", self.config.effects.show, self._containers())

    def _old_page_hidden(self) -> None:
        self._emit("old_page_hidden")

    def _emit(self, name: str, *args: Any) -> None:
        callback = getattr(self.config.events, name)
        if callback is not None:
            callback(*args)
