"""Host window — the browsing context PageSwap runs inside."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any, Callable

from bs4 import Tag

from pageswap.dom.document import Document, parse_document
from pageswap.dom.forms import encode_form
from pageswap.host.events import ClickEvent, Event, SubmitEvent
from pageswap.host.history import SessionHistory

if TYPE_CHECKING:
    from pageswap.core.orchestrator import NavigationOrchestrator
    from pageswap.fallback.executor import Navigator

logger = logging.getLogger(__name__)

Listener = Callable[[Event], Any]


class Window:
    """
    A single browsing context: location, document, history and event listeners.

    Usage:
        window = Window("https://example.com/", html)
        session = pageswap.load(window, {"container": "#content"}, transport=...)
        window.click(window.document.select_first("a[href='/second']"))
    """

    def __init__(
        self,
        url: str,
        html: str | Document,
        *,
        navigator: Navigator | None = None,
    ) -> None:
        self.location = url
        if isinstance(html, Document):
            self.document = html
        else:
            document = parse_document(html)
            if document is None:
                raise ValueError("Initial page markup did not produce a document")
            self.document = document

        self.navigator = navigator
        self.history = SessionHistory(self)
        self.parse_document: Callable[[str], Document | None] = parse_document
        self.form_encoder = encode_form
        self.onload: Callable[[Event], Any] | None = None

        # Well-known slot holding the active PageSwap session
        self.page_swap: NavigationOrchestrator | None = None

        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._load_capture: Callable[[Listener], Any] | None = None
        self._ready_held = False
        self._ready_queue: list[Callable[[], Any]] = []

    # ------------------------------------------------------------------
    # Event listeners
    # ------------------------------------------------------------------

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        if self._load_capture is not None and event_type.lower() == "load":
            self._load_capture(listener)
            return
        listeners = self._listeners[event_type.lower()]
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type.lower(), [])
        if listener in listeners:
            listeners.remove(listener)

    def capture_load_listeners(self, sink: Callable[[Listener], Any] | None) -> None:
        """Route "load" registrations to ``sink`` instead of the registry; None restores."""
        self._load_capture = sink

    def listeners(self, event_type: str) -> list[Listener]:
        return list(self._listeners.get(event_type.lower(), []))

    def dispatch_event(self, event: Event) -> bool:
        """Run every listener for the event. Returns False if the default was prevented."""
        for listener in self.listeners(event.type):
            listener(event)
        return not event.default_prevented

    def click(
        self,
        element: Tag,
        *,
        button: int = 0,
        ctrl_key: bool = False,
        alt_key: bool = False,
        shift_key: bool = False,
        meta_key: bool = False,
    ) -> ClickEvent:
        event = ClickEvent(
            target=element,
            button=button,
            ctrl_key=ctrl_key,
            alt_key=alt_key,
            shift_key=shift_key,
            meta_key=meta_key,
        )
        self.dispatch_event(event)
        return event

    def submit(self, form: Tag) -> SubmitEvent:
        event = SubmitEvent(target=form)
        self.dispatch_event(event)
        return event

    # ------------------------------------------------------------------
    # Document-ready lifecycle
    # ------------------------------------------------------------------

    @property
    def ready_held(self) -> bool:
        return self._ready_held

    def on_ready(self, callback: Callable[[], Any]) -> None:
        """Run ``callback`` once the document is ready (immediately unless held)."""
        if self._ready_held:
            self._ready_queue.append(callback)
            return
        callback()

    def hold_ready(self, hold: bool) -> None:
        if hold:
            self._ready_held = True
            return
        self._ready_held = False
        queued, self._ready_queue = self._ready_queue, []
        if queued:
            logger.debug("Releasing %d deferred ready callback(s)", len(queued))
        for callback in queued:
            callback()
