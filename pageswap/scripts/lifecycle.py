"""Load-listener capture for scripts executed during a transition."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from pageswap.host.events import LoadEvent

if TYPE_CHECKING:
    from pageswap.host.window import Window

logger = logging.getLogger(__name__)


class ScriptEnvironment:
    """
    The names a reloaded script sees as globals.

    From construction until ``stop_capturing()`` every "load" registration on
    the window, whether made through ``add_event_listener`` here or through
    ``window.add_event_listener``, is recorded instead of attached: the
    page's own load event fired long ago and will not fire again for
    swapped-in content. Other event types always reach the window.

    Usable as a context manager; leaving the block stops capturing.
    """

    def __init__(self, window: Window) -> None:
        self._window = window
        self._load_listeners: list[Callable[[Any], Any]] = []
        self._capturing = True
        window.capture_load_listeners(self._load_listeners.append)

    def __enter__(self) -> ScriptEnvironment:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop_capturing()

    @property
    def capturing(self) -> bool:
        return self._capturing

    @property
    def load_listeners(self) -> list[Callable[[Any], Any]]:
        return list(self._load_listeners)

    def add_event_listener(self, event_type: str, listener: Callable[[Any], Any]) -> None:
        self._window.add_event_listener(event_type, listener)

    def stop_capturing(self) -> None:
        if not self._capturing:
            return
        self._capturing = False
        self._window.capture_load_listeners(None)

    def namespace(self) -> dict[str, Any]:
        return {
            "window": self._window,
            "document": self._window.document,
            "location": self._window.location,
            "add_event_listener": self.add_event_listener,
            "on_ready": self._window.on_ready,
        }

    def dispatch_load(self) -> None:
        """Invoke captured load listeners, then ``window.onload``."""
        event = LoadEvent()
        if self._load_listeners:
            logger.debug("Dispatching %d captured load listener(s)", len(self._load_listeners))
        for listener in self._load_listeners:
            listener(event)
        if callable(self._window.onload):
            self._window.onload(event)
