"""Session history — the back/forward entry stack of a host window."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin

from pageswap.host.events import PopStateEvent

if TYPE_CHECKING:
    from pageswap.host.window import Window


@dataclass
class SessionEntry:
    url: str
    title: str = ""
    state: Any = None


class SessionHistory:
    """
    In-memory history stack with push/replace-state semantics.

    Traversal (back/forward/go) moves the current index, updates the
    window location immediately and then dispatches a ``popstate`` event
    carrying a copy of the destination entry's state.
    """

    def __init__(self, window: Window) -> None:
        self._window = window
        self._entries: list[SessionEntry] = [SessionEntry(url=window.location)]
        self._index = 0

    @property
    def length(self) -> int:
        return len(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def state(self) -> Any:
        return copy.deepcopy(self._entries[self._index].state)

    @property
    def entries(self) -> list[SessionEntry]:
        return list(self._entries)

    def push_state(self, state: Any, title: str, url: str | None = None) -> None:
        target = self._resolve(url)
        del self._entries[self._index + 1:]
        self._entries.append(SessionEntry(url=target, title=title, state=copy.deepcopy(state)))
        self._index += 1
        self._window.location = target

    def replace_state(self, state: Any, title: str, url: str | None = None) -> None:
        target = self._resolve(url)
        self._entries[self._index] = SessionEntry(url=target, title=title, state=copy.deepcopy(state))
        self._window.location = target

    def back(self) -> None:
        self.go(-1)

    def forward(self) -> None:
        self.go(1)

    def go(self, delta: int) -> None:
        target = self._index + delta
        if delta == 0 or not 0 <= target < len(self._entries):
            return
        self._index = target
        entry = self._entries[target]
        self._window.location = entry.url
        self._window.dispatch_event(PopStateEvent(state=copy.deepcopy(entry.state)))

    def _resolve(self, url: str | None) -> str:
        if url is None:
            return self._window.location
        return urljoin(self._window.location, url)
