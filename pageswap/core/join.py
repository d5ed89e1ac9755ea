"""Two-signal barrier joining the exit animation with the fetch."""

from __future__ import annotations

from typing import Callable

from pageswap.core.types import FetchOutcome


class PendingTransition:
    """
    Short-lived join for one transition.

    The continuation runs exactly once, as soon as both the exit animation
    has finished and the fetch has settled, whichever arrives last.
    """

    def __init__(self, on_ready: Callable[[FetchOutcome], None]) -> None:
        self.exit_animation_done = False
        self.fetch_result: FetchOutcome | None = None
        self._on_ready = on_ready
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def exit_animation_finished(self) -> None:
        self.exit_animation_done = True
        self._maybe_release()

    def fetch_settled(self, outcome: FetchOutcome) -> None:
        if self.fetch_result is not None:
            return
        self.fetch_result = outcome
        self._maybe_release()

    def _maybe_release(self) -> None:
        if self._released or not self.exit_animation_done or self.fetch_result is None:
            return
        self._released = True
        self._on_ready(self.fetch_result)
