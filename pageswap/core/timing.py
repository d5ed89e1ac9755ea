"""Transition timer — wall-clock breakdown of each transition by phase."""

from __future__ import annotations

import time
from collections import OrderedDict
from contextlib import contextmanager
from typing import Generator

# In the order they complete; "exit" and "fetch" are measured from the
# transition start since they run concurrently.
PHASES = ("exit", "fetch", "swap", "scripts", "entrance", "total")


class TransitionTimer:
    """
    Keeps the phase breakdown of the most recent transitions.

    Usage:
        with timer.measure(3, "swap"):
            ...
        timer.for_transition(3)   # {"swap": 1.8, ...}
    """

    def __init__(self, keep: int = 100) -> None:
        if keep < 1:
            raise ValueError("keep must be at least 1")
        self._keep = keep
        self._breakdowns: OrderedDict[int, dict[str, float]] = OrderedDict()

    @contextmanager
    def measure(self, transition: int, phase: str) -> Generator[None, None, None]:
        _check_phase(phase)
        t0 = time.monotonic()
        try:
            yield
        finally:
            self.record(transition, phase, (time.monotonic() - t0) * 1000)

    def record(self, transition: int, phase: str, ms: float) -> None:
        _check_phase(phase)
        breakdown = self._breakdowns.setdefault(transition, {})
        breakdown[phase] = ms
        self._breakdowns.move_to_end(transition)
        while len(self._breakdowns) > self._keep:
            self._breakdowns.popitem(last=False)

    @property
    def transitions(self) -> list[int]:
        """Transition numbers with recorded phases, oldest first."""
        return list(self._breakdowns)

    def for_transition(self, transition: int) -> dict[str, float]:
        """Milliseconds per phase, in phase order. Phases never reached are absent."""
        breakdown = self._breakdowns.get(transition, {})
        return {phase: breakdown[phase] for phase in PHASES if phase in breakdown}

    def reset(self) -> None:
        self._breakdowns.clear()


def _check_phase(phase: str) -> None:
    if phase not in PHASES:
        raise ValueError(f"Unknown transition phase {phase!r}; expected one of {PHASES}")
