"""Animation engine — per-element hide/show effects."""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from bs4 import Tag

from pageswap.core.config import Effect
from pageswap.dom.document import get_styles, hide_element, set_styles, show_element

# effect name → CSS property the transition hint animates
_EFFECT_PROPERTIES = {
    "fade": "opacity",
    "slide": "height",
    "none": None,
}


@runtime_checkable
class Animator(Protocol):
    async def animate(self, element: Tag, kind: str, effect: Effect) -> None:
        """Run ``effect`` on one element. ``kind`` is "hide" or "show"."""
        ...


class StyleAnimator:
    """
    Animates through inline styles.

    A ``transition`` hint is written while the effect runs; once the duration
    elapses the element ends up with ``display: none`` (hide) or without it
    (show).
    """

    async def animate(self, element: Tag, kind: str, effect: Effect) -> None:
        if effect.name not in _EFFECT_PROPERTIES:
            raise ValueError(f"Unknown effect {effect.name!r}")
        if kind not in ("hide", "show"):
            raise ValueError(f"Unknown animation kind {kind!r}")

        prop = _EFFECT_PROPERTIES[effect.name]
        if kind == "show":
            show_element(element)

        if prop is not None and effect.duration > 0:
            styles = get_styles(element)
            styles["transition"] = f"{prop} {effect.duration:g}ms"
            set_styles(element, styles)
            await asyncio.sleep(effect.duration / 1000)
            styles = get_styles(element)
            styles.pop("transition", None)
            set_styles(element, styles)
        else:
            # Still yield once so completions are always signalled from the loop
            await asyncio.sleep(0)

        if kind == "hide":
            hide_element(element)
