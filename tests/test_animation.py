"""Unit tests for StyleAnimator and AnimationCoordinator."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import MagicMock

import pytest

from pageswap.animation.animator import StyleAnimator
from pageswap.animation.coordinator import AnimationCoordinator
from pageswap.core.config import Effect
from pageswap.dom.document import is_hidden, parse_document


def make_elements(count: int):
    body = "".join(f"<div class=\"c\" id=\"c{i}\">{i}</div>" for i in range(count))
    doc = parse_document(f"<html><body>{body}</body></html>")
    return doc.select(".c")


class DelayedAnimator:
    """Finishes each element after a per-element delay and records completion order."""

    def __init__(self, delays: dict[str, float], fail: set[str] | None = None) -> None:
        self.delays = delays
        self.fail = fail or set()
        self.finished: list[str] = []

    async def animate(self, element, kind, effect):
        await asyncio.sleep(self.delays.get(element["id"], 0))
        if element["id"] in self.fail:
            raise RuntimeError(f"boom on {element['id']}")
        self.finished.append(element["id"])


# ---------------------------------------------------------------------------
# StyleAnimator
# ---------------------------------------------------------------------------


class TestStyleAnimator:
    def setup_method(self):
        self.animator = StyleAnimator()

    async def test_hide_ends_hidden(self):
        (element,) = make_elements(1)
        await self.animator.animate(element, "hide", Effect("fade", 0))
        assert is_hidden(element)

    async def test_show_ends_visible(self):
        (element,) = make_elements(1)
        element["style"] = "display: none;"
        await self.animator.animate(element, "show", Effect("slide", 0))
        assert not is_hidden(element)

    async def test_transition_hint_removed_after_duration(self):
        (element,) = make_elements(1)
        task = asyncio.ensure_future(self.animator.animate(element, "hide", Effect("fade", 20)))
        await asyncio.sleep(0)
        assert "opacity 20ms" in element["style"]

        await task
        assert element["style"] == "display: none;"

    async def test_none_effect_skips_hint(self):
        (element,) = make_elements(1)
        await self.animator.animate(element, "hide", Effect("none", 500))
        assert element["style"] == "display: none;"

    async def test_unknown_effect_rejected(self):
        (element,) = make_elements(1)
        with pytest.raises(ValueError, match="Unknown effect"):
            await self.animator.animate(element, "hide", Effect("spin", 0))

    async def test_unknown_kind_rejected(self):
        (element,) = make_elements(1)
        with pytest.raises(ValueError, match="Unknown animation kind"):
            await self.animator.animate(element, "wiggle", Effect("fade", 0))


# ---------------------------------------------------------------------------
# AnimationCoordinator
# ---------------------------------------------------------------------------


class TestAnimationCoordinator:
    async def test_zero_elements_completes_without_yielding(self):
        coordinator = AnimationCoordinator(MagicMock())
        on_complete = MagicMock()

        coro = coordinator.run("hide", Effect(), [], on_complete)
        # a coroutine that never suspends finishes on its first send
        with pytest.raises(StopIteration):
            coro.send(None)

        on_complete.assert_called_once_with()

    async def test_completes_after_slowest_element(self):
        elements = make_elements(3)
        animator = DelayedAnimator({"c0": 0.03, "c1": 0.0, "c2": 0.01})
        coordinator = AnimationCoordinator(animator)
        on_complete = MagicMock(side_effect=lambda: animator.finished.append("done"))

        await coordinator.run("show", Effect(), elements, on_complete)

        assert animator.finished == ["c1", "c2", "c0", "done"]
        on_complete.assert_called_once()

    async def test_element_failure_logged_and_still_completes(self, caplog):
        elements = make_elements(2)
        animator = DelayedAnimator({}, fail={"c0"})
        coordinator = AnimationCoordinator(animator)
        on_complete = MagicMock()

        with caplog.at_level(logging.ERROR, logger="pageswap.animation.coordinator"):
            await coordinator.run("hide", Effect(), elements, on_complete)

        on_complete.assert_called_once()
        assert animator.finished == ["c1"]
        assert "hide animation failed" in caplog.text

    async def test_default_animator_is_style_animator(self):
        elements = make_elements(2)
        coordinator = AnimationCoordinator()

        await coordinator.run("hide", Effect("fade", 0), elements)

        assert all(is_hidden(e) for e in elements)
