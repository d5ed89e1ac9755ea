"""Unit tests for FallbackExecutor and PlaywrightNavigator (AsyncMock page)."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from pageswap.core.errors import NavigatorUnavailableError
from pageswap.core.types import FormFallback, LinkFallback
from pageswap.fallback.executor import FallbackExecutor, Navigator
from pageswap.fallback.playwright_navigator import PlaywrightNavigator


class TestFallbackExecutor:
    def setup_method(self):
        self.navigator = AsyncMock()
        self.executor = FallbackExecutor(self.navigator)

    async def test_link_fallback_follows_url(self):
        await self.executor.execute(LinkFallback("https://example.com/file.pdf"))

        self.navigator.follow_link.assert_awaited_once_with("https://example.com/file.pdf")
        self.navigator.submit_form.assert_not_awaited()

    async def test_form_fallback_resubmits_fields(self):
        fallback = FormFallback(
            method="POST",
            action="https://example.com/export",
            fields=(("format", "csv"), ("range", "all")),
        )
        await self.executor.execute(fallback)

        self.navigator.submit_form.assert_awaited_once_with(
            "POST", "https://example.com/export", [("format", "csv"), ("range", "all")]
        )

    async def test_missing_descriptor_is_a_noop(self):
        await self.executor.execute(None)

        self.navigator.follow_link.assert_not_awaited()
        self.navigator.submit_form.assert_not_awaited()

    async def test_no_navigator_raises(self):
        with pytest.raises(NavigatorUnavailableError):
            await FallbackExecutor(None).execute(LinkFallback("https://example.com/"))

    async def test_unknown_descriptor_rejected(self):
        with pytest.raises(TypeError):
            await self.executor.execute("https://example.com/")


class TestPlaywrightNavigator:
    def setup_method(self):
        self.page = AsyncMock()
        self.navigator = PlaywrightNavigator(self.page)

    def test_satisfies_navigator_protocol(self):
        assert isinstance(self.navigator, Navigator)

    async def test_follow_link_assigns_location(self):
        await self.navigator.follow_link("https://example.com/report.pdf")

        script, arg = self.page.evaluate.await_args.args
        assert "location.href" in script
        assert arg == "https://example.com/report.pdf"

    async def test_submit_form_builds_hidden_form(self):
        await self.navigator.submit_form(
            "POST", "https://example.com/export", [("format", "csv")]
        )

        script, arg = self.page.evaluate.await_args.args
        assert "createElement('form')" in script
        assert arg == {
            "method": "post",
            "action": "https://example.com/export",
            "fields": [["format", "csv"]],
        }
