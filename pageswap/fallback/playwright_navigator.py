"""Native navigation inside a live Playwright page."""

from __future__ import annotations

from typing import Sequence

from playwright.async_api import Page

# Assigning location.href behaves like a real link follow, downloads included
_FOLLOW_LINK_JS = """(url) => { window.location.href = url; }"""

_SUBMIT_FORM_JS = """({ method, action, fields }) => {
    const form = document.createElement('form');
    form.method = method;
    form.action = action;
    form.style.display = 'none';
    for (const [name, value] of fields) {
        const input = document.createElement('input');
        input.type = 'hidden';
        input.name = name;
        input.value = value;
        form.appendChild(input);
    }
    document.body.appendChild(form);
    HTMLFormElement.prototype.submit.call(form);
}"""


class PlaywrightNavigator:
    """Performs fallbacks in a real browser page driven by Playwright."""

    def __init__(self, page: Page) -> None:
        self._page = page

    async def follow_link(self, url: str) -> None:
        await self._page.evaluate(_FOLLOW_LINK_JS, url)

    async def submit_form(
        self, method: str, action: str, fields: Sequence[tuple[str, str]]
    ) -> None:
        await self._page.evaluate(
            _SUBMIT_FORM_JS,
            {
                "method": method.lower(),
                "action": action,
                "fields": [[name, value] for name, value in fields],
            },
        )
