"""Transport that issues requests through a Playwright browser context."""

from __future__ import annotations

import logging
from typing import Any

from playwright.async_api import APIRequestContext, FormData
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

from pageswap.core.errors import NetworkError
from pageswap.core.types import BodyEncoding, FetchResult, NavigationRequest
from pageswap.transport.base import DEFAULT_ACCEPT, ProgressCallback

logger = logging.getLogger(__name__)


class PlaywrightTransport:
    """
    Fetches pages with a Playwright ``APIRequestContext`` (e.g. ``page.request``),
    so requests share the browser's cookies and storage.

    Playwright exposes no streaming progress; both progress callbacks fire
    once with 100 when the corresponding direction has completed.
    """

    def __init__(self, request_context: APIRequestContext) -> None:
        self._context = request_context

    async def send(
        self,
        request: NavigationRequest,
        *,
        on_upload_progress: ProgressCallback | None = None,
        on_download_progress: ProgressCallback | None = None,
        timeout: float | None = None,
    ) -> FetchResult:
        options: dict[str, Any] = {
            "method": request.method.upper(),
            "headers": {"Accept": DEFAULT_ACCEPT},
            "fail_on_status_code": False,
            # Playwright uses 0 for "no timeout"; its unit is milliseconds
            "timeout": 0 if timeout is None else timeout * 1000,
        }
        body = request.body
        if body is not None and request.method.upper() != "GET":
            # FormData.append keeps repeated names (checkbox groups, multi-selects)
            form_data = FormData()
            for name, value in body.fields:
                form_data.append(name, value)
            if body.encoding is BodyEncoding.URLENCODED:
                options["form"] = form_data
            else:
                for part in body.files:
                    form_data.append(
                        part.name,
                        {
                            "name": part.filename,
                            "mimeType": part.content_type,
                            "buffer": part.content,
                        },
                    )
                options["multipart"] = form_data

        try:
            response = await self._context.fetch(request.url, **options)
            if on_upload_progress is not None and body is not None:
                on_upload_progress(100.0)
            text = await response.text()
        except PlaywrightTimeout as exc:
            raise NetworkError(str(exc), status_text="timeout", error=exc) from exc
        except PlaywrightError as exc:
            raise NetworkError(str(exc), status_text="error", error=exc) from exc

        if on_download_progress is not None:
            on_download_progress(100.0)

        return FetchResult(
            url=response.url,
            status=response.status,
            body=text,
            headers={name.lower(): value for name, value in response.headers.items()},
            status_text=response.status_text,
        )
