"""HTTP transport built on httpx."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Mapping

import httpx

from pageswap.core.errors import NetworkError
from pageswap.core.types import BodyEncoding, FetchResult, FormBody, NavigationRequest
from pageswap.transport.base import (
    DEFAULT_ACCEPT,
    SCRIPT_ORIGIN_HEADERS,
    ProgressCallback,
    percent,
)

logger = logging.getLogger(__name__)


class HttpxTransport:
    """
    Fetches pages with an ``httpx.AsyncClient``.

    Redirects are followed and the final URL is reported on the result.
    Upload progress is reported while the request body is streamed out and
    download progress per received chunk, both only when the total length
    is known.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        blocked = {h.lower() for h in SCRIPT_ORIGIN_HEADERS}
        self._headers = {
            name: value for name, value in (headers or {}).items() if name.lower() not in blocked
        }

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def send(
        self,
        request: NavigationRequest,
        *,
        on_upload_progress: ProgressCallback | None = None,
        on_download_progress: ProgressCallback | None = None,
        timeout: float | None = None,
    ) -> FetchResult:
        client = self._get_client()
        http_request = client.build_request(
            request.method.upper(),
            request.url,
            headers={"Accept": DEFAULT_ACCEPT, **self._headers},
            timeout=httpx.Timeout(timeout),
            **_body_kwargs(request),
        )
        for name in SCRIPT_ORIGIN_HEADERS:
            if name in http_request.headers:
                del http_request.headers[name]

        upload_total = _content_length(http_request.headers)
        if on_upload_progress is not None and upload_total:
            http_request.stream = _UploadProgressStream(
                http_request.stream, upload_total, on_upload_progress
            )

        logger.debug("%s %s", http_request.method, http_request.url)
        try:
            response = await client.send(http_request, stream=True, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise NetworkError(str(exc), status_text=_status_text(exc), error=exc) from exc

        try:
            download_total = _content_length(response.headers)
            chunks: list[bytes] = []
            async for chunk in response.aiter_bytes():
                chunks.append(chunk)
                if on_download_progress is not None:
                    done = percent(response.num_bytes_downloaded, download_total)
                    if done is not None:
                        on_download_progress(done)
        except httpx.HTTPError as exc:
            raise NetworkError(str(exc), status_text=_status_text(exc), error=exc) from exc
        finally:
            await response.aclose()

        body = b"".join(chunks).decode(response.charset_encoding or "utf-8", errors="replace")
        return FetchResult(
            url=str(response.url),
            status=response.status_code,
            body=body,
            headers={name.lower(): value for name, value in response.headers.items()},
            status_text=response.reason_phrase,
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client


class _UploadProgressStream(httpx.AsyncByteStream):
    def __init__(self, stream: Any, total: int, callback: ProgressCallback) -> None:
        self._stream = stream
        self._total = total
        self._callback = callback

    async def __aiter__(self) -> AsyncIterator[bytes]:
        sent = 0
        async for chunk in self._stream:
            sent += len(chunk)
            done = percent(sent, self._total)
            if done is not None:
                self._callback(done)
            yield chunk


def _body_kwargs(request: NavigationRequest) -> dict[str, Any]:
    body = request.body
    if body is None or request.method.upper() == "GET":
        return {}
    if body.encoding is BodyEncoding.URLENCODED:
        return {"data": _grouped_fields(body)}
    return {"files": _multipart_parts(body)}


def _grouped_fields(body: FormBody) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for name, value in body.fields:
        grouped.setdefault(name, []).append(value)
    return grouped


def _multipart_parts(body: FormBody) -> list[tuple[str, tuple[Any, ...]]]:
    # A None filename renders a plain form field; this keeps the payload
    # multipart even when the form has no file inputs.
    parts: list[tuple[str, tuple[Any, ...]]] = [
        (name, (None, value)) for name, value in body.fields
    ]
    parts.extend(
        (part.name, (part.filename, part.content, part.content_type)) for part in body.files
    )
    return parts


def _content_length(headers: httpx.Headers) -> int | None:
    raw = headers.get("Content-Length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _status_text(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.TimeoutException):
        return "timeout"
    return "error"
