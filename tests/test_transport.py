"""
Unit tests for HttpxTransport (httpx.MockTransport) and PlaywrightTransport
(AsyncMock request context).
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from playwright.async_api import FormData
from playwright.async_api import TimeoutError as PlaywrightTimeout

from pageswap.core.errors import NetworkError
from pageswap.core.types import BodyEncoding, FilePart, FormBody, NavigationRequest
from pageswap.transport import playwright as playwright_transport
from pageswap.transport.base import Transport, percent
from pageswap.transport.http import HttpxTransport
from pageswap.transport.playwright import PlaywrightTransport

PAGE = "<html><head><title>Second</title></head><body>B</body></html>"


class ChunkedBody(httpx.AsyncByteStream):
    """Response body that is only read as the transport iterates it."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = chunks

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk


class RecordingFormData:
    """Stands in for playwright's FormData and keeps every appended pair in order."""

    def __init__(self) -> None:
        self.pairs: list[tuple] = []

    def append(self, name, value):
        self.pairs.append((name, value))
        return self


def make_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        headers={"X-Requested-With": "XMLHttpRequest"},
    )


class TestPercent:
    def test_known_total(self):
        assert percent(50, 200) == 25.0
        assert percent(300, 200) == 100.0

    def test_unknown_total(self):
        assert percent(50, None) is None
        assert percent(50, 0) is None


# ---------------------------------------------------------------------------
# HttpxTransport
# ---------------------------------------------------------------------------


class TestHttpxTransport:
    def setup_method(self):
        self.seen: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.seen.append(request)
        if request.url.path == "/old":
            return httpx.Response(302, headers={"Location": "https://example.com/new"})
        if request.url.path == "/missing":
            return httpx.Response(404, text="<html><body>nope</body></html>")
        return httpx.Response(200, text=PAGE, headers={"Content-Type": "text/html; charset=utf-8"})

    async def test_satisfies_transport_protocol(self):
        assert isinstance(HttpxTransport(), Transport)

    async def test_get_returns_settled_result(self):
        async with HttpxTransport(make_client(self.handler)) as transport:
            result = await transport.send(NavigationRequest(url="https://example.com/second"))

        assert result.status == 200
        assert result.ok
        assert result.body == PAGE
        assert result.url == "https://example.com/second"
        assert result.header("Content-Type") == "text/html; charset=utf-8"
        assert result.status_text == "OK"

    async def test_script_origin_header_stripped(self):
        transport = HttpxTransport(
            make_client(self.handler), headers={"X-Requested-With": "x", "X-Trace": "1"}
        )
        await transport.send(NavigationRequest(url="https://example.com/second"))

        request = self.seen[0]
        assert "x-requested-with" not in request.headers
        assert request.headers["x-trace"] == "1"
        assert request.headers["accept"].startswith("text/html")

    async def test_redirect_reports_final_url(self):
        transport = HttpxTransport(make_client(self.handler))
        result = await transport.send(NavigationRequest(url="https://example.com/old"))

        assert result.url == "https://example.com/new"
        assert [r.url.path for r in self.seen] == ["/old", "/new"]

    async def test_error_status_returned_not_raised(self):
        transport = HttpxTransport(make_client(self.handler))
        result = await transport.send(NavigationRequest(url="https://example.com/missing"))

        assert result.status == 404
        assert not result.ok
        assert "nope" in result.body

    async def test_multipart_post(self):
        body = FormBody(
            fields=(("title", "Report"), ("tag", "a")),
            files=(FilePart(name="upload", filename="r.txt", content=b"hello", content_type="text/plain"),),
        )
        transport = HttpxTransport(make_client(self.handler))
        await transport.send(
            NavigationRequest(url="https://example.com/save", method="POST", body=body)
        )

        request = self.seen[0]
        assert request.method == "POST"
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="title"' in request.content
        assert b"Report" in request.content
        assert b'filename="r.txt"' in request.content
        assert b"hello" in request.content

    async def test_multipart_without_files(self):
        body = FormBody(fields=(("title", "Report"),))
        transport = HttpxTransport(make_client(self.handler))
        await transport.send(
            NavigationRequest(url="https://example.com/save", method="POST", body=body)
        )

        assert self.seen[0].headers["content-type"].startswith("multipart/form-data")

    async def test_urlencoded_post(self):
        body = FormBody(fields=(("a", "1"), ("a", "2"), ("b", "x y")), encoding=BodyEncoding.URLENCODED)
        transport = HttpxTransport(make_client(self.handler))
        await transport.send(
            NavigationRequest(url="https://example.com/save", method="POST", body=body)
        )

        request = self.seen[0]
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert request.content == b"a=1&a=2&b=x+y"

    async def test_get_ignores_body(self):
        transport = HttpxTransport(make_client(self.handler))
        await transport.send(
            NavigationRequest(url="https://example.com/q", body=FormBody(fields=(("a", "1"),)))
        )
        assert self.seen[0].content == b""

    async def test_progress_callbacks(self):
        chunks = [PAGE[:20].encode(), PAGE[20:].encode()]

        def streamed(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                stream=ChunkedBody(chunks),
                headers={
                    "Content-Type": "text/html",
                    "Content-Length": str(sum(len(c) for c in chunks)),
                },
            )

        uploads: list[float] = []
        downloads: list[float] = []
        transport = HttpxTransport(make_client(streamed))
        await transport.send(
            NavigationRequest(
                url="https://example.com/save",
                method="POST",
                body=FormBody(fields=(("title", "Report"),)),
            ),
            on_upload_progress=uploads.append,
            on_download_progress=downloads.append,
        )

        assert uploads and uploads[-1] == 100.0
        assert len(downloads) == 2
        assert 0 < downloads[0] < 100.0
        assert downloads[-1] == 100.0
        assert uploads == sorted(uploads)

    async def test_connect_error_becomes_network_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = HttpxTransport(make_client(refuse))
        with pytest.raises(NetworkError) as exc_info:
            await transport.send(NavigationRequest(url="https://example.com/"))

        assert exc_info.value.status_text == "error"
        assert isinstance(exc_info.value.error, httpx.ConnectError)
        assert exc_info.value.response is None

    async def test_timeout_status_text(self):
        def slow(request):
            raise httpx.ReadTimeout("timed out", request=request)

        transport = HttpxTransport(make_client(slow))
        with pytest.raises(NetworkError) as exc_info:
            await transport.send(NavigationRequest(url="https://example.com/"), timeout=0.1)

        assert exc_info.value.status_text == "timeout"

    async def test_aclose_only_closes_owned_client(self):
        client = make_client(self.handler)
        await HttpxTransport(client).aclose()
        assert not client.is_closed
        await client.aclose()


# ---------------------------------------------------------------------------
# PlaywrightTransport
# ---------------------------------------------------------------------------


def make_api_response(status=200, text=PAGE, url="https://example.com/second"):
    response = MagicMock()
    response.url = url
    response.status = status
    response.status_text = "OK" if status == 200 else "Not Found"
    response.headers = {"Content-Type": "text/html"}
    response.text = AsyncMock(return_value=text)
    return response


class TestPlaywrightTransport:
    def setup_method(self):
        self.context = MagicMock()
        self.context.fetch = AsyncMock(return_value=make_api_response())
        self.transport = PlaywrightTransport(self.context)

    async def test_get(self):
        downloads: list[float] = []
        result = await self.transport.send(
            NavigationRequest(url="https://example.com/second"),
            on_download_progress=downloads.append,
        )

        assert result.body == PAGE
        assert result.header("content-type") == "text/html"
        assert downloads == [100.0]
        _, kwargs = self.context.fetch.await_args
        assert kwargs["method"] == "GET"
        assert kwargs["fail_on_status_code"] is False
        assert kwargs["timeout"] == 0
        assert "multipart" not in kwargs

    async def test_timeout_in_milliseconds(self):
        await self.transport.send(NavigationRequest(url="https://example.com/"), timeout=2.5)
        assert self.context.fetch.await_args.kwargs["timeout"] == 2500

    async def test_multipart_post(self, monkeypatch):
        monkeypatch.setattr(playwright_transport, "FormData", RecordingFormData)
        uploads: list[float] = []
        body = FormBody(
            fields=(("title", "Report"),),
            files=(FilePart(name="upload", filename="r.txt", content=b"hi", content_type="text/plain"),),
        )
        await self.transport.send(
            NavigationRequest(url="https://example.com/save", method="post", body=body),
            on_upload_progress=uploads.append,
        )

        kwargs = self.context.fetch.await_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["multipart"].pairs == [
            ("title", "Report"),
            ("upload", {"name": "r.txt", "mimeType": "text/plain", "buffer": b"hi"}),
        ]
        assert uploads == [100.0]

    async def test_repeated_field_names_all_sent(self, monkeypatch):
        monkeypatch.setattr(playwright_transport, "FormData", RecordingFormData)
        body = FormBody(fields=(("tag", "a"), ("tag", "b"), ("title", "x")))
        await self.transport.send(
            NavigationRequest(url="https://example.com/save", method="POST", body=body)
        )

        form = self.context.fetch.await_args.kwargs["multipart"]
        assert form.pairs == [("tag", "a"), ("tag", "b"), ("title", "x")]

    async def test_urlencoded_keeps_repeated_names(self, monkeypatch):
        monkeypatch.setattr(playwright_transport, "FormData", RecordingFormData)
        body = FormBody(fields=(("tag", "a"), ("tag", "b")), encoding=BodyEncoding.URLENCODED)
        await self.transport.send(
            NavigationRequest(url="https://example.com/save", method="POST", body=body)
        )

        kwargs = self.context.fetch.await_args.kwargs
        assert kwargs["form"].pairs == [("tag", "a"), ("tag", "b")]
        assert "multipart" not in kwargs

    async def test_builds_real_form_data(self):
        body = FormBody(fields=(("tag", "a"), ("tag", "b")))
        await self.transport.send(
            NavigationRequest(url="https://example.com/save", method="POST", body=body)
        )

        assert isinstance(self.context.fetch.await_args.kwargs["multipart"], FormData)

    async def test_error_status_returned(self):
        self.context.fetch.return_value = make_api_response(status=404, text="missing")
        result = await self.transport.send(NavigationRequest(url="https://example.com/x"))
        assert result.status == 404
        assert result.status_text == "Not Found"

    async def test_timeout_becomes_network_error(self):
        self.context.fetch.side_effect = PlaywrightTimeout("Timeout 100ms exceeded")
        with pytest.raises(NetworkError) as exc_info:
            await self.transport.send(NavigationRequest(url="https://example.com/"))
        assert exc_info.value.status_text == "timeout"
