"""Shared types and dataclasses for PageSwap."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

from pageswap.core.errors import FailureKind


class TransitionStatus(str, Enum):
    IDLE = "idle"
    BUSY = "busy"


class BodyEncoding(str, Enum):
    URLENCODED = "urlencoded"
    MULTIPART = "multipart"


@dataclass(frozen=True)
class LinkFallback:
    """Native equivalent of a link click: a top-level navigation."""

    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "link", "url": self.url}


@dataclass(frozen=True)
class FormFallback:
    """Native equivalent of a form submission."""

    method: str
    action: str
    fields: tuple[tuple[str, str], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "form",
            "method": self.method,
            "action": self.action,
            "fields": [list(pair) for pair in self.fields],
        }


Fallback = Union[LinkFallback, FormFallback]


def fallback_from_dict(data: Mapping[str, Any] | None) -> Fallback | None:
    """Rebuild a fallback descriptor from its persisted form. Unknown shapes give None."""
    if not isinstance(data, Mapping):
        return None
    kind = data.get("type")
    if kind == "link" and isinstance(data.get("url"), str):
        return LinkFallback(url=data["url"])
    if kind == "form" and isinstance(data.get("action"), str):
        fields = tuple((str(name), str(value)) for name, value in data.get("fields") or ())
        return FormFallback(
            method=str(data.get("method") or "GET").upper(),
            action=data["action"],
            fields=fields,
        )
    return None


@dataclass(frozen=True)
class FilePart:
    name: str
    filename: str = ""
    content: bytes = b""
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class FormBody:
    """Encoded form payload sent with a non-GET navigation request."""

    fields: tuple[tuple[str, str], ...] = ()
    files: tuple[FilePart, ...] = ()
    encoding: BodyEncoding = BodyEncoding.MULTIPART


@dataclass(frozen=True)
class NavigationRequest:
    url: str  # absolute URL, already resolved against the current location
    method: str = "GET"
    body: FormBody | None = None
    fallback: Fallback | None = None


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot stored in a history entry so back/forward can replay it."""

    html: str
    fallback: Fallback | None = None

    def to_state(self) -> dict[str, Any]:
        return {
            "html": self.html,
            "fallback": self.fallback.to_dict() if self.fallback is not None else None,
        }

    @classmethod
    def from_state(cls, state: Any) -> HistoryEntry | None:
        """Entries not written by PageSwap (e.g. the initial one) yield None."""
        if not isinstance(state, Mapping):
            return None
        html = state.get("html")
        if not isinstance(html, str) or not html:
            return None
        return cls(html=html, fallback=fallback_from_dict(state.get("fallback")))


@dataclass
class FetchResult:
    """A settled HTTP response as seen by the orchestrator."""

    url: str  # final URL after redirects
    status: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)  # lower-cased names
    status_text: str = ""

    def header(self, name: str, default: str = "") -> str:
        return self.headers.get(name.lower(), default)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass
class FetchOutcome:
    """How a fetch settled: a response, or one of the recoverable failures."""

    response: FetchResult | None = None
    failure: FailureKind | None = None
    status_text: str = ""
    error: BaseException | None = None

    @classmethod
    def received(cls, response: FetchResult) -> FetchOutcome:
        return cls(response=response, status_text=response.status_text)

    @classmethod
    def aborted(cls) -> FetchOutcome:
        return cls(failure=FailureKind.ABORTED, status_text="abort")

    @classmethod
    def network_error(
        cls,
        response: FetchResult | None,
        status_text: str,
        error: BaseException | None,
    ) -> FetchOutcome:
        return cls(
            response=response,
            failure=FailureKind.NETWORK_ERROR,
            status_text=status_text,
            error=error,
        )
