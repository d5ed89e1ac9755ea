"""Error taxonomy for page transitions."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pageswap.core.types import FetchResult


class FailureKind(str, Enum):
    ABORTED = "aborted"
    NETWORK_ERROR = "network_error"
    NON_NAVIGABLE_RESPONSE = "non_navigable_response"
    PARSE_FAILURE = "parse_failure"
    CONTAINER_MISMATCH = "container_mismatch"


class PageSwapError(Exception):
    """Base class for every error raised by PageSwap."""


class ConfigError(PageSwapError, ValueError):
    """Raised when load() receives options it does not understand."""


class RequestAborted(PageSwapError):
    """The fetch was cancelled before a response arrived."""


class NetworkError(PageSwapError):
    """The request failed without producing a usable body."""

    def __init__(
        self,
        message: str,
        *,
        response: FetchResult | None = None,
        status_text: str = "error",
        error: Any = None,
    ) -> None:
        super().__init__(message)
        self.response = response
        self.status_text = status_text
        self.error = error


class ContainerMismatchError(PageSwapError):
    """A container selector matched nothing even after the root-level retry."""

    def __init__(self, selector: str, side: str) -> None:
        super().__init__(
            f"The container element does not exist in the {side} document "
            f"for selector: {selector}"
        )
        self.selector = selector
        self.side = side


class ScriptLoadError(PageSwapError):
    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Failed to run script {source!r}: {reason}")
        self.source = source


class NavigatorUnavailableError(PageSwapError):
    """A fallback was needed but no native navigator is attached to the window."""
