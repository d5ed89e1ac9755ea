"""Transport contract consumed by the orchestrator."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from pageswap.core.types import FetchResult, NavigationRequest

ProgressCallback = Callable[[float], object]

# Headers that would mark the request as script-originated; servers answer
# those with partial responses instead of the full page.
SCRIPT_ORIGIN_HEADERS = ("X-Requested-With",)

DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


@runtime_checkable
class Transport(Protocol):
    async def send(
        self,
        request: NavigationRequest,
        *,
        on_upload_progress: ProgressCallback | None = None,
        on_download_progress: ProgressCallback | None = None,
        timeout: float | None = None,
    ) -> FetchResult:
        """
        Issue the request and return the settled response.

        Non-2xx responses are returned, not raised. Raises ``NetworkError``
        when no response body could be obtained and ``RequestAborted`` when
        the request was cancelled underneath the transport.
        """
        ...


def percent(loaded: int, total: int | None) -> float | None:
    """Progress percentage, or None when the total length is not known."""
    if not total:
        return None
    return min(100.0, 100.0 * loaded / total)
