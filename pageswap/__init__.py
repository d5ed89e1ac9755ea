from pageswap.core.activation import load, supported, unload
from pageswap.core.config import Effect, Effects, EventCallbacks, PageSwapConfig
from pageswap.core.errors import (
    ConfigError,
    ContainerMismatchError,
    FailureKind,
    NavigatorUnavailableError,
    NetworkError,
    PageSwapError,
    RequestAborted,
    ScriptLoadError,
)
from pageswap.core.orchestrator import NavigationOrchestrator
from pageswap.core.types import (
    FetchResult,
    FormBody,
    FormFallback,
    HistoryEntry,
    LinkFallback,
    NavigationRequest,
    TransitionStatus,
)
from pageswap.host.window import Window

__all__ = [
    "load",
    "unload",
    "supported",
    "NavigationOrchestrator",
    "Window",
    # Configuration
    "Effect",
    "Effects",
    "EventCallbacks",
    "PageSwapConfig",
    # Types
    "FetchResult",
    "FormBody",
    "FormFallback",
    "HistoryEntry",
    "LinkFallback",
    "NavigationRequest",
    "TransitionStatus",
    # Errors
    "ConfigError",
    "ContainerMismatchError",
    "FailureKind",
    "NavigatorUnavailableError",
    "NetworkError",
    "PageSwapError",
    "RequestAborted",
    "ScriptLoadError",
]
