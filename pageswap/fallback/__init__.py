from pageswap.fallback.executor import FallbackExecutor, Navigator

__all__ = ["FallbackExecutor", "Navigator"]
