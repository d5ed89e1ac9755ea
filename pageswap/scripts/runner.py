"""Script runners — execute one script resource inside a script environment."""

from __future__ import annotations

import hashlib
import importlib.util
import sys
from pathlib import Path
from typing import Protocol, runtime_checkable

from pageswap.core.errors import ScriptLoadError
from pageswap.scripts.lifecycle import ScriptEnvironment


@runtime_checkable
class ScriptRunner(Protocol):
    async def run(self, source: str, environment: ScriptEnvironment) -> None:
        """Load and execute ``source``; return once it has finished executing."""
        ...


class ModuleScriptRunner:
    """Runs Python source files as page scripts, re-executing them on every call."""

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else None

    async def run(self, source: str, environment: ScriptEnvironment) -> None:
        path = self._resolve(source)
        if not path.is_file():
            raise ScriptLoadError(source, f"no such file {str(path)!r}")

        digest = hashlib.sha256(str(path).encode()).hexdigest()[:12]
        module_name = f"_pageswap_script_{digest}"
        # Hot-reload: remove stale entry before loading
        sys.modules.pop(module_name, None)

        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ScriptLoadError(source, "cannot build a module spec")
        module = importlib.util.module_from_spec(spec)
        module.__dict__.update(environment.namespace())
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            raise ScriptLoadError(source, f"{type(exc).__name__}: {exc}") from exc

    def _resolve(self, source: str) -> Path:
        path = Path(source)
        if not path.is_absolute() and self._base_dir is not None:
            path = self._base_dir / path
        return path
