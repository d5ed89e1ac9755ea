"""Script reloader — re-executes configured scripts strictly in order."""

from __future__ import annotations

import logging
from typing import Sequence

from pageswap.core.errors import ScriptLoadError
from pageswap.scripts.lifecycle import ScriptEnvironment
from pageswap.scripts.runner import ModuleScriptRunner, ScriptRunner

logger = logging.getLogger(__name__)


class ScriptReloader:
    def __init__(self, runner: ScriptRunner | None = None) -> None:
        self._runner = runner or ModuleScriptRunner()

    async def reload(self, sources: Sequence[str], environment: ScriptEnvironment) -> list[str]:
        """
        Run each script only after the previous one has finished executing.

        A script that fails to load is logged and skipped so the chain keeps
        moving. Returns the sources that ran successfully.
        """
        executed: list[str] = []
        for source in sources:
            try:
                await self._runner.run(source, environment)
            except ScriptLoadError as exc:
                logger.warning("Skipping script %s: %s", source, exc)
                continue
            executed.append(source)
        return executed
