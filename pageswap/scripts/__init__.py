"""Sequential script re-execution and load-listener capture."""

from pageswap.scripts.lifecycle import ScriptEnvironment
from pageswap.scripts.reloader import ScriptReloader
from pageswap.scripts.runner import ModuleScriptRunner, ScriptRunner

__all__ = ["ModuleScriptRunner", "ScriptEnvironment", "ScriptReloader", "ScriptRunner"]
