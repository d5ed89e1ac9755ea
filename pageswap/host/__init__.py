from pageswap.host.events import ClickEvent, LoadEvent, PopStateEvent, SubmitEvent
from pageswap.host.history import SessionHistory
from pageswap.host.window import Window

__all__ = ["ClickEvent", "LoadEvent", "PopStateEvent", "SessionHistory", "SubmitEvent", "Window"]
