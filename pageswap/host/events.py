"""DOM-style events dispatched by the host window."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from bs4 import Tag


@dataclass
class Event:
    type: str
    default_prevented: bool = field(default=False, init=False)

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass
class ClickEvent(Event):
    type: str = "click"
    target: Tag | None = None
    button: int = 0  # 0 = primary
    ctrl_key: bool = False
    alt_key: bool = False
    shift_key: bool = False
    meta_key: bool = False


@dataclass
class SubmitEvent(Event):
    type: str = "submit"
    target: Tag | None = None


@dataclass
class PopStateEvent(Event):
    type: str = "popstate"
    state: Any = None


@dataclass
class LoadEvent(Event):
    type: str = "load"
