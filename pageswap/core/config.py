"""Configuration for a PageSwap session."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from pageswap.core.errors import ConfigError

TITLE_SELECTOR = "html > head > title"
ROOT_SELECTOR = "html"


@dataclass(frozen=True)
class Effect:
    name: str = "fade"
    duration: float = 300  # milliseconds


@dataclass(frozen=True)
class Effects:
    hide: Effect = field(default_factory=Effect)
    show: Effect = field(default_factory=Effect)


@dataclass(frozen=True)
class EventCallbacks:
    """User hooks fired during a transition. Every hook is optional."""

    old_page_hidden: Callable[[], Any] | None = None
    new_page_upload_progress: Callable[[float], Any] | None = None
    new_page_download_progress: Callable[[float], Any] | None = None
    before_containers_replaced: Callable[[], Any] | None = None
    after_containers_replaced: Callable[[], Any] | None = None
    new_page_shown: Callable[[], Any] | None = None
    original_page_shown: Callable[[], Any] | None = None
    request_error: Callable[[Any, str, Any], Any] | None = None


@dataclass(frozen=True)
class PageSwapConfig:
    container: str = "body"
    scripts_to_reload: tuple[str, ...] = ()
    link_selector: str = "a[href]"
    form_selector: str = "form"
    effects: Effects = field(default_factory=Effects)
    events: EventCallbacks = field(default_factory=EventCallbacks)
    request_timeout: float | None = None  # seconds; None waits forever

    @property
    def container_selectors(self) -> list[str]:
        return [s.strip() for s in self.container.split(",") if s.strip()]

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> PageSwapConfig:
        """
        Build a config by deep-merging ``options`` over the defaults.

        Nested ``effects`` and ``events`` maps merge key by key, so
        ``{"effects": {"hide": {"duration": 20}}}`` keeps the default
        hide effect name.
        """
        options = dict(options or {})
        _check_keys("options", options, cls)

        effects = Effects()
        if "effects" in options:
            raw = options.pop("effects")
            if isinstance(raw, Effects):
                effects = raw
            else:
                _check_keys("effects", raw, Effects)
                effects = Effects(
                    hide=_merge_effect(effects.hide, raw.get("hide")),
                    show=_merge_effect(effects.show, raw.get("show")),
                )

        events = EventCallbacks()
        if "events" in options:
            raw = options.pop("events")
            if isinstance(raw, EventCallbacks):
                events = raw
            else:
                _check_keys("events", raw, EventCallbacks)
                events = dataclasses.replace(events, **raw)

        if "scripts_to_reload" in options:
            if isinstance(options["scripts_to_reload"], str):
                raise ConfigError("scripts_to_reload must be a sequence of script paths, not a single string")
            options["scripts_to_reload"] = tuple(options["scripts_to_reload"])

        return cls(effects=effects, events=events, **options)


def _merge_effect(base: Effect, raw: Any) -> Effect:
    if raw is None:
        return base
    if isinstance(raw, Effect):
        return raw
    _check_keys("effect", raw, Effect)
    return dataclasses.replace(base, **raw)


def _check_keys(section: str, raw: Any, target: type) -> None:
    if not isinstance(raw, Mapping):
        raise ConfigError(f"{section} must be a mapping, got {type(raw).__name__}")
    known = {f.name for f in dataclasses.fields(target)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown {section} key(s): {', '.join(unknown)}")
