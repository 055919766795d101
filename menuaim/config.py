from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Callable, Mapping, Optional


class cfg:
    """Default tuning for menu aim bindings."""

    # --- Geometry ---
    CONTENT_DIRECTION = "right"
    DIRECTIONS = ("top", "bottom", "left", "right")
    THRESHOLD_PX = 50.0

    # --- Retry timer ---
    DELAY_MS = 200.0

    # --- DOM markers ---
    ITEM_SELECTOR = ".menu-aim__item"
    ACTIVE_CLASS_NAME = "menu-aim__item--active"
    DELAYING_CLASS_NAME = "menu-aim--delaying"

    # --- Browser environment ---
    CDP_BINDING_NAME = "__menuAimEvent"
    CDP_SEND_TIMEOUT_S = 1.5


# camelCase names used by the JavaScript menu-aim options object
_ALIASES = {
    "contentDirection": "content_direction",
    "menuItemSelector": "item_selector",
    "itemSelector": "item_selector",
    "menuItemActiveClassName": "active_class_name",
    "activeClassName": "active_class_name",
    "delayingClassName": "delaying_class_name",
    "activateCallback": "on_activate",
    "onActivate": "on_activate",
    "deactivateCallback": "on_deactivate",
    "onDeactivate": "on_deactivate",
    "mouseEnterCallback": "on_mouse_enter",
    "onMouseEnter": "on_mouse_enter",
    "mouseLeaveCallback": "on_mouse_leave",
    "onMouseLeave": "on_mouse_leave",
    "onStateChange": "on_state_change",
}

ItemCallback = Optional[Callable[[Any], None]]


def normalize_direction(direction: Optional[str]) -> str:
    """Return ``direction`` if it names a known side, else the default ("right")."""
    if direction in cfg.DIRECTIONS:
        return direction
    return cfg.CONTENT_DIRECTION


@dataclass
class MenuAimOptions:
    """Resolved options for one binding. ``None`` inputs fall back to ``cfg``."""

    content_direction: str = cfg.CONTENT_DIRECTION
    delay: float = cfg.DELAY_MS
    item_selector: str = cfg.ITEM_SELECTOR
    active_class_name: str = cfg.ACTIVE_CLASS_NAME
    delaying_class_name: str = cfg.DELAYING_CLASS_NAME
    threshold: float = cfg.THRESHOLD_PX
    on_activate: ItemCallback = None
    on_deactivate: ItemCallback = None
    on_mouse_enter: ItemCallback = None
    on_mouse_leave: ItemCallback = None
    on_state_change: Optional[Callable[[str], None]] = None

    @property
    def delay_seconds(self) -> float:
        return self.delay / 1000.0

    @classmethod
    def from_options(
        cls, options: Optional[Mapping[str, Any]] = None, **overrides: Any
    ) -> "MenuAimOptions":
        """Build options from a mapping and/or keyword overrides.

        Accepts both the snake_case names and the camelCase names of the
        JavaScript options object. Unknown keys raise ``TypeError``.
        """
        merged = {}
        for source in (options or {}, overrides):
            for key, value in source.items():
                merged[_ALIASES.get(key, key)] = value

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(merged) - known)
        if unknown:
            raise TypeError(f"Unknown menu aim option(s): {', '.join(unknown)}")

        resolved = {k: v for k, v in merged.items() if v is not None}
        options_obj = cls(**resolved)
        options_obj.content_direction = normalize_direction(options_obj.content_direction)
        options_obj.delay = max(0.0, float(options_obj.delay))
        options_obj.threshold = max(0.0, float(options_obj.threshold))
        return options_obj
