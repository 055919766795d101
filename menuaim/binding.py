from __future__ import annotations
from typing import Any, Callable, List, Optional, Tuple
import logging

from .config import MenuAimOptions
from .environment import (
    CLICK,
    DOCUMENT,
    MOUSE_ENTER,
    MOUSE_LEAVE,
    DomEvent,
    EventHandler,
    MenuEnvironment,
)
from .geometry import derive_corners
from .machine import ACTIVATED, DEACTIVATED, DELAY_CLEARED, DELAYING, MenuAim
from .scheduler import AsyncioScheduler, Scheduler
from .telemetry import AimRecorder
from .tracker import PointerTracker, default_tracker


class ClassNameMarker:
    """Mirror state changes as CSS classes on the menu and its items."""

    def __init__(self, environment: MenuEnvironment, root: Any, options: MenuAimOptions):
        self.environment = environment
        self.root = root
        self.options = options

    def __call__(self, kind: str, item: Any) -> None:
        if kind == ACTIVATED:
            self.environment.add_class(item, self.options.active_class_name)
        elif kind == DEACTIVATED:
            self.environment.remove_class(item, self.options.active_class_name)
        elif kind == DELAYING:
            self.environment.add_class(self.root, self.options.delaying_class_name)
        elif kind == DELAY_CLEARED:
            self.environment.remove_class(self.root, self.options.delaying_class_name)


def create_menu_aim(
    menu_root: Any,
    environment: MenuEnvironment,
    options: MenuAimOptions,
    *,
    tracker: PointerTracker,
    scheduler: Scheduler,
    recorder: Optional[AimRecorder] = None,
) -> MenuAim:
    """Build the state machine for ``menu_root`` without subscribing to any events."""
    region = environment.content_region(menu_root)
    corners = derive_corners(region, options.threshold, options.content_direction)
    menu_aim = MenuAim(
        region,
        corners,
        tracker=tracker,
        scheduler=scheduler,
        options=options,
        contains=lambda target: environment.contains(menu_root, target),
        recorder=recorder,
    )
    menu_aim.add_listener(ClassNameMarker(environment, menu_root, options))
    return menu_aim


def bind(
    menu_root: Any,
    environment: MenuEnvironment,
    options: Optional[dict] = None,
    *,
    tracker: Optional[PointerTracker] = None,
    scheduler: Optional[Scheduler] = None,
    recorder: Optional[AimRecorder] = None,
    **kwargs: Any,
) -> Callable[[], None]:
    """Bind menu aim behaviour to ``menu_root`` and return an unbind function.

    ``options``/``kwargs`` are resolved by ``MenuAimOptions.from_options``.
    The returned function removes every subscription made here and cancels
    any pending retry; calling it again does nothing.
    """
    logger = logging.getLogger(__name__)
    resolved = MenuAimOptions.from_options(options, **kwargs)
    tracker = tracker or default_tracker
    scheduler = scheduler or AsyncioScheduler()

    menu_aim = create_menu_aim(
        menu_root,
        environment,
        resolved,
        tracker=tracker,
        scheduler=scheduler,
        recorder=recorder,
    )

    items = list(environment.select_items(menu_root, resolved.item_selector))
    if not items:
        logger.warning(
            "No menu items match %r; menu aim binding does nothing", resolved.item_selector
        )

    subscriptions: List[Tuple[Any, str, EventHandler]] = []

    def _subscribe(target: Any, event_type: str, handler: EventHandler) -> None:
        environment.subscribe(target, event_type, handler)
        subscriptions.append((target, event_type, handler))

    for item in items:
        _subscribe(item, CLICK, lambda event, item=item: menu_aim.click_activate(item))
        _subscribe(item, MOUSE_ENTER, lambda event, item=item: menu_aim.handle_mouse_enter(item))

    def _on_mouse_leave(event: DomEvent) -> None:
        menu_aim.request_deactivate_on_leave()

    def _on_document_click(event: DomEvent) -> None:
        menu_aim.outside_click_deactivate(event.target)

    _subscribe(menu_root, MOUSE_LEAVE, _on_mouse_leave)
    _subscribe(DOCUMENT, CLICK, _on_document_click)
    tracker.acquire(environment)

    logger.info(
        "Menu aim bound: %d item(s), content %s, region %s",
        len(items),
        resolved.content_direction,
        menu_aim.region,
    )

    unbound = False

    def unbind() -> None:
        nonlocal unbound
        if unbound:
            return
        unbound = True
        menu_aim.close()
        for target, event_type, handler in subscriptions:
            environment.unsubscribe(target, event_type, handler)
        subscriptions.clear()
        tracker.release(environment)
        logger.info("Menu aim unbound")

    unbind.menu_aim = menu_aim  # type: ignore[attr-defined]
    return unbind
