from __future__ import annotations
from typing import Any, Callable, List, Optional
import logging

from .config import MenuAimOptions
from .geometry import Corners, Region
from .intent import AimState, evaluate_intent
from .scheduler import RetryTimer, Scheduler
from .telemetry import AimRecorder
from .tracker import PointerTracker

# State change kinds
ACTIVATED = "activated"
DEACTIVATED = "deactivated"
DELAYING = "delaying"
DELAY_CLEARED = "delay_cleared"

StateListener = Callable[[str, Any], None]


class MenuAim:
    """Decides when the active menu item may change.

    Item switches requested while the pointer is travelling toward the active
    item's content are retried after ``options.delay`` ms instead of being
    applied immediately.
    """

    def __init__(
        self,
        region: Region,
        corners: Corners,
        *,
        tracker: PointerTracker,
        scheduler: Scheduler,
        options: Optional[MenuAimOptions] = None,
        contains: Optional[Callable[[Any], bool]] = None,
        recorder: Optional[AimRecorder] = None,
    ):
        self.region = region
        self.corners = corners
        self.tracker = tracker
        self.options = options or MenuAimOptions()
        self.recorder = recorder
        self.state = AimState()
        self.retry = RetryTimer(scheduler)
        self._contains = contains or (lambda target: False)
        self._listeners: List[StateListener] = []
        self._delaying = False
        self._closed = False

    @property
    def active_item(self) -> Any:
        return self.state.active_item

    @property
    def delaying(self) -> bool:
        return self._delaying

    def add_listener(self, listener: StateListener) -> None:
        """Register ``listener(kind, item)`` for state changes."""
        self._listeners.append(listener)

    # --- Signals ---
    def _emit(self, kind: str, item: Any = None) -> None:
        for listener in list(self._listeners):
            listener(kind, item)
        if self.options.on_state_change is not None:
            self.options.on_state_change(kind)

    def _set_delaying(self, delaying: bool) -> None:
        if delaying == self._delaying:
            return
        self._delaying = delaying
        self._emit(DELAYING if delaying else DELAY_CLEARED)

    # --- Activation ---
    def _deactivate(self) -> None:
        item = self.state.active_item
        if item is None:
            return
        self._emit(DEACTIVATED, item)
        if self.options.on_deactivate is not None:
            self.options.on_deactivate(item)
        self.state.active_item = None

    def _activate(self, item: Any) -> None:
        if item is self.state.active_item:
            return
        self._deactivate()
        self.state.active_item = item
        self._emit(ACTIVATED, item)
        if self.options.on_activate is not None:
            self.options.on_activate(item)

    def _check_intent(self) -> bool:
        """Evaluate the current trajectory and update the delaying signal."""
        sample = self.tracker.sample
        switch, reason = evaluate_intent(self.state, sample, self.region, self.corners)
        self.state.last_checked_point = None if switch else sample.current
        self._set_delaying(not switch)

        logging.getLogger(__name__).debug(
            "Intent verdict %s (%s) at %s", "switch" if switch else "wait", reason, sample.current
        )
        if self.recorder is not None and sample.current is not None:
            self.recorder.log_decision(sample.current.x, sample.current.y, switch, reason)
        return switch

    def _drop_pending(self) -> None:
        self.retry.cancel()
        self.state.last_checked_point = None
        self._set_delaying(False)

    # --- Operations ---
    def request_activate(self, item: Any) -> None:
        """Activate ``item`` now, or retry after the delay if the pointer is aiming at the content."""
        if self._closed:
            return
        self.retry.cancel()
        if self._check_intent():
            self._activate(item)
            return
        self.retry.replace(self.options.delay_seconds, lambda: self.request_activate(item))

    def handle_mouse_enter(self, item: Any) -> None:
        """Pointer entered ``item``; fires ``on_mouse_enter`` when the menu was idle."""
        if self._closed:
            return
        was_idle = self.state.active_item is None
        self.request_activate(item)
        if was_idle and self.options.on_mouse_enter is not None:
            self.options.on_mouse_enter(self.state.active_item)

    def request_deactivate_on_leave(self) -> None:
        """Pointer left the menu; deactivate unless it is heading for the content."""
        if self._closed:
            return
        if self._check_intent():
            self.retry.cancel()
            if self.options.on_mouse_leave is not None:
                self.options.on_mouse_leave(self.state.active_item)
            self._deactivate()
        elif not self.retry.pending:
            # heading for the content with nothing to retry: keep the item open
            self.state.last_checked_point = None
            self._set_delaying(False)

    def click_activate(self, item: Any) -> None:
        """Activate ``item`` immediately, ignoring the trajectory."""
        if self._closed:
            return
        self._drop_pending()
        self._activate(item)

    def outside_click_deactivate(self, target: Any) -> None:
        """Deactivate immediately if ``target`` is outside the menu."""
        if self._closed or self._contains(target):
            return
        self._drop_pending()
        self._deactivate()

    def close(self) -> None:
        """Cancel pending work and stop reacting to further requests."""
        if self._closed:
            return
        self._drop_pending()
        self._closed = True
