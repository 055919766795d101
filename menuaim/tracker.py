from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional
import logging

from .environment import DOCUMENT, POINTER_MOVE, DomEvent, MenuEnvironment
from .geometry import Point
from .telemetry import AimRecorder


@dataclass(frozen=True)
class Sample:
    """Snapshot of the two most recent pointer positions."""

    previous: Optional[Point]
    current: Optional[Point]

    @property
    def complete(self) -> bool:
        return self.previous is not None and self.current is not None


class PointerTracker:
    """Rolling two-slot buffer of pointer positions.

    One tracker is shared by every menu bound to the same pointer stream.
    The pointer-move handler is the only writer.
    """

    def __init__(self, recorder: Optional[AimRecorder] = None):
        self.previous: Optional[Point] = None
        self.current: Optional[Point] = None
        self.recorder = recorder
        # environment id -> (environment, lease count)
        self._leases: Dict[int, list] = {}

    @property
    def sample(self) -> Sample:
        return Sample(self.previous, self.current)

    def record_sample(self, point: Point) -> None:
        """Shift current into previous and store ``point`` as current."""
        self.previous = self.current
        self.current = point
        if self.recorder is not None:
            self.recorder.log_sample(point.x, point.y)

    def handle_pointer_move(self, event: DomEvent) -> None:
        if event.x is None or event.y is None:
            return
        self.record_sample(Point(float(event.x), float(event.y)))

    def acquire(self, environment: MenuEnvironment) -> None:
        """Subscribe to ``environment``'s document pointer-move stream.

        Reference counted: only the first lease subscribes, so a move event is
        recorded once no matter how many menus share the tracker.
        """
        lease = self._leases.get(id(environment))
        if lease is None:
            environment.subscribe(DOCUMENT, POINTER_MOVE, self.handle_pointer_move)
            self._leases[id(environment)] = [environment, 1]
            logging.getLogger(__name__).debug("Pointer tracker subscribed")
        else:
            lease[1] += 1

    def release(self, environment: MenuEnvironment) -> None:
        """Drop one lease; the last one unsubscribes from the pointer stream."""
        lease = self._leases.get(id(environment))
        if lease is None:
            return
        lease[1] -= 1
        if lease[1] <= 0:
            del self._leases[id(environment)]
            environment.unsubscribe(DOCUMENT, POINTER_MOVE, self.handle_pointer_move)
            logging.getLogger(__name__).debug("Pointer tracker unsubscribed")

    def reset(self) -> None:
        """Forget both samples."""
        self.previous = None
        self.current = None


# Process-wide tracker used when a binding is not given its own
default_tracker = PointerTracker()
