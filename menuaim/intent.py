from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .geometry import Corners, Point, Region, compute_gradient
from .tracker import Sample

# Verdict reasons
IDLE = "idle"
NO_SAMPLES = "no_samples"
ENTERED_FROM_OUTSIDE = "entered_from_outside"
STALE = "stale"
OFF_DECREASING = "off_decreasing"
OFF_INCREASING = "off_increasing"
AIMING = "aiming"


@dataclass
class AimState:
    """Per-menu activation state."""

    active_item: Any = None
    last_checked_point: Optional[Point] = None


def evaluate_intent(
    state: AimState, sample: Sample, region: Region, corners: Corners
) -> Tuple[bool, str]:
    """Return ``(switch, reason)`` for the latest pair of pointer samples.

    ``switch`` is False only when the pointer is moving from inside the menu
    toward the active item's content and has moved since the last check.
    """
    previous, current = sample.previous, sample.current

    if state.active_item is None:
        return True, IDLE
    if previous is None or current is None:
        return True, NO_SAMPLES
    if not region.contains(previous):
        return True, ENTERED_FROM_OUTSIDE
    # exact comparison, no tolerance
    last = state.last_checked_point
    if last is not None and current.x == last.x and current.y == last.y:
        return True, STALE
    if compute_gradient(current, corners.decreasing) > compute_gradient(
        previous, corners.decreasing
    ):
        return True, OFF_DECREASING
    if compute_gradient(current, corners.increasing) < compute_gradient(
        previous, corners.increasing
    ):
        return True, OFF_INCREASING
    return False, AIMING


def should_switch(
    state: AimState, sample: Sample, region: Region, corners: Corners
) -> bool:
    """Decide whether the active item may change, updating ``last_checked_point``."""
    switch, _ = evaluate_intent(state, sample, region, corners)
    state.last_checked_point = None if switch else sample.current
    return switch
