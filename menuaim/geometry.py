from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Tuple

from .config import normalize_direction
from .utils import safe_divide


@dataclass(frozen=True)
class Point:
    """A pointer sample in page coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class Region:
    """Content box of the menu in page coordinates, net of padding."""

    top: float
    right: float
    bottom: float
    left: float

    def contains(self, point: Point) -> bool:
        """True if ``point`` lies inside the region, edges included."""
        return not (
            point.x < self.left
            or point.x > self.right
            or point.y < self.top
            or point.y > self.bottom
        )

    def expanded(self, margin: float) -> "Region":
        """Return the region grown outward by ``margin`` on every side."""
        return Region(
            top=self.top - margin,
            right=self.right + margin,
            bottom=self.bottom + margin,
            left=self.left - margin,
        )


@dataclass(frozen=True)
class Corners:
    """The two corners whose gradients bound a trajectory toward the content."""

    decreasing: Point
    increasing: Point


def corner_points(region: Region, threshold: float) -> Dict[str, Point]:
    """Return the four threshold-expanded corners of ``region`` by name."""
    outer = region.expanded(threshold)
    return {
        "top_left": Point(outer.left, outer.top),
        "top_right": Point(outer.right, outer.top),
        "bottom_left": Point(outer.left, outer.bottom),
        "bottom_right": Point(outer.right, outer.bottom),
    }


# direction -> (decreasing corner, increasing corner)
_CORNER_TABLE: Dict[str, Tuple[str, str]] = {
    "top": ("top_left", "top_right"),
    "bottom": ("bottom_right", "bottom_left"),
    "left": ("bottom_left", "top_left"),
    "right": ("top_right", "bottom_right"),
}


def derive_corners(region: Region, threshold: float, direction: str = "right") -> Corners:
    """Pick the decreasing/increasing corner pair for content shown in ``direction``.

    If the content is on the right, the gradient from the pointer to the
    top-right corner should fall over time while the gradient to the
    bottom-right corner should rise. Unknown directions behave as "right".
    """
    corners = corner_points(region, threshold)
    decreasing_name, increasing_name = _CORNER_TABLE[normalize_direction(direction)]
    return Corners(decreasing=corners[decreasing_name], increasing=corners[increasing_name])


def compute_gradient(point_a: Point, point_b: Point) -> float:
    """Gradient of the line from ``point_a`` to ``point_b``.

    A vertical line gives +/-inf and coincident points give nan, so callers
    can compare the result without special cases.
    """
    return safe_divide(point_b.y - point_a.y, point_b.x - point_a.x)


def region_from_rect(rect: Dict[str, float]) -> Region:
    """Convert a ``{x, y, width, height}`` rect (or a ``{top, right, bottom, left}`` box) to a Region."""
    if {"top", "right", "bottom", "left"} <= set(rect.keys()):
        return Region(
            top=float(rect["top"]),
            right=float(rect["right"]),
            bottom=float(rect["bottom"]),
            left=float(rect["left"]),
        )
    x = float(rect["x"])
    y = float(rect["y"])
    return Region(
        top=y,
        right=x + max(0.0, float(rect["width"])),
        bottom=y + max(0.0, float(rect["height"])),
        left=x,
    )
