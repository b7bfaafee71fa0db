"""Geometry helpers shared by the simulator."""

from __future__ import annotations


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` into ``[lower, upper]``; ``lower`` wins if the range is inverted."""
    return max(lower, min(upper, value))


def circle_rect_collision(
    cx: float,
    cy: float,
    radius: float,
    rect_x: float,
    rect_y: float,
    rect_width: float,
    rect_height: float,
) -> bool:
    """Return True when a circle touches or overlaps an axis-aligned rectangle.

    Uses the closest point on the rectangle to the circle centre.
    """
    closest_x = clamp(cx, rect_x, rect_x + rect_width)
    closest_y = clamp(cy, rect_y, rect_y + rect_height)
    dx = cx - closest_x
    dy = cy - closest_y
    return dx * dx + dy * dy <= radius * radius
