"""
Board geometry helpers.

Stored objects are positioned by their top-left corner; the agent talks in
center points. These helpers convert between the two and answer containment
questions on (x, y, right, bottom) bounding boxes.
"""

from typing import Any

Bounds = tuple[float, float, float, float]


def object_bounds(obj: dict[str, Any]) -> Bounds:
    """Get the bounding box (x, y, right, bottom) of a stored object."""
    x = obj.get("x") or 0
    y = obj.get("y") or 0
    return (x, y, x + (obj.get("width") or 0), y + (obj.get("height") or 0))


def object_center(obj: dict[str, Any]) -> tuple[float, float]:
    """Get the center point of a stored object (top-left if it has no size)."""
    x = obj.get("x") or 0
    y = obj.get("y") or 0
    if obj.get("width") is not None:
        x += obj["width"] / 2
    if obj.get("height") is not None:
        y += obj["height"] / 2
    return (x, y)


def top_left(center_x: float, center_y: float, width: float, height: float) -> tuple[float, float]:
    """Convert a center point to the top-left corner of a box of the given size."""
    return (center_x - width / 2, center_y - height / 2)


def contains(outer: Bounds, inner: Bounds) -> bool:
    """True if `inner` lies entirely within `outer` (edges may touch)."""
    return (
        inner[0] >= outer[0]
        and inner[1] >= outer[1]
        and inner[2] <= outer[2]
        and inner[3] <= outer[3]
    )


def intersects(a: Bounds, b: Bounds) -> bool:
    """True if the two boxes overlap or touch."""
    return a[0] <= b[2] and b[0] <= a[2] and a[1] <= b[3] and b[1] <= a[3]


def union_bounds(boxes: list[Bounds]) -> Bounds:
    """Smallest box containing all of `boxes`."""
    return (
        min(b[0] for b in boxes),
        min(b[1] for b in boxes),
        max(b[2] for b in boxes),
        max(b[3] for b in boxes),
    )
