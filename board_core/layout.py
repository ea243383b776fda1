"""
Arrangement algorithms for existing board objects.

Provides the strategies behind the `layout_objects` tool:
- Grid: rows of uniform cells anchored at the group's top-left corner
- Distribute: equal gaps between objects along one axis
- Align: shared edge or center line

Objects are stored dicts (top-left `x`/`y`). Nothing is mutated: every
function returns `{object_id: {field: value}}` updates for the caller to
apply through the object store.
"""

import math
from typing import Any, Optional

from .geometry import object_bounds, union_bounds

DEFAULT_GAP = 30

ALIGNMENTS = ("left", "center", "right", "top", "middle", "bottom")

Updates = dict[str, dict[str, float]]


def _size(obj: dict[str, Any]) -> tuple[float, float]:
    return (obj.get("width") or 0, obj.get("height") or 0)


def _pos(obj: dict[str, Any]) -> tuple[float, float]:
    return (obj.get("x") or 0, obj.get("y") or 0)


def grid_layout(
    objects: list[dict[str, Any]],
    cols: Optional[int] = None,
    gap: float = DEFAULT_GAP
) -> Updates:
    """
    Arrange objects in a grid, in the order given.

    Args:
        objects: Objects to arrange
        cols: Number of columns (ceil(sqrt(n)) if None)
        gap: Space between cells

    Returns:
        New top-left positions keyed by object id
    """
    if not objects:
        return {}

    if not cols or cols < 1:
        cols = math.ceil(math.sqrt(len(objects)))

    start_x, start_y, _, _ = union_bounds([object_bounds(o) for o in objects])
    cell_w = max(_size(o)[0] for o in objects)
    cell_h = max(_size(o)[1] for o in objects)

    updates: Updates = {}
    for i, obj in enumerate(objects):
        row = i // cols
        col = i % cols
        updates[obj["id"]] = {
            "x": start_x + col * (cell_w + gap),
            "y": start_y + row * (cell_h + gap),
        }
    return updates


def distribute_objects(objects: list[dict[str, Any]], axis: str = "horizontal") -> Updates:
    """
    Space objects so the gaps between neighbours are equal.

    The outermost objects stay put; the gap is the outer span minus the
    summed extents, split evenly.

    Raises:
        ValueError: Fewer than three objects, or an unknown axis
    """
    if axis not in ("horizontal", "vertical"):
        raise ValueError(f"Unknown axis: {axis}")
    if len(objects) < 3:
        raise ValueError("Distribute needs at least 3 objects")

    horizontal = axis == "horizontal"
    coord = 0 if horizontal else 1
    ordered = sorted(objects, key=lambda o: _pos(o)[coord])

    start = _pos(ordered[0])[coord]
    end = max(_pos(o)[coord] + _size(o)[coord] for o in ordered)
    total = sum(_size(o)[coord] for o in ordered)
    gap = (end - start - total) / (len(ordered) - 1)

    key = "x" if horizontal else "y"
    updates: Updates = {}
    cursor = start
    for obj in ordered:
        updates[obj["id"]] = {key: cursor}
        cursor += _size(obj)[coord] + gap
    return updates


def align_objects(objects: list[dict[str, Any]], alignment: str = "left") -> Updates:
    """
    Align objects along an edge or center line.

    Args:
        objects: Objects to align
        alignment: One of "left", "center", "right", "top", "middle", "bottom"

    Raises:
        ValueError: Fewer than two objects, or an unknown alignment
    """
    if alignment not in ALIGNMENTS:
        raise ValueError(f"Unknown alignment: {alignment}")
    if len(objects) < 2:
        raise ValueError("Align needs at least 2 objects")

    updates: Updates = {}

    if alignment == "left":
        min_x = min(_pos(o)[0] for o in objects)
        for o in objects:
            updates[o["id"]] = {"x": min_x}

    elif alignment == "right":
        max_x = max(_pos(o)[0] + _size(o)[0] for o in objects)
        for o in objects:
            updates[o["id"]] = {"x": max_x - _size(o)[0]}

    elif alignment == "top":
        min_y = min(_pos(o)[1] for o in objects)
        for o in objects:
            updates[o["id"]] = {"y": min_y}

    elif alignment == "bottom":
        max_y = max(_pos(o)[1] + _size(o)[1] for o in objects)
        for o in objects:
            updates[o["id"]] = {"y": max_y - _size(o)[1]}

    elif alignment == "center":
        center_x = sum(_pos(o)[0] + _size(o)[0] / 2 for o in objects) / len(objects)
        for o in objects:
            updates[o["id"]] = {"x": center_x - _size(o)[0] / 2}

    else:  # middle
        center_y = sum(_pos(o)[1] + _size(o)[1] / 2 for o in objects) / len(objects)
        for o in objects:
            updates[o["id"]] = {"y": center_y - _size(o)[1] / 2}

    return updates
