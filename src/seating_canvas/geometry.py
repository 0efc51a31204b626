"""Pure geometry helpers for the floor plan.

All coordinates are canvas units. Tables are positioned by their top-left
corner, so centers are derived from ``x + width / 2``.
"""
from __future__ import annotations

import math
from typing import Iterable, List, Optional, Tuple

from .config import ALIGNMENT_THRESHOLD, GUIDE_PADDING, SNAP_THRESHOLD
from .models import AlignmentGuide, Table

Point = Tuple[float, float]


def snap_to_grid(value: float, grid_size: float, enabled: bool = True) -> float:
    """Round ``value`` to the nearest multiple of ``grid_size`` when enabled."""
    if not enabled:
        return value
    return math.floor(value / grid_size + 0.5) * grid_size


def distance_to_table(point: Point, table: Table) -> float:
    """Distance from ``point`` to the table outline. Zero or less means inside.

    Round tables use the true circle distance. Every other shape uses the
    bounding box, exact for rectangles and close enough for ovals and
    serpentines.
    """
    x, y = point
    cx, cy = table.center
    if table.shape == "round":
        return math.hypot(x - cx, y - cy) - table.width / 2
    dx = max(abs(x - cx) - table.width / 2, 0.0)
    dy = max(abs(y - cy) - table.height / 2, 0.0)
    return math.hypot(dx, dy)


def find_nearby_table(
    point: Point, tables: Iterable[Table], threshold: float = SNAP_THRESHOLD
) -> Optional[Table]:
    """Return the first table closer than ``threshold``.

    First match in iteration order wins, not the nearest table. When two
    snap zones overlap the earlier table takes the guest.
    """
    for table in tables:
        if distance_to_table(point, table) < threshold:
            return table
    return None


def _horizontal_guide(position: float, moving: Tuple[float, float], other: Table) -> AlignmentGuide:
    left, right = moving
    return AlignmentGuide(
        type="horizontal",
        position=position,
        start=min(left, other.x) - GUIDE_PADDING,
        end=max(right, other.x + other.width) + GUIDE_PADDING,
    )


def _vertical_guide(position: float, moving: Tuple[float, float], other: Table) -> AlignmentGuide:
    top, bottom = moving
    return AlignmentGuide(
        type="vertical",
        position=position,
        start=min(top, other.y) - GUIDE_PADDING,
        end=max(bottom, other.y + other.height) + GUIDE_PADDING,
    )


def find_alignment_guides(
    moving_table: Table,
    new_x: float,
    new_y: float,
    other_tables: Iterable[Table],
    threshold: float = ALIGNMENT_THRESHOLD,
) -> List[AlignmentGuide]:
    """Guides for ``moving_table`` placed at ``(new_x, new_y)``.

    Centers and matching edges are compared per axis against every other
    table. Each pair within ``threshold`` yields one guide positioned on the
    other table, so several guides may fire for one neighbour. Guides are
    not deduplicated.
    """
    guides: List[AlignmentGuide] = []
    left, right = new_x, new_x + moving_table.width
    top, bottom = new_y, new_y + moving_table.height
    center_x = new_x + moving_table.width / 2
    center_y = new_y + moving_table.height / 2

    for table in other_tables:
        if table.id == moving_table.id:
            continue
        other_cx, other_cy = table.center

        # horizontal guides: centers, tops, bottoms
        for mine, theirs in (
            (center_y, other_cy),
            (top, table.y),
            (bottom, table.y + table.height),
        ):
            if abs(mine - theirs) < threshold:
                guides.append(_horizontal_guide(theirs, (left, right), table))

        # vertical guides: centers, lefts, rights
        for mine, theirs in (
            (center_x, other_cx),
            (left, table.x),
            (right, table.x + table.width),
        ):
            if abs(mine - theirs) < threshold:
                guides.append(_vertical_guide(theirs, (top, bottom), table))

    return guides


def screen_delta_to_canvas(dx: float, dy: float, zoom: float) -> Point:
    """Scale a screen-space drag delta into canvas units."""
    return dx / zoom, dy / zoom


def screen_to_canvas(point: Point, zoom: float, pan_x: float, pan_y: float) -> Point:
    return (point[0] - pan_x) / zoom, (point[1] - pan_y) / zoom


def canvas_to_screen(point: Point, zoom: float, pan_x: float, pan_y: float) -> Point:
    return point[0] * zoom + pan_x, point[1] * zoom + pan_y


def seat_position(table: Table, seat_index: int, seat_count: int, margin: float = 20) -> Point:
    """Point on a ring around ``table`` where seat ``seat_index`` is drawn.

    Seats start at the top and go clockwise. The ring follows the table's
    half width and half height, so round tables get a circle.
    """
    cx, cy = table.center
    n = max(1, seat_count)
    theta = 2 * math.pi * (seat_index % n) / n - math.pi / 2
    return (
        cx + (table.width / 2 + margin) * math.cos(theta),
        cy + (table.height / 2 + margin) * math.sin(theta),
    )
