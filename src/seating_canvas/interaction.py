"""Drag and drop engine for the floor plan.

The pointer layer reports a drag subject on pointer-down, the cumulative
screen-space delta on every move, and the drop target on pointer-up. The
engine converts deltas into canvas units, shows snap targets and alignment
guides while dragging, and commits the result to the :class:`EventStore`.

States::

    idle -> pending -> dragging_table | dragging_sidebar_guest
                       | dragging_floating_guest | dragging_seated_guest -> idle

A drag only starts once the pointer has travelled the activation distance.
Releasing before that is a click and changes nothing.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .config import ALIGNMENT_THRESHOLD, DRAG_ACTIVATION_DISTANCE, SNAP_THRESHOLD
from .geometry import (
    Point,
    find_alignment_guides,
    find_nearby_table,
    screen_delta_to_canvas,
    seat_position,
    snap_to_grid,
)
from .store import EventStore

logger = logging.getLogger(__name__)


# ----------------------------- drag subjects -----------------------------
@dataclass(frozen=True)
class TableDrag:
    table_id: str


@dataclass(frozen=True)
class SidebarGuestDrag:
    """Guest pulled from the guest list, not yet on the canvas."""

    guest_id: str


@dataclass(frozen=True)
class FloatingGuestDrag:
    guest_id: str


@dataclass(frozen=True)
class SeatedGuestDrag:
    """Guest pulled off a table. ``anchor`` is where it was drawn at drag start."""

    guest_id: str
    anchor: Optional[Point]

    @classmethod
    def for_guest(cls, store: EventStore, guest_id: str) -> "SeatedGuestDrag":
        """Anchor the drag on the guest's drawn seat around its table."""
        guest = store.get_guest(guest_id)
        table = store.get_table(guest.table_id) if guest and guest.table_id else None
        if table is None:
            return cls(guest_id, None)
        seated = store.guests_at_table(table.id)
        index = guest.seat_index
        if index is None:
            index = next(i for i, g in enumerate(seated) if g.id == guest_id)
        return cls(guest_id, seat_position(table, index, max(table.capacity, len(seated))))


DragPayload = Union[TableDrag, SidebarGuestDrag, FloatingGuestDrag, SeatedGuestDrag]

_STATE_BY_PAYLOAD = {
    TableDrag: "dragging_table",
    SidebarGuestDrag: "dragging_sidebar_guest",
    FloatingGuestDrag: "dragging_floating_guest",
    SeatedGuestDrag: "dragging_seated_guest",
}


# ----------------------------- engine -----------------------------
class DragEngine:
    """Drives a single drag at a time against an :class:`EventStore`."""

    def __init__(
        self,
        store: EventStore,
        snap_threshold: float = SNAP_THRESHOLD,
        alignment_threshold: float = ALIGNMENT_THRESHOLD,
        activation_distance: float = DRAG_ACTIVATION_DISTANCE,
    ) -> None:
        self.store = store
        self.snap_threshold = snap_threshold
        self.alignment_threshold = alignment_threshold
        self.activation_distance = activation_distance
        self.payload: Optional[DragPayload] = None
        self.active = False
        self.snap_target_id: Optional[str] = None
        self._delta: Tuple[float, float] = (0.0, 0.0)

    @property
    def state(self) -> str:
        if self.payload is None:
            return "idle"
        if not self.active:
            return "pending"
        return _STATE_BY_PAYLOAD[type(self.payload)]

    # ----------------------------- pointer events -----------------------------
    def pointer_down(self, payload: DragPayload) -> None:
        self._reset()
        self.payload = payload

    def pointer_move(self, dx: float, dy: float) -> None:
        """``dx``/``dy`` are the screen-space offsets since pointer-down."""
        if self.payload is None:
            return
        self._delta = (dx, dy)
        if not self.active:
            if math.hypot(dx, dy) < self.activation_distance:
                return
            self._start()
        self._update()

    def pointer_up(self, over_table_id: Optional[str] = None) -> bool:
        """Finish the drag. Returns ``True`` when something was committed."""
        try:
            if self.payload is None or not self.active:
                return False
            return self._commit(over_table_id)
        finally:
            self._reset()

    def cancel(self) -> None:
        self._reset()

    # ----------------------------- internals -----------------------------
    def _reset(self) -> None:
        self.payload = None
        self.active = False
        self.snap_target_id = None
        self._delta = (0.0, 0.0)
        self.store.clear_alignment_guides()

    def _start(self) -> None:
        self.active = True
        if isinstance(self.payload, TableDrag):
            # one undo step for the whole drag
            self.store.push_history("Move table")
        logger.debug("Drag started: %s", self.payload)

    def _canvas_delta(self) -> Point:
        return screen_delta_to_canvas(self._delta[0], self._delta[1], self.store.view.zoom)

    def _table_target(self) -> Optional[Point]:
        table = self.store.get_table(self.payload.table_id)
        if table is None:
            return None
        ddx, ddy = self._canvas_delta()
        return table.x + ddx, table.y + ddy

    def _guest_target(self) -> Optional[Point]:
        """Where a floating or seated guest would land right now."""
        payload = self.payload
        if isinstance(payload, FloatingGuestDrag):
            guest = self.store.get_guest(payload.guest_id)
            origin = guest.canvas_position if guest else None
        elif isinstance(payload, SeatedGuestDrag):
            origin = payload.anchor
        else:
            origin = None
        if origin is None:
            return None
        ddx, ddy = self._canvas_delta()
        return origin[0] + ddx, origin[1] + ddy

    def _update(self) -> None:
        if isinstance(self.payload, TableDrag):
            target = self._table_target()
            if target is None or not self.store.preferences.show_alignment_guides:
                return
            table = self.store.get_table(self.payload.table_id)
            guides = find_alignment_guides(
                table, target[0], target[1], self.store.event.tables, self.alignment_threshold
            )
            self.store.set_alignment_guides(guides)
        elif isinstance(self.payload, (FloatingGuestDrag, SeatedGuestDrag)):
            target = self._guest_target()
            if target is None:
                return
            nearby = find_nearby_table(target, self.store.event.tables, self.snap_threshold)
            self.snap_target_id = nearby.id if nearby else None

    def _commit(self, over_table_id: Optional[str]) -> bool:
        payload = self.payload
        store = self.store

        if isinstance(payload, TableDrag):
            target = self._table_target()
            if target is None:
                return False
            x, y = target
            prefs = store.preferences
            if prefs.snap_to_grid:
                x = snap_to_grid(x, prefs.grid_size, True)
                y = snap_to_grid(y, prefs.grid_size, True)
            store.move_table(payload.table_id, x, y)
            return True

        if isinstance(payload, SidebarGuestDrag):
            guest = store.get_guest(payload.guest_id)
            if guest is None:
                return False
            if over_table_id is not None and store.get_table(over_table_id) is not None:
                store.assign_guest_to_table(guest.id, over_table_id)
                return True
            if guest.canvas_position is None:
                x, y = store.default_guest_position(exclude_id=guest.id)
                store.move_guest_on_canvas(guest.id, x, y)
            return True

        target = self._guest_target()
        if target is None:
            logger.debug("Drop ignored, no anchor for %s", payload)
            return False
        nearby = find_nearby_table(target, store.event.tables, self.snap_threshold)

        if isinstance(payload, FloatingGuestDrag):
            if nearby is not None:
                store.assign_guest_to_table(payload.guest_id, nearby.id)
            else:
                store.move_guest_on_canvas(payload.guest_id, *target)
            return True

        # seated guest: reseat, or detach when no table is close
        if nearby is not None:
            store.assign_guest_to_table(payload.guest_id, nearby.id)
        else:
            store.detach_guest_from_table(payload.guest_id, *target)
        return True
