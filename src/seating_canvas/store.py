"""Event store: the single owner of placement state.

Every mutation of tables, guests and constraints goes through
:class:`EventStore`. UI layers and the drag engine hold a reference to the
store rather than their own copy of the data.
"""
from __future__ import annotations

import copy
import dataclasses
import json
import logging
import uuid
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .config import (
    DEFAULT_GUEST_X,
    DEFAULT_GUEST_Y,
    GUEST_ROW_HEIGHT,
    MAX_HISTORY_SIZE,
    CanvasPreferences,
    clamp_zoom,
)
from .models import (
    AlignmentGuide,
    CanvasView,
    Constraint,
    ConstraintViolation,
    Event,
    Floating,
    Guest,
    Relationship,
    Seated,
    Table,
    Unplaced,
    VenueElement,
    placement_from_dict,
    placement_to_dict,
    strength_for_type,
    table_defaults,
    venue_element_defaults,
)
from .violations import detect_violations, violations_for_table

logger = logging.getLogger(__name__)

# Receives the event, returns guest id -> table id plus a score.
Optimizer = Callable[[Event], Tuple[Dict[str, str], float]]


def _new_id() -> str:
    return str(uuid.uuid4())


def _apply_updates(obj: Any, updates: Mapping[str, Any], locked: Tuple[str, ...], kind: str) -> None:
    """Write ``updates`` onto ``obj`` only if the updated record is valid."""
    names = {f.name for f in dataclasses.fields(obj)}
    for key in updates:
        if key in locked or key not in names:
            raise ValueError(f"Cannot update {kind} field: {key}")
    # replace() re-runs __post_init__, so a bad value never reaches obj
    candidate = dataclasses.replace(obj, **updates)
    for key in updates:
        setattr(obj, key, getattr(candidate, key))


class EventStore:
    """Mutable seating state plus canvas view, preferences and history."""

    def __init__(
        self,
        event: Optional[Event] = None,
        preferences: Optional[CanvasPreferences] = None,
    ) -> None:
        self.event = event or Event(id=_new_id())
        self.view = CanvasView()
        self.preferences = preferences or CanvasPreferences()
        # Live only while a table is dragged
        self.alignment_guides: List[AlignmentGuide] = []
        self._undo: List[Tuple[str, Event]] = []
        self._redo: List[Tuple[str, Event]] = []

    # ----------------------------- lookups -----------------------------
    def get_table(self, table_id: str) -> Optional[Table]:
        return self.event.table(table_id)

    def get_guest(self, guest_id: str) -> Optional[Guest]:
        return self.event.guest(guest_id)

    def guests_at_table(self, table_id: str) -> List[Guest]:
        return [g for g in self.event.guests if g.table_id == table_id]

    def unassigned_guests(self) -> List[Guest]:
        return [g for g in self.event.guests if not g.table_id]

    def is_over_capacity(self, table_id: str) -> bool:
        table = self.get_table(table_id)
        if table is None:
            return False
        return len(self.guests_at_table(table_id)) > table.capacity

    def default_guest_position(self, exclude_id: Optional[str] = None) -> Tuple[float, float]:
        """Next slot in the stacked column of guests without a table."""
        count = sum(1 for g in self.unassigned_guests() if g.id != exclude_id)
        return DEFAULT_GUEST_X, DEFAULT_GUEST_Y + count * GUEST_ROW_HEIGHT

    # ----------------------------- tables -----------------------------
    def add_table(self, shape: str, x: float, y: float) -> Table:
        width, height, capacity = table_defaults(shape)
        table = Table(
            id=_new_id(),
            name=f"Table {len(self.event.tables) + 1}",
            shape=shape,
            x=x,
            y=y,
            width=width,
            height=height,
            capacity=capacity,
        )
        self.event.tables.append(table)
        logger.debug("Added %s table %s at (%s, %s)", shape, table.id, x, y)
        return table

    def update_table(self, table_id: str, **updates: Any) -> None:
        table = self.get_table(table_id)
        if table is None:
            logger.debug("update_table: unknown table %s", table_id)
            return
        _apply_updates(table, updates, ("id",), "table")

    def move_table(self, table_id: str, x: float, y: float) -> None:
        table = self.get_table(table_id)
        if table is None:
            logger.debug("move_table: unknown table %s", table_id)
            return
        table.x, table.y = x, y

    def remove_table(self, table_id: str) -> None:
        """Delete a table. Guests seated there become unplaced, not deleted."""
        self.event.tables = [t for t in self.event.tables if t.id != table_id]
        cleared = 0
        for guest in self.event.guests:
            if guest.table_id == table_id:
                guest.placement = Unplaced()
                cleared += 1
        if self.view.selected_table_id == table_id:
            self.view.selected_table_id = None
        logger.debug("Removed table %s, %d guests unplaced", table_id, cleared)

    # ----------------------------- venue elements -----------------------------
    def add_venue_element(self, element_type: str, x: float, y: float) -> VenueElement:
        width, height, label = venue_element_defaults(element_type)
        element = VenueElement(
            id=_new_id(), type=element_type, label=label, x=x, y=y, width=width, height=height
        )
        self.event.venue_elements.append(element)
        return element

    def update_venue_element(self, element_id: str, **updates: Any) -> None:
        for element in self.event.venue_elements:
            if element.id == element_id:
                _apply_updates(element, updates, ("id",), "venue element")

    def move_venue_element(self, element_id: str, x: float, y: float) -> None:
        self.update_venue_element(element_id, x=x, y=y)

    def remove_venue_element(self, element_id: str) -> None:
        self.event.venue_elements = [e for e in self.event.venue_elements if e.id != element_id]
        if self.view.selected_venue_element_id == element_id:
            self.view.selected_venue_element_id = None

    # ----------------------------- guests -----------------------------
    def add_guest(
        self,
        first_name: str,
        last_name: str = "",
        group: str = "",
        rsvp_status: str = "pending",
    ) -> Guest:
        """Add a guest floating in the stacked column."""
        x, y = self.default_guest_position()
        guest = Guest(
            id=_new_id(),
            first_name=first_name,
            last_name=last_name,
            group=group,
            rsvp_status=rsvp_status,
            placement=Floating(x, y),
        )
        self.event.guests.append(guest)
        logger.debug("Added guest %s (%s)", guest.id, guest.name)
        return guest

    def add_quick_guest(self, x: float, y: float) -> str:
        """Drop a placeholder guest at ``(x, y)`` and select it."""
        guest = Guest(
            id=_new_id(),
            first_name=f"Guest {len(self.event.guests) + 1}",
            placement=Floating(x, y),
        )
        self.event.guests.append(guest)
        self.select_guest(guest.id)
        return guest.id

    def update_guest(self, guest_id: str, **updates: Any) -> None:
        guest = self.get_guest(guest_id)
        if guest is None:
            logger.debug("update_guest: unknown guest %s", guest_id)
            return
        _apply_updates(guest, updates, ("id", "placement", "relationships"), "guest")

    def import_guests(self, records: Iterable[Mapping[str, Any]]) -> List[Guest]:
        """Append guests from plain dicts. Missing names become ``Unknown``."""
        added = []
        for record in records:
            guest = Guest(
                id=str(record.get("id") or _new_id()),
                first_name=record.get("first_name") or "Unknown",
                last_name=record.get("last_name", ""),
                group=record.get("group", ""),
                rsvp_status=record.get("rsvp_status", "pending"),
            )
            self.event.guests.append(guest)
            added.append(guest)
        logger.debug("Imported %d guests", len(added))
        return added

    def remove_guest(self, guest_id: str) -> None:
        """Delete a guest and every relationship edge pointing at it."""
        self.event.guests = [g for g in self.event.guests if g.id != guest_id]
        for guest in self.event.guests:
            guest.relationships = [r for r in guest.relationships if r.target_id != guest_id]
        if self.view.selected_guest_id == guest_id:
            self.view.selected_guest_id = None

    def assign_guest_to_table(
        self, guest_id: str, table_id: Optional[str], seat_index: Optional[int] = None
    ) -> None:
        """Seat a guest. ``table_id=None`` leaves the guest unplaced."""
        guest = self.get_guest(guest_id)
        if guest is None:
            logger.debug("assign_guest_to_table: unknown guest %s", guest_id)
            return
        if table_id is None:
            guest.placement = Unplaced()
        else:
            guest.placement = Seated(table_id, seat_index)
        logger.debug("Guest %s placement -> %s", guest_id, guest.placement)

    def move_guest_on_canvas(self, guest_id: str, x: float, y: float) -> None:
        guest = self.get_guest(guest_id)
        if guest is None:
            logger.debug("move_guest_on_canvas: unknown guest %s", guest_id)
            return
        if guest.table_id:
            logger.debug("Guest %s leaves table %s by canvas move", guest_id, guest.table_id)
        guest.placement = Floating(x, y)

    def detach_guest_from_table(self, guest_id: str, x: float, y: float) -> None:
        """Take a seated guest off its table and leave it floating at ``(x, y)``."""
        guest = self.get_guest(guest_id)
        if guest is None:
            logger.debug("detach_guest_from_table: unknown guest %s", guest_id)
            return
        guest.placement = Floating(x, y)

    # ----------------------------- relationships -----------------------------
    def add_relationship(
        self, guest_id: str, target_id: str, relation: str, strength: Optional[int] = None
    ) -> None:
        """Set the edge ``guest_id -> target_id``, replacing any existing one in place."""
        guest = self.get_guest(guest_id)
        if guest is None:
            logger.debug("add_relationship: unknown guest %s", guest_id)
            return
        if strength is None:
            strength = strength_for_type(relation)
        edge = Relationship(target_id=target_id, relation=relation, strength=strength)
        for i, existing in enumerate(guest.relationships):
            if existing.target_id == target_id:
                guest.relationships[i] = edge
                return
        guest.relationships.append(edge)

    def remove_relationship(self, guest_id: str, target_id: str) -> None:
        guest = self.get_guest(guest_id)
        if guest is None:
            return
        guest.relationships = [r for r in guest.relationships if r.target_id != target_id]

    # ----------------------------- constraints -----------------------------
    def add_constraint(
        self,
        type: str,
        guest_ids: List[str],
        priority: str = "required",
        description: str = "",
    ) -> Constraint:
        constraint = Constraint(
            id=_new_id(),
            type=type,
            guest_ids=list(guest_ids),
            priority=priority,
            description=description,
        )
        self.event.constraints.append(constraint)
        return constraint

    def remove_constraint(self, constraint_id: str) -> None:
        self.event.constraints = [c for c in self.event.constraints if c.id != constraint_id]

    def get_violations(self) -> List[ConstraintViolation]:
        return detect_violations(self.event.guests, self.event.tables, self.event.constraints)

    def get_violations_for_table(self, table_id: str) -> List[ConstraintViolation]:
        return violations_for_table(self.get_violations(), table_id)

    # ----------------------------- canvas view -----------------------------
    def set_zoom(self, zoom: float) -> None:
        self.view.zoom = clamp_zoom(zoom)

    def set_pan(self, pan_x: float, pan_y: float) -> None:
        self.view.pan_x, self.view.pan_y = pan_x, pan_y

    def select_table(self, table_id: Optional[str]) -> None:
        self.view.selected_table_id = table_id
        self.view.selected_guest_id = None
        self.view.selected_venue_element_id = None

    def select_guest(self, guest_id: Optional[str]) -> None:
        self.view.selected_guest_id = guest_id
        self.view.selected_table_id = None
        self.view.selected_venue_element_id = None

    def select_venue_element(self, element_id: Optional[str]) -> None:
        self.view.selected_venue_element_id = element_id
        self.view.selected_table_id = None
        self.view.selected_guest_id = None

    # ----------------------------- preferences -----------------------------
    def toggle_grid(self) -> None:
        self.preferences.show_grid = not self.preferences.show_grid

    def toggle_snap_to_grid(self) -> None:
        self.preferences.snap_to_grid = not self.preferences.snap_to_grid

    def set_grid_size(self, size: int) -> None:
        self.preferences = CanvasPreferences(
            show_grid=self.preferences.show_grid,
            snap_to_grid=self.preferences.snap_to_grid,
            grid_size=size,
            show_alignment_guides=self.preferences.show_alignment_guides,
        )

    def toggle_alignment_guides(self) -> None:
        self.preferences.show_alignment_guides = not self.preferences.show_alignment_guides

    def set_alignment_guides(self, guides: List[AlignmentGuide]) -> None:
        self.alignment_guides = list(guides)

    def clear_alignment_guides(self) -> None:
        self.alignment_guides = []

    # ----------------------------- history -----------------------------
    def push_history(self, description: str) -> None:
        """Checkpoint the event before a change so it can be undone."""
        self._undo.append((description, copy.deepcopy(self.event)))
        if len(self._undo) > MAX_HISTORY_SIZE:
            self._undo.pop(0)
        self._redo.clear()
        logger.debug("History checkpoint: %s", description)

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> None:
        if not self._undo:
            return
        description, snapshot = self._undo.pop()
        self._redo.append((description, copy.deepcopy(self.event)))
        self.event = snapshot

    def redo(self) -> None:
        if not self._redo:
            return
        description, snapshot = self._redo.pop()
        self._undo.append((description, copy.deepcopy(self.event)))
        self.event = snapshot

    # ----------------------------- optimizer -----------------------------
    def apply_optimizer(self, optimizer: Optimizer) -> float:
        """Run an external optimizer and seat guests as it proposes."""
        assignments, score = optimizer(copy.deepcopy(self.event))
        self.push_history("Optimize seating")
        table_ids = {t.id for t in self.event.tables}
        for guest_id, table_id in assignments.items():
            if table_id not in table_ids:
                logger.debug("Optimizer proposed unknown table %s for %s", table_id, guest_id)
                continue
            self.assign_guest_to_table(guest_id, table_id)
        logger.info("Applied optimizer result: %d assignments, score %.2f", len(assignments), score)
        return score

    # ----------------------------- snapshots -----------------------------
    def export_event(self) -> str:
        return json.dumps(event_to_dict(self.event), indent=2)

    def import_event(self, text: str) -> bool:
        """Replace the event from JSON. Malformed input keeps the current event."""
        try:
            event = event_from_dict(json.loads(text))
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Failed to import event: %s", exc)
            return False
        self.event = event
        return True


def event_to_dict(event: Event) -> Dict[str, Any]:
    return {
        "id": event.id,
        "name": event.name,
        "type": event.type,
        "tables": [vars(t).copy() for t in event.tables],
        "guests": [
            {
                "id": g.id,
                "first_name": g.first_name,
                "last_name": g.last_name,
                "rsvp_status": g.rsvp_status,
                "group": g.group,
                "relationships": [vars(r).copy() for r in g.relationships],
                "placement": placement_to_dict(g.placement),
            }
            for g in event.guests
        ],
        "constraints": [vars(c).copy() for c in event.constraints],
        "venue_elements": [vars(e).copy() for e in event.venue_elements],
    }


def event_from_dict(data: Mapping[str, Any]) -> Event:
    tables = [Table(**t) for t in data.get("tables", [])]
    table_ids = {t.id for t in tables}
    guests = []
    for g in data.get("guests", []):
        guest = Guest(
            id=g["id"],
            first_name=g["first_name"],
            last_name=g.get("last_name", ""),
            rsvp_status=g.get("rsvp_status", "pending"),
            group=g.get("group", ""),
            relationships=[Relationship(**r) for r in g.get("relationships", [])],
            placement=placement_from_dict(g.get("placement", {})),
        )
        if guest.table_id is not None and guest.table_id not in table_ids:
            raise ValueError(f"Guest {guest.id} is seated at unknown table {guest.table_id}")
        guests.append(guest)
    return Event(
        id=data["id"],
        name=data.get("name", "My Event"),
        type=data.get("type", "wedding"),
        tables=tables,
        guests=guests,
        constraints=[Constraint(**c) for c in data.get("constraints", [])],
        venue_elements=[VenueElement(**e) for e in data.get("venue_elements", [])],
    )
