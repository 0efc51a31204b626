"""Data models for SeatingCanvas."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union
import math


TABLE_SHAPES = ("round", "rectangle", "square", "oval", "half-round", "serpentine")
RSVP_STATUSES = ("pending", "confirmed", "declined")
RELATIONSHIP_TYPES = ("partner", "family", "friend", "colleague", "avoid")
CONSTRAINT_TYPES = (
    "must_sit_together",
    "same_table",
    "must_not_sit_together",
    "different_table",
    "near_front",
    "accessibility",
)
CONSTRAINT_PRIORITIES = ("required", "preferred")
VENUE_ELEMENT_TYPES = (
    "dance-floor",
    "stage",
    "dj-booth",
    "bar",
    "buffet",
    "entrance",
    "exit",
    "photo-booth",
)

# Strength used when a relationship is set from the matrix.
# Avoid is high because it signals conflict severity.
STRENGTH_BY_TYPE = {
    "partner": 5,
    "family": 4,
    "friend": 3,
    "colleague": 2,
    "avoid": 5,
}

_TABLE_DEFAULTS = {
    "round": (120, 120, 8),
    "rectangle": (200, 80, 10),
    "square": (100, 100, 8),
    "oval": (180, 120, 10),
    "half-round": (160, 80, 5),
    "serpentine": (300, 100, 0),  # buffet style, no seats
}

_VENUE_ELEMENT_DEFAULTS = {
    "dance-floor": (200, 200, "Dance Floor"),
    "stage": (300, 100, "Stage"),
    "dj-booth": (100, 60, "DJ Booth"),
    "bar": (200, 60, "Bar"),
    "buffet": (240, 60, "Buffet"),
    "entrance": (80, 40, "Entrance"),
    "exit": (80, 40, "Exit"),
    "photo-booth": (120, 120, "Photo Booth"),
}


def parse_pipe_list(value: object) -> List[str]:
    """Split a pipe separated string into a list.

    Empty values such as ``""`` or ``None`` return an empty list.
    ``pandas`` often provides ``float('nan')`` for missing values which is
    also treated as empty.
    """
    if value is None:
        return []
    if isinstance(value, float) and math.isnan(value):
        return []
    text = str(value).strip()
    if not text or text.lower() == "nan":
        return []
    return [part.strip() for part in text.split("|") if part.strip()]


def table_defaults(shape: str) -> tuple[int, int, int]:
    """Return ``(width, height, capacity)`` for a table shape."""
    if shape not in _TABLE_DEFAULTS:
        raise ValueError(f"Unknown table shape: {shape}")
    return _TABLE_DEFAULTS[shape]


def venue_element_defaults(element_type: str) -> tuple[int, int, str]:
    """Return ``(width, height, label)`` for a venue element type."""
    if element_type not in _VENUE_ELEMENT_DEFAULTS:
        raise ValueError(f"Unknown venue element type: {element_type}")
    return _VENUE_ELEMENT_DEFAULTS[element_type]


def strength_for_type(relation: str) -> int:
    if relation not in STRENGTH_BY_TYPE:
        raise ValueError(f"Unknown relationship type: {relation}")
    return STRENGTH_BY_TYPE[relation]


# ----------------------------- placement -----------------------------
@dataclass(frozen=True)
class Seated:
    """Guest sits at a table, optionally in a given seat slot."""

    table_id: str
    seat_index: Optional[int] = None


@dataclass(frozen=True)
class Floating:
    """Guest floats on the canvas at free coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class Unplaced:
    """Guest has no drawable location yet."""


Placement = Union[Seated, Floating, Unplaced]


# ----------------------------- entities -----------------------------
@dataclass
class Table:
    """Table on the floor plan. ``x``/``y`` is the top-left corner."""

    id: str
    name: str
    shape: str = "round"
    x: float = 0.0
    y: float = 0.0
    width: float = 120.0
    height: float = 120.0
    capacity: int = 8

    def __post_init__(self) -> None:
        if self.shape not in TABLE_SHAPES:
            raise ValueError(f"Unknown table shape: {self.shape}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Table {self.id} needs a positive width and height")
        if self.capacity < 0:
            raise ValueError(f"Table {self.id} has negative capacity")

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


@dataclass
class Relationship:
    """Directed edge from the owning guest to ``target_id``."""

    target_id: str
    relation: str
    strength: int = 3

    def __post_init__(self) -> None:
        if self.relation not in RELATIONSHIP_TYPES:
            raise ValueError(f"Unknown relationship type: {self.relation}")
        if not 1 <= self.strength <= 5:
            raise ValueError(f"Relationship strength must be within 1..5, got {self.strength}")


@dataclass
class Guest:
    """Representation of an event guest."""

    id: str
    first_name: str
    last_name: str = ""
    rsvp_status: str = "pending"
    group: str = ""
    relationships: List[Relationship] = field(default_factory=list)
    placement: Placement = field(default_factory=Unplaced)

    def __post_init__(self) -> None:
        if self.rsvp_status not in RSVP_STATUSES:
            raise ValueError(f"Unknown RSVP status: {self.rsvp_status}")

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def table_id(self) -> Optional[str]:
        return self.placement.table_id if isinstance(self.placement, Seated) else None

    @property
    def seat_index(self) -> Optional[int]:
        return self.placement.seat_index if isinstance(self.placement, Seated) else None

    @property
    def canvas_position(self) -> Optional[tuple[float, float]]:
        if isinstance(self.placement, Floating):
            return self.placement.x, self.placement.y
        return None

    def relationship_to(self, target_id: str) -> Optional[Relationship]:
        return next((r for r in self.relationships if r.target_id == target_id), None)


@dataclass
class Constraint:
    """Seating rule over a set of guests."""

    id: str
    type: str
    guest_ids: List[str]
    priority: str = "required"
    description: str = ""

    def __post_init__(self) -> None:
        if self.type not in CONSTRAINT_TYPES:
            raise ValueError(f"Unknown constraint type: {self.type}")
        if self.priority not in CONSTRAINT_PRIORITIES:
            raise ValueError(f"Unknown constraint priority: {self.priority}")
        if not self.guest_ids:
            raise ValueError(f"Constraint {self.id} needs at least one guest")


@dataclass
class VenueElement:
    """Non-seating fixture such as a stage or bar."""

    id: str
    type: str
    label: str
    x: float = 0.0
    y: float = 0.0
    width: float = 100.0
    height: float = 100.0

    def __post_init__(self) -> None:
        if self.type not in VENUE_ELEMENT_TYPES:
            raise ValueError(f"Unknown venue element type: {self.type}")


@dataclass
class Event:
    """Everything placed on one floor plan."""

    id: str
    name: str = "My Event"
    type: str = "wedding"
    tables: List[Table] = field(default_factory=list)
    guests: List[Guest] = field(default_factory=list)
    constraints: List[Constraint] = field(default_factory=list)
    venue_elements: List[VenueElement] = field(default_factory=list)

    def table(self, table_id: str) -> Optional[Table]:
        return next((t for t in self.tables if t.id == table_id), None)

    def guest(self, guest_id: str) -> Optional[Guest]:
        return next((g for g in self.guests if g.id == guest_id), None)


# ----------------------------- derived -----------------------------
@dataclass(frozen=True)
class ConstraintViolation:
    """A mismatch between current seating and a constraint."""

    constraint_id: str
    constraint_type: str
    priority: str
    description: str
    guest_ids: tuple[str, ...]
    table_ids: tuple[str, ...]


@dataclass(frozen=True)
class AlignmentGuide:
    """Guide line shown while a table is being dragged."""

    type: str  # "horizontal" or "vertical"
    position: float
    start: float
    end: float


@dataclass
class CanvasView:
    """Zoom, pan and the single selected entity."""

    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0
    selected_table_id: Optional[str] = None
    selected_guest_id: Optional[str] = None
    selected_venue_element_id: Optional[str] = None


def placement_to_dict(placement: Placement) -> Dict[str, object]:
    if isinstance(placement, Seated):
        return {"kind": "seated", "table_id": placement.table_id, "seat_index": placement.seat_index}
    if isinstance(placement, Floating):
        return {"kind": "floating", "x": placement.x, "y": placement.y}
    return {"kind": "unplaced"}


def placement_from_dict(data: Dict[str, object]) -> Placement:
    kind = data.get("kind", "unplaced")
    if kind == "seated":
        return Seated(table_id=str(data["table_id"]), seat_index=data.get("seat_index"))
    if kind == "floating":
        return Floating(x=float(data["x"]), y=float(data["y"]))
    return Unplaced()
