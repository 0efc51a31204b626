"""SeatingCanvas package."""
from .models import (
    AlignmentGuide,
    Constraint,
    ConstraintViolation,
    Event,
    Floating,
    Guest,
    Relationship,
    Seated,
    Table,
    Unplaced,
)
from .geometry import (
    distance_to_table,
    find_alignment_guides,
    find_nearby_table,
    snap_to_grid,
)
from .store import EventStore
from .violations import detect_violations, violations_for_table
from .interaction import (
    DragEngine,
    FloatingGuestDrag,
    SeatedGuestDrag,
    SidebarGuestDrag,
    TableDrag,
)
from .relationships import RelationshipMatrix, relationship_graph
from .search import fuzzy_match, navigate_to_result, search_canvas
from .csv_loader import load_event

__all__ = [
    "AlignmentGuide",
    "Constraint",
    "ConstraintViolation",
    "Event",
    "Floating",
    "Guest",
    "Relationship",
    "Seated",
    "Table",
    "Unplaced",
    "distance_to_table",
    "find_alignment_guides",
    "find_nearby_table",
    "snap_to_grid",
    "EventStore",
    "detect_violations",
    "violations_for_table",
    "DragEngine",
    "FloatingGuestDrag",
    "SeatedGuestDrag",
    "SidebarGuestDrag",
    "TableDrag",
    "RelationshipMatrix",
    "relationship_graph",
    "fuzzy_match",
    "navigate_to_result",
    "search_canvas",
    "load_event",
]
