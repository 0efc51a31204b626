"""Canvas tuning constants and user preferences."""
from __future__ import annotations

from dataclasses import dataclass

# Canvas units
SNAP_THRESHOLD = 80
ALIGNMENT_THRESHOLD = 10
GUIDE_PADDING = 20
DRAG_ACTIVATION_DISTANCE = 5

MIN_ZOOM = 0.25
MAX_ZOOM = 2.0

MAX_HISTORY_SIZE = 50

# Column where guests without a table are stacked
DEFAULT_GUEST_X = 80
DEFAULT_GUEST_Y = 100
GUEST_ROW_HEIGHT = 70

GRID_SIZES = (20, 40, 60, 80)


@dataclass
class CanvasPreferences:
    """Per-user canvas toggles."""

    show_grid: bool = True
    snap_to_grid: bool = True
    grid_size: int = 40
    show_alignment_guides: bool = True

    def __post_init__(self) -> None:
        if self.grid_size not in GRID_SIZES:
            raise ValueError(f"Grid size must be one of {GRID_SIZES}, got {self.grid_size}")


def clamp_zoom(zoom: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))
