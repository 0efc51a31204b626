"""CSV loading utilities."""
from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import IO, Any, List, Optional

import pandas as pd

from .models import (
    Constraint,
    Event,
    Floating,
    Guest,
    Relationship,
    Seated,
    Table,
    Unplaced,
    parse_pipe_list,
    strength_for_type,
    table_defaults,
)

logger = logging.getLogger(__name__)

Source = Path | str | IO[Any]


def _cell(row: pd.Series, key: str, default: Any = None) -> Any:
    """Row value with blanks and ``NaN`` mapped to ``default``."""
    value = row.get(key, default)
    if value is None:
        return default
    if isinstance(value, float) and math.isnan(value):
        return default
    if isinstance(value, str) and not value.strip():
        return default
    return value


def load_tables(path: Source) -> List[Table]:
    """Load tables. Missing sizes and capacity fall back to the shape defaults."""
    df = pd.read_csv(path, dtype={"id": str})
    tables: List[Table] = []
    for _, row in df.iterrows():
        shape = str(_cell(row, "shape", "round")).strip()
        width, height, capacity = table_defaults(shape)
        tables.append(
            Table(
                id=str(row["id"]).strip(),
                name=str(_cell(row, "name", f"Table {len(tables) + 1}")),
                shape=shape,
                x=float(_cell(row, "x", 0.0)),
                y=float(_cell(row, "y", 0.0)),
                width=float(_cell(row, "width", width)),
                height=float(_cell(row, "height", height)),
                capacity=int(_cell(row, "capacity", capacity)),
            )
        )
    return tables


def load_guests(path: Source, table_ids: Optional[set[str]] = None) -> List[Guest]:
    """Load guests from ``guests.csv``.

    A guest row may name a ``table_id`` or give ``canvas_x``/``canvas_y``,
    never both. If ``table_ids`` is provided every seated guest must
    reference one of them.
    """
    df = pd.read_csv(path, dtype={"id": str, "table_id": str})
    guests: List[Guest] = []
    for _, row in df.iterrows():
        gid = str(row["id"]).strip()
        table_id = _cell(row, "table_id")
        cx, cy = _cell(row, "canvas_x"), _cell(row, "canvas_y")
        if table_id is not None and (cx is not None or cy is not None):
            raise ValueError(f"Guest {gid} has both a table and canvas coordinates")
        if table_id is not None:
            table_id = str(table_id).strip()
            if table_ids is not None and table_id not in table_ids:
                raise ValueError(f"Guest {gid} references unknown table: {table_id}")
            seat = _cell(row, "seat_index")
            placement = Seated(table_id, int(seat) if seat is not None else None)
        elif cx is not None and cy is not None:
            placement = Floating(float(cx), float(cy))
        else:
            placement = Unplaced()
        guests.append(
            Guest(
                id=gid,
                first_name=str(_cell(row, "first_name", "Unknown")),
                last_name=str(_cell(row, "last_name", "")),
                rsvp_status=str(_cell(row, "rsvp_status", "pending")),
                group=str(_cell(row, "group", "")),
                placement=placement,
            )
        )
    return guests


def load_relationships(path: Source, guests: List[Guest]) -> None:
    """Attach directed relationships from ``relationships.csv`` onto ``guests``.

    Both endpoints must exist. Blank strength uses the type's default.
    """
    df = pd.read_csv(path, dtype={"guest_id": str, "target_id": str})
    by_id = {g.id: g for g in guests}
    for _, row in df.iterrows():
        a = str(row["guest_id"]).strip()
        b = str(row["target_id"]).strip()
        if a not in by_id or b not in by_id:
            raise ValueError(f"Relationship references unknown guest: {a}, {b}")
        relation = str(row["relationship"]).strip()
        strength = _cell(row, "strength")
        by_id[a].relationships.append(
            Relationship(
                target_id=b,
                relation=relation,
                strength=int(strength) if strength is not None else strength_for_type(relation),
            )
        )


def load_constraints(path: Source) -> List[Constraint]:
    df = pd.read_csv(path, dtype={"id": str})
    constraints: List[Constraint] = []
    for _, row in df.iterrows():
        constraints.append(
            Constraint(
                id=str(row["id"]).strip(),
                type=str(row["type"]).strip(),
                guest_ids=parse_pipe_list(row.get("guest_ids", "")),
                priority=str(_cell(row, "priority", "required")),
                description=str(_cell(row, "description", "")),
            )
        )
    return constraints


def load_event(
    tables_path: Source,
    guests_path: Source,
    constraints_path: Optional[Source] = None,
    relationships_path: Optional[Source] = None,
    name: str = "My Event",
) -> Event:
    """Convenience wrapper building a full :class:`Event` from CSV files."""
    tables = load_tables(tables_path)
    guests = load_guests(guests_path, {t.id for t in tables})
    if relationships_path is not None:
        load_relationships(relationships_path, guests)
    constraints = load_constraints(constraints_path) if constraints_path is not None else []
    logger.info(
        "Loaded %d tables, %d guests, %d constraints", len(tables), len(guests), len(constraints)
    )
    return Event(id=name, name=name, tables=tables, guests=guests, constraints=constraints)
