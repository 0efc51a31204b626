"""Constraint violation detection.

Violations are a pure projection of the current seating. They are never
stored, so callers simply recompute them whenever they need to render a
warning.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .models import Constraint, ConstraintViolation, Guest, Table

TOGETHER_TYPES = ("must_sit_together", "same_table")
APART_TYPES = ("must_not_sit_together", "different_table")


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def _together_violations(constraint: Constraint, guests: List[Guest]) -> List[ConstraintViolation]:
    seated = [g for g in guests if g.table_id]
    if len(seated) < 2:
        return []
    table_ids = _unique(g.table_id for g in seated)
    if len(table_ids) <= 1:
        return []
    description = constraint.description or (
        f"{', '.join(g.name for g in guests)} should be seated together"
    )
    return [
        ConstraintViolation(
            constraint_id=constraint.id,
            constraint_type=constraint.type,
            priority=constraint.priority,
            description=description,
            guest_ids=tuple(constraint.guest_ids),
            table_ids=tuple(table_ids),
        )
    ]


def _apart_violations(constraint: Constraint, guests: List[Guest]) -> List[ConstraintViolation]:
    by_table: Dict[str, List[Guest]] = {}
    for g in guests:
        if g.table_id:
            by_table.setdefault(g.table_id, []).append(g)

    out = []
    for table_id, members in by_table.items():
        if len(members) < 2:
            continue
        description = constraint.description or (
            f"{' and '.join(g.name for g in members)} should not be seated together"
        )
        out.append(
            ConstraintViolation(
                constraint_id=constraint.id,
                constraint_type=constraint.type,
                priority=constraint.priority,
                description=description,
                guest_ids=tuple(g.id for g in members),
                table_ids=(table_id,),
            )
        )
    return out


def detect_violations(
    guests: Sequence[Guest],
    tables: Sequence[Table],
    constraints: Sequence[Constraint],
) -> List[ConstraintViolation]:
    """Return every violation, ordered by constraint then guest order.

    Unknown guest ids are ignored and constraints with fewer than two
    resolvable guests are skipped. ``near_front`` and ``accessibility``
    constraints are accepted but never reported.
    """
    guest_map = {g.id: g for g in guests}
    violations: List[ConstraintViolation] = []
    for constraint in constraints:
        members = [guest_map[gid] for gid in constraint.guest_ids if gid in guest_map]
        if len(members) < 2:
            continue
        if constraint.type in TOGETHER_TYPES:
            violations.extend(_together_violations(constraint, members))
        elif constraint.type in APART_TYPES:
            violations.extend(_apart_violations(constraint, members))
    return violations


def violations_for_table(violations: Iterable[ConstraintViolation], table_id: str) -> List[ConstraintViolation]:
    return [v for v in violations if table_id in v.table_ids]


def summarize_violations(violations: Sequence[ConstraintViolation]) -> Dict[str, int]:
    """Counts by priority, used by the CLI report."""
    summary = {"total": len(violations), "required": 0, "preferred": 0}
    for v in violations:
        summary[v.priority] = summary.get(v.priority, 0) + 1
    return summary
