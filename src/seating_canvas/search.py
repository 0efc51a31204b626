"""Fuzzy search over guests and tables on the canvas."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .models import Event
from .store import EventStore

MIN_SCORE = 0.3
GROUP_WEIGHT = 0.8
PER_KIND_LIMIT = 5
TOTAL_LIMIT = 10


@dataclass(frozen=True)
class SearchResult:
    type: str  # "guest" or "table"
    id: str
    name: str
    subtitle: str
    x: float
    y: float
    score: float


def fuzzy_match(query: str, target: str) -> float:
    """Score in ``[0, 1]`` for how well ``query`` matches ``target``.

    Exact match scores 1.0 and a substring 0.9. Otherwise each query word
    that prefixes some target word counts, giving
    ``0.5 + 0.4 * matched / query_words``, or 0 with no matching word.
    """
    q = query.lower().strip()
    t = target.lower().strip()
    if not q:
        return 0.0
    if t == q:
        return 1.0
    if q in t:
        return 0.9

    query_parts = q.split()
    target_parts = t.split()
    matched = sum(1 for qp in query_parts if any(tp.startswith(qp) for tp in target_parts))
    if not matched:
        return 0.0
    return 0.5 + (matched / len(query_parts)) * 0.4


def search_canvas(event: Event, query: str) -> List[SearchResult]:
    """Best guest and table matches for ``query``, highest score first."""
    if not query.strip():
        return []

    tables = {t.id: t for t in event.tables}

    guest_results = []
    for guest in event.guests:
        score = fuzzy_match(query, guest.name)
        if guest.group:
            score = max(score, fuzzy_match(query, guest.group) * GROUP_WEIGHT)
        table = tables.get(guest.table_id) if guest.table_id else None
        if table is not None:
            x, y = table.center
        else:
            x, y = guest.canvas_position or (0.0, 0.0)
        guest_results.append(
            SearchResult(
                type="guest",
                id=guest.id,
                name=guest.name,
                subtitle=table.name if table else "Unassigned",
                x=x,
                y=y,
                score=score,
            )
        )

    table_results = []
    for table in event.tables:
        seated = sum(1 for g in event.guests if g.table_id == table.id)
        x, y = table.center
        table_results.append(
            SearchResult(
                type="table",
                id=table.id,
                name=table.name,
                subtitle=f"{seated}/{table.capacity} guests",
                x=x,
                y=y,
                score=fuzzy_match(query, table.name),
            )
        )

    def best(results: List[SearchResult]) -> List[SearchResult]:
        kept = [r for r in results if r.score > MIN_SCORE]
        return sorted(kept, key=lambda r: r.score, reverse=True)[:PER_KIND_LIMIT]

    combined = best(guest_results) + best(table_results)
    return sorted(combined, key=lambda r: r.score, reverse=True)[:TOTAL_LIMIT]


def navigate_to_result(
    store: EventStore, result: SearchResult, viewport_width: float, viewport_height: float
) -> None:
    """Center the viewport on ``result`` and select it."""
    zoom = store.view.zoom
    store.set_pan(viewport_width / 2 - result.x * zoom, viewport_height / 2 - result.y * zoom)
    if result.type == "table":
        store.select_table(result.id)
    else:
        store.select_guest(result.id)
