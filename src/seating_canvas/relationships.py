"""Relationship matrix editing and graph views.

Edges live on each :class:`~seating_canvas.models.Guest` as directed
relationships. The matrix edits them cell by cell and, in bidirectional
mode, mirrors every edit onto the reverse edge.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import networkx as nx

from .models import Guest, strength_for_type
from .store import EventStore

# Short codes shown in matrix cells
RELATION_SHORT = {
    None: "-",
    "partner": "P",
    "family": "F",
    "friend": "+",
    "colleague": "C",
    "avoid": "X",
}


class RelationshipMatrix:
    """Grid of guest pairs backed by an :class:`EventStore`."""

    def __init__(self, store: EventStore, bidirectional: bool = True) -> None:
        self.store = store
        self.bidirectional = bidirectional

    def rows(self) -> List[Guest]:
        """Guests shown in the matrix. Declined guests are hidden."""
        return [g for g in self.store.event.guests if g.rsvp_status != "declined"]

    def get(self, from_id: str, to_id: str) -> Optional[str]:
        guest = self.store.get_guest(from_id)
        if guest is None:
            return None
        rel = guest.relationship_to(to_id)
        return rel.relation if rel else None

    def set(self, from_id: str, to_id: str, relation: Optional[str]) -> None:
        """Set or clear a cell. ``relation=None`` removes the edge."""
        if from_id == to_id:
            return
        pairs = [(from_id, to_id)]
        if self.bidirectional:
            pairs.append((to_id, from_id))
        for a, b in pairs:
            if relation is None:
                self.store.remove_relationship(a, b)
            else:
                self.store.add_relationship(a, b, relation, strength_for_type(relation))

    def as_table(self) -> List[List[str]]:
        """Matrix of short codes, rows and columns in :meth:`rows` order."""
        guests = self.rows()
        out = []
        for a in guests:
            out.append(["" if a.id == b.id else RELATION_SHORT[self.get(a.id, b.id)] for b in guests])
        return out


def relationship_graph(guests: Iterable[Guest]) -> nx.DiGraph:
    """Directed graph with one node per guest and one edge per relationship.

    Edges pointing at guests not in ``guests`` are dropped.
    """
    guests = list(guests)
    G = nx.DiGraph()
    for g in guests:
        G.add_node(g.id, name=g.name, table_id=g.table_id)
    for g in guests:
        for r in g.relationships:
            if r.target_id in G:
                G.add_edge(g.id, r.target_id, relation=r.relation, strength=r.strength)
    return G


def mutual_pairs(G: nx.DiGraph) -> List[Tuple[str, str]]:
    """Pairs where both directions exist with the same type."""
    out = []
    for a, b, data in G.edges(data=True):
        if a < b and G.has_edge(b, a) and G[b][a]["relation"] == data["relation"]:
            out.append((a, b))
    return out


def asymmetric_pairs(G: nx.DiGraph) -> List[Tuple[str, str]]:
    """Edges whose reverse is missing or has a different type."""
    out = []
    for a, b, data in G.edges(data=True):
        if not G.has_edge(b, a) or G[b][a]["relation"] != data["relation"]:
            out.append((a, b))
    return out


def avoid_conflicts_at_table(G: nx.DiGraph, table_id: str) -> List[Tuple[str, str]]:
    """Avoid edges between two guests seated at ``table_id``."""
    seated = [n for n, t in G.nodes(data="table_id") if t == table_id]
    sub = G.subgraph(seated)
    return [(a, b) for a, b, rel in sub.edges(data="relation") if rel == "avoid"]


def social_clusters(G: nx.DiGraph) -> List[List[str]]:
    """Groups of guests connected by any non-avoid relationship, largest first."""
    friendly = nx.Graph()
    friendly.add_nodes_from(G.nodes)
    friendly.add_edges_from((a, b) for a, b, rel in G.edges(data="relation") if rel != "avoid")
    clusters = [sorted(c) for c in nx.connected_components(friendly)]
    return sorted(clusters, key=lambda c: (-len(c), c[0]))
