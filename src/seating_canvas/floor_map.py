"""Interactive floor-plan map rendered with pyvis."""
from __future__ import annotations

from typing import Dict, List, Tuple

import networkx as nx
from pyvis.network import Network

from .geometry import seat_position
from .models import Event
from .relationships import relationship_graph
from .violations import detect_violations

_EDGE_COLOR = {
    "partner": "#E91E63",
    "family": "#9C27B0",
    "friend": "#2196F3",
    "colleague": "#4CAF50",
    "avoid": "#F44336",
}
_TABLE_COLOR = "#CFCFC4"
_VIOLATION_BORDER = "#FF6B6B"


def generate_floor_map(event: Event, show_relationships: bool = True) -> str:
    """
    Build an interactive floor-plan view of ``event``.

    Tables sit at their canvas centers, seated guests on a ring around
    their table and floating guests at their own coordinates. Unplaced
    guests are left out. Tables involved in a violation get a red border.

    Returns:
      HTML string with embedded network.
    """
    positions = guest_positions(event)
    flagged = _violating_tables(event)

    G = nx.Graph()
    for table in event.tables:
        cx, cy = table.center
        seated = sum(1 for g in event.guests if g.table_id == table.id)
        G.add_node(
            f"table:{table.id}",
            label=table.name,
            title=_table_tooltip(table.name, table.shape, seated, table.capacity, flagged.get(table.id, [])),
            x=cx,
            y=cy,
            physics=False,
            shape="box" if table.shape != "round" else "circle",
            color={"background": _TABLE_COLOR, "border": _VIOLATION_BORDER if table.id in flagged else "#444444"},
            borderWidth=4 if table.id in flagged else 1,
        )

    for guest in event.guests:
        if guest.id not in positions:
            continue
        x, y = positions[guest.id]
        G.add_node(
            guest.id,
            label=guest.name,
            title=f"<b>{guest.name}</b><br>Group: {guest.group or 'n/a'}<br>RSVP: {guest.rsvp_status}",
            x=x,
            y=y,
            physics=False,
            shape="dot",
            size=12,
            color="#77DD77" if guest.table_id else "#FFB347",
        )

    if show_relationships:
        rel = relationship_graph(event.guests)
        for a, b, data in rel.edges(data=True):
            if a not in G or b not in G or G.has_edge(a, b):
                continue
            G.add_edge(
                a,
                b,
                color=_EDGE_COLOR[data["relation"]],
                width=1 + data["strength"],
                weight=1 + data["strength"],
                label=data["relation"],
            )

    net = Network(height="700px", width="100%", bgcolor="#111111", font_color="#EEEEEE")
    net.toggle_physics(False)  # positions are fixed
    net.from_nx(G)
    return _inject_legend_html(net.generate_html())


def guest_positions(event: Event) -> Dict[str, Tuple[float, float]]:
    """Drawn position of every seated or floating guest."""
    positions: Dict[str, Tuple[float, float]] = {}
    for table in event.tables:
        seated = [g for g in event.guests if g.table_id == table.id]
        count = max(table.capacity, len(seated))
        for i, guest in enumerate(seated):
            index = guest.seat_index if guest.seat_index is not None else i
            positions[guest.id] = seat_position(table, index, count)
    for guest in event.guests:
        if guest.canvas_position is not None:
            positions[guest.id] = guest.canvas_position
    return positions


def _violating_tables(event: Event) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for v in detect_violations(event.guests, event.tables, event.constraints):
        for table_id in v.table_ids:
            out.setdefault(table_id, []).append(v.description)
    return out


def _table_tooltip(name: str, shape: str, seated: int, capacity: int, problems: List[str]) -> str:
    lines = [f"<b>{name}</b>", f"Shape: {shape}", f"Seated: {seated}/{capacity}"]
    lines.extend(f"Violation: {p}" for p in problems)
    return "<br>".join(lines)


def _inject_legend_html(page: str) -> str:
    css = """
    <style>
    .legend-box{
      position:absolute;right:12px;bottom:12px;
      background:#222;color:#eee;border:1px solid #444;border-radius:8px;
      padding:8px 12px;font-family:system-ui, -apple-system, Segoe UI, Roboto, Arial;font-size:12px;
      z-index:10;
    }
    .legend-swatch{display:inline-block;width:12px;height:12px;margin-right:6px;vertical-align:middle;border:1px solid #444;}
    </style>
    """
    rows = "".join(
        f'<div><span class="legend-swatch" style="background:{color}"></span>{rel}</div>'
        for rel, color in _EDGE_COLOR.items()
    )
    html = f"""
    {css}
    <div class="legend-box">
      {rows}
      <div style="margin-top:6px;">green dot: seated, orange dot: floating</div>
      <div>red border: table with violations</div>
    </div>
    """
    if "</body>" not in page:
        return page + html
    return page.replace("</body>", html + "</body>", 1)
