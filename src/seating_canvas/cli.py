"""Command line interface for SeatingCanvas."""
from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Sequence

from .csv_loader import load_event
from .floor_map import generate_floor_map
from .search import search_canvas
from .violations import detect_violations, summarize_violations, violations_for_table

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seating floor plan tools")
    parser.add_argument("--tables", required=True, type=Path, help="Path to tables.csv")
    parser.add_argument("--guests", required=True, type=Path, help="Path to guests.csv")
    parser.add_argument("--constraints", type=Path, help="Path to constraints.csv")
    parser.add_argument("--relationships", type=Path, help="Path to relationships.csv")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    v = sub.add_parser("violations", help="List constraint violations.")
    v.add_argument("--table", help="Only violations involving this table id.")
    v.add_argument("--out", type=Path, help="Write violations CSV.")
    v.add_argument("--strict", action="store_true",
                   help="Exit with status 1 when a required constraint is violated.")

    s = sub.add_parser("search", help="Find guests and tables by name.")
    s.add_argument("query")

    m = sub.add_parser("map", help="Write an interactive floor-plan HTML map.")
    m.add_argument("--out", type=Path, required=True, help="Output HTML path.")
    m.add_argument("--no-relationships", action="store_true",
                   help="Hide relationship edges.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by ``seating-canvas`` and ``python -m seating_canvas.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        event = load_event(args.tables, args.guests, args.constraints, args.relationships)
    except (ValueError, KeyError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.command == "violations":
        violations = detect_violations(event.guests, event.tables, event.constraints)
        if args.table:
            violations = violations_for_table(violations, args.table)
        for v in violations:
            print(f"[{v.priority.upper()}] {v.constraint_type} tables={','.join(v.table_ids)} "
                  f"guests={','.join(v.guest_ids)}: {v.description}")
        summary = summarize_violations(violations)
        print(f"[REPORT] total={summary['total']} required={summary['required']} "
              f"preferred={summary['preferred']}")
        if args.out:
            args.out.parent.mkdir(parents=True, exist_ok=True)
            with args.out.open("w", newline="") as f:
                w = csv.DictWriter(f, fieldnames=[
                    "constraint_id", "constraint_type", "priority", "description", "guest_ids", "table_ids"
                ])
                w.writeheader()
                for v in violations:
                    w.writerow({
                        "constraint_id": v.constraint_id,
                        "constraint_type": v.constraint_type,
                        "priority": v.priority,
                        "description": v.description,
                        "guest_ids": "|".join(v.guest_ids),
                        "table_ids": "|".join(v.table_ids),
                    })
        if args.strict and summary["required"]:
            return 1
        return 0

    if args.command == "search":
        for r in search_canvas(event, args.query):
            print(f"{r.type},{r.id},{r.name},{r.subtitle},{r.score:.2f}")
        return 0

    html = generate_floor_map(event, show_relationships=not args.no_relationships)
    args.out.parent.mkdir(parents=True, exist_ok=True)
    args.out.write_text(html, encoding="utf-8")
    logger.info("Wrote floor map to %s", args.out)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
