"""Tests for constraint violation detection."""
import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from seating_canvas.models import Constraint, Floating, Guest, Seated, Table
from seating_canvas.search import search_canvas
from seating_canvas.models import Event
from seating_canvas.violations import detect_violations, summarize_violations, violations_for_table


def guest(gid, first, last="", table=None):
    return Guest(id=gid, first_name=first, last_name=last, placement=Seated(table) if table else Floating(0, 0))


TABLES = [Table(id=t, name=t) for t in ("tableA", "tableB", "tableC")]


def test_together_across_tables():
    guests = [guest("g1", "Alice", "Anderson", "tableA"), guest("g2", "Bob", "Brown", "tableB")]
    constraint = Constraint(id="c1", type="must_sit_together", guest_ids=["g1", "g2"])
    violations = detect_violations(guests, TABLES, [constraint])
    assert len(violations) == 1
    v = violations[0]
    assert v.guest_ids == ("g1", "g2")
    assert v.table_ids == ("tableA", "tableB")
    assert v.constraint_id == "c1"
    assert v.priority == "required"
    assert v.description == "Alice Anderson, Bob Brown should be seated together"


def test_together_at_same_table_is_fine():
    guests = [guest("g1", "A", table="tableA"), guest("g2", "B", table="tableA")]
    constraint = Constraint(id="c1", type="same_table", guest_ids=["g1", "g2"])
    assert detect_violations(guests, TABLES, [constraint]) == []


def test_together_ignores_unseated_guests_but_lists_them():
    guests = [
        guest("g1", "A", table="tableA"),
        guest("g2", "B"),
        guest("g3", "C", table="tableB"),
    ]
    constraint = Constraint(id="c1", type="same_table", guest_ids=["g1", "g2", "g3"])
    violations = detect_violations(guests, TABLES, [constraint])
    assert len(violations) == 1
    assert violations[0].guest_ids == ("g1", "g2", "g3")
    assert violations[0].table_ids == ("tableA", "tableB")


def test_together_with_one_seated_guest_is_fine():
    guests = [guest("g1", "A", table="tableA"), guest("g2", "B")]
    constraint = Constraint(id="c1", type="must_sit_together", guest_ids=["g1", "g2"])
    assert detect_violations(guests, TABLES, [constraint]) == []


def test_apart_all_at_one_table():
    guests = [guest(g, g.upper(), table="tableA") for g in ("g1", "g2", "g3")]
    constraint = Constraint(id="c2", type="must_not_sit_together", guest_ids=["g1", "g2", "g3"])
    violations = detect_violations(guests, TABLES, [constraint])
    assert len(violations) == 1
    assert violations[0].guest_ids == ("g1", "g2", "g3")
    assert violations[0].table_ids == ("tableA",)
    assert violations[0].description == "G1 and G2 and G3 should not be seated together"


def test_apart_one_violation_per_table():
    guests = [
        guest("g1", "Alice", "Anderson", "tableA"),
        guest("g2", "Bob", "Brown", "tableB"),
        guest("g3", "Cara", "Cole", "tableA"),
        guest("g4", "Dev", "Dunn", "tableB"),
        guest("g5", "Eve", "Ernst", "tableC"),
    ]
    constraint = Constraint(
        id="c2", type="different_table", priority="preferred", guest_ids=["g1", "g2", "g3", "g4", "g5"]
    )
    violations = detect_violations(guests, TABLES, [constraint])
    assert [(v.table_ids, v.guest_ids) for v in violations] == [
        (("tableA",), ("g1", "g3")),
        (("tableB",), ("g2", "g4")),
    ]
    assert violations[0].description == "Alice Anderson and Cara Cole should not be seated together"
    assert all(v.priority == "preferred" for v in violations)


def test_explicit_description_wins():
    guests = [guest("g1", "A", table="tableA"), guest("g2", "B", table="tableB")]
    constraint = Constraint(
        id="c1", type="must_sit_together", guest_ids=["g1", "g2"], description="Bride and Groom must sit together"
    )
    assert detect_violations(guests, TABLES, [constraint])[0].description == "Bride and Groom must sit together"


def test_unresolvable_ids_are_ignored():
    guests = [guest("g1", "A", table="tableA"), guest("g2", "B", table="tableB")]
    constraints = [
        Constraint(id="c1", type="must_sit_together", guest_ids=["g1", "ghost"]),
        Constraint(id="c2", type="must_not_sit_together", guest_ids=["ghost", "phantom"]),
        Constraint(id="c3", type="must_sit_together", guest_ids=["g1"]),
    ]
    assert detect_violations(guests, TABLES, constraints) == []
    assert detect_violations([], TABLES, constraints) == []


def test_spatial_constraints_are_not_reported():
    guests = [guest("g1", "A", table="tableA"), guest("g2", "B", table="tableB")]
    constraints = [
        Constraint(id="c1", type="near_front", guest_ids=["g1", "g2"]),
        Constraint(id="c2", type="accessibility", guest_ids=["g1", "g2"]),
    ]
    assert detect_violations(guests, TABLES, constraints) == []


def test_order_follows_constraints():
    guests = [guest("g1", "A", table="tableA"), guest("g2", "B", table="tableB"), guest("g3", "C", table="tableB")]
    constraints = [
        Constraint(id="c1", type="different_table", guest_ids=["g2", "g3"]),
        Constraint(id="c2", type="same_table", guest_ids=["g1", "g2"]),
    ]
    assert [v.constraint_id for v in detect_violations(guests, TABLES, constraints)] == ["c1", "c2"]


def test_detection_is_repeatable_and_unaffected_by_search():
    guests = [guest("g1", "Alice", table="tableA"), guest("g2", "Bob", table="tableB")]
    constraints = [Constraint(id="c1", type="must_sit_together", guest_ids=["g1", "g2"])]
    first = detect_violations(guests, TABLES, constraints)
    search_canvas(Event(id="e", tables=TABLES, guests=guests, constraints=constraints), "alice")
    second = detect_violations(guests, TABLES, constraints)
    assert first == second


def test_filter_and_summary():
    guests = [
        guest("g1", "A", table="tableA"),
        guest("g2", "B", table="tableB"),
        guest("g3", "C", table="tableC"),
        guest("g4", "D", table="tableC"),
    ]
    constraints = [
        Constraint(id="c1", type="must_sit_together", guest_ids=["g1", "g2"]),
        Constraint(id="c2", type="must_not_sit_together", priority="preferred", guest_ids=["g3", "g4"]),
    ]
    violations = detect_violations(guests, TABLES, constraints)
    assert [v.constraint_id for v in violations_for_table(violations, "tableB")] == ["c1"]
    assert [v.constraint_id for v in violations_for_table(violations, "tableC")] == ["c2"]
    assert summarize_violations(violations) == {"total": 2, "required": 1, "preferred": 1}
