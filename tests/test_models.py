import pathlib
import sys

import pytest

# Ensure src package is on path
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from seating_canvas.models import (
    Constraint,
    Floating,
    Guest,
    Relationship,
    Seated,
    Table,
    Unplaced,
    VenueElement,
    parse_pipe_list,
    placement_from_dict,
    placement_to_dict,
    strength_for_type,
    table_defaults,
)


def test_guest_instantiation():
    guest = Guest(id="g1", first_name="Alex", last_name="Rivera", group="College")
    assert guest.name == "Alex Rivera"
    assert isinstance(guest.placement, Unplaced)
    assert guest.table_id is None
    assert guest.canvas_position is None


def test_guest_name_without_last_name():
    assert Guest(id="g1", first_name="Alex").name == "Alex"


def test_placement_accessors():
    seated = Guest(id="g1", first_name="A", placement=Seated("t1", 3))
    assert seated.table_id == "t1"
    assert seated.seat_index == 3
    assert seated.canvas_position is None

    floating = Guest(id="g2", first_name="B", placement=Floating(10.0, 20.0))
    assert floating.table_id is None
    assert floating.canvas_position == (10.0, 20.0)


def test_table_center_and_validation():
    table = Table(id="t1", name="Table 1", shape="rectangle", x=10, y=20, width=200, height=80)
    assert table.center == (110, 60)
    with pytest.raises(ValueError):
        Table(id="t2", name="Bad", width=0)
    with pytest.raises(ValueError):
        Table(id="t3", name="Bad", shape="triangle")


def test_fixture_tables_may_have_zero_capacity():
    width, height, capacity = table_defaults("serpentine")
    assert (width, height, capacity) == (300, 100, 0)
    Table(id="t1", name="Buffet", shape="serpentine", width=width, height=height, capacity=capacity)


def test_relationship_validation():
    assert Relationship("g2", "friend", 3).strength == 3
    with pytest.raises(ValueError):
        Relationship("g2", "enemy", 3)
    with pytest.raises(ValueError):
        Relationship("g2", "friend", 6)


def test_strength_by_type():
    assert strength_for_type("partner") == 5
    assert strength_for_type("family") == 4
    assert strength_for_type("friend") == 3
    assert strength_for_type("colleague") == 2
    assert strength_for_type("avoid") == 5


def test_constraint_needs_guests_and_known_type():
    with pytest.raises(ValueError):
        Constraint(id="c1", type="must_sit_together", guest_ids=[])
    with pytest.raises(ValueError):
        Constraint(id="c1", type="sit_near", guest_ids=["g1"])
    with pytest.raises(ValueError):
        Constraint(id="c1", type="same_table", guest_ids=["g1"], priority="urgent")


def test_placement_dict_round_trip():
    for placement in (Seated("t1", 2), Floating(1.5, 2.5), Unplaced()):
        assert placement_from_dict(placement_to_dict(placement)) == placement


def test_parse_pipe_list():
    assert parse_pipe_list("g1| g2 |") == ["g1", "g2"]
    assert parse_pipe_list(float("nan")) == []
    assert parse_pipe_list(None) == []


def test_guest_and_venue_element_validation():
    with pytest.raises(ValueError):
        Guest(id="g1", first_name="A", rsvp_status="maybe")
    assert VenueElement(id="v1", type="bar", label="Bar").type == "bar"
    with pytest.raises(ValueError):
        VenueElement(id="v2", type="fountain", label="Fountain")
