import io
import pathlib
import sys

import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from seating_canvas import csv_loader
from seating_canvas.models import Floating, Seated, Unplaced

DATA = pathlib.Path(__file__).parent / "data"


def test_load_tables_fills_shape_defaults():
    tables = csv_loader.load_tables(DATA / "tables.csv")
    head = tables[0]
    assert (head.id, head.name, head.shape) == ("t1", "Head Table", "rectangle")
    assert (head.width, head.height, head.capacity) == (200, 80, 10)
    assert tables[2].capacity == 6


def test_load_guests_placements():
    guests = csv_loader.load_guests(DATA / "guests.csv", {"t1", "t2", "t3"})
    by_id = {g.id: g for g in guests}
    assert by_id["g1"].placement == Seated("t1", 0)
    assert by_id["g2"].placement == Seated("t2", None)
    assert by_id["g5"].placement == Floating(900, 400)
    assert isinstance(by_id["g6"].placement, Unplaced)
    assert by_id["g3"].group == "College Friends"
    assert by_id["g6"].rsvp_status == "declined"


def test_guest_with_table_and_coordinates_is_rejected():
    csv_text = "id,first_name,table_id,canvas_x,canvas_y\ng1,Ann,t1,10,20\n"
    with pytest.raises(ValueError):
        csv_loader.load_guests(io.StringIO(csv_text))


def test_guest_with_unknown_table_is_rejected():
    csv_text = "id,first_name,table_id\ng1,Ann,t9\n"
    with pytest.raises(ValueError):
        csv_loader.load_guests(io.StringIO(csv_text), {"t1"})


def test_load_relationships():
    guests = csv_loader.load_guests(DATA / "guests.csv")
    csv_loader.load_relationships(DATA / "relationships.csv", guests)
    by_id = {g.id: g for g in guests}
    assert by_id["g1"].relationship_to("g2").strength == 5
    assert by_id["g3"].relationship_to("g4").relation == "avoid"
    assert by_id["g4"].relationships == []

    bad = io.StringIO("guest_id,target_id,relationship,strength\ng1,g99,friend,3\n")
    with pytest.raises(ValueError):
        csv_loader.load_relationships(bad, guests)


def test_load_constraints():
    constraints = csv_loader.load_constraints(DATA / "constraints.csv")
    assert [c.id for c in constraints] == ["c1", "c2", "c3"]
    assert constraints[0].guest_ids == ["g1", "g2"]
    assert constraints[0].description == ""
    assert constraints[1].priority == "preferred"
    assert constraints[1].description == "Keep Carol and David apart"


def test_load_event():
    event = csv_loader.load_event(
        DATA / "tables.csv", DATA / "guests.csv", DATA / "constraints.csv", DATA / "relationships.csv"
    )
    assert len(event.tables) == 3
    assert len(event.guests) == 6
    assert len(event.constraints) == 3
