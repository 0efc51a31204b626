import pathlib
import sys

import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from seating_canvas.search import fuzzy_match, navigate_to_result, search_canvas
from seating_canvas.store import EventStore


@pytest.mark.parametrize(
    "query,target,score",
    [
        ("Alice Johnson", " alice  johnson", 0.9),  # inner spacing differs, every word still prefixes
        (" ALICE JOHNSON ", "alice johnson", 1.0),
        ("ali", "Alice Johnson", 0.9),
        ("al jo", "Alice Johnson", 0.9),
        ("al xy", "Alice Johnson", 0.7),
        ("zz", "Alice Johnson", 0.0),
        ("", "Alice Johnson", 0.0),
    ],
)
def test_fuzzy_match(query, target, score):
    assert fuzzy_match(query, target) == pytest.approx(score)


@pytest.fixture
def store():
    s = EventStore()
    head = s.add_table("rectangle", 0, 0)
    s.update_table(head.id, name="Head Table")
    alice = s.add_guest("Alice", "Johnson", group="Family")
    s.assign_guest_to_table(alice.id, head.id)
    s.add_guest("Frank", "Wilson", group="College Friends")
    return s


def test_guest_results_resolve_position(store):
    results = search_canvas(store.event, "alice")
    assert len(results) == 1
    r = results[0]
    assert (r.type, r.name, r.subtitle) == ("guest", "Alice Johnson", "Head Table")
    assert (r.x, r.y) == (100, 40)

    frank = search_canvas(store.event, "frank")[0]
    assert frank.subtitle == "Unassigned"
    assert (frank.x, frank.y) == (80, 100)


def test_group_matches_are_weighted(store):
    results = search_canvas(store.event, "college")
    assert [r.name for r in results] == ["Frank Wilson"]
    assert results[0].score == pytest.approx(0.72)


def test_table_results_show_occupancy(store):
    results = search_canvas(store.event, "head table")
    assert results[0].type == "table"
    assert results[0].score == 1.0
    assert results[0].subtitle == "1/10 guests"


def test_blank_and_unmatched_queries(store):
    assert search_canvas(store.event, "   ") == []
    assert search_canvas(store.event, "zzz") == []


def test_results_are_capped_and_sorted():
    s = EventStore()
    for i in range(7):
        s.add_guest("Tab", f"Guest{i}")
        s.add_table("round", i * 200, 0)
    s.add_guest("Tab")
    results = search_canvas(s.event, "tab")
    assert len(results) == 10
    assert results[0].type == "guest" and results[0].score == 1.0
    assert sum(1 for r in results if r.type == "guest") == 5
    assert sum(1 for r in results if r.type == "table") == 5
    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)


def test_navigate_to_result_centers_and_selects(store):
    store.set_zoom(2.0)
    store.select_guest("someone")
    table_result = search_canvas(store.event, "head table")[0]
    navigate_to_result(store, table_result, 800, 600)
    assert (store.view.pan_x, store.view.pan_y) == (400 - 200, 300 - 80)
    assert store.view.selected_table_id == table_result.id
    assert store.view.selected_guest_id is None

    guest_result = search_canvas(store.event, "frank")[0]
    navigate_to_result(store, guest_result, 800, 600)
    assert store.view.selected_guest_id == guest_result.id
    assert store.view.selected_table_id is None


def test_search_does_not_mutate(store):
    before = store.export_event()
    search_canvas(store.event, "alice")
    assert store.export_event() == before
