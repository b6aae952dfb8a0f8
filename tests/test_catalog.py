import json

import pytest

from mars_flight.catalog import Catalog, briefing
from mars_flight.errors import NotFoundError


def test_lists_seed_rockets(catalog):
    rockets = catalog.list_rockets()
    assert [r.name for r in rockets] == ["NVDA", "AAPL", "KO"]


def test_get_rocket(catalog):
    rocket = catalog.get_rocket(3)
    assert rocket.durability_stat == 1.8


def test_unknown_rocket(catalog):
    with pytest.raises(NotFoundError):
        catalog.get_rocket(99)


@pytest.mark.parametrize("rocket_id", [1, 2, 3])
def test_every_round_has_events(catalog, rocket_id):
    for round_number in range(1, 7):
        assert catalog.events_for_round(round_number, rocket_id)


def test_global_rounds_are_shared(catalog):
    for round_number in (1, 3, 5):
        ids = {e.id for r in (1, 2, 3) for e in catalog.events_for_round(round_number, r)}
        assert len(ids) == 1


def test_specific_rounds_are_per_rocket(catalog):
    events = catalog.events_for_round(2, 2)
    assert len(events) == 1
    assert events[0].target_rocket_id == 2


def test_global_events_come_first(tmp_path):
    (tmp_path / "rockets.json").write_text("[]")
    (tmp_path / "events.json").write_text(json.dumps([
        {"id": 1, "round": 1, "target_rocket_id": 1, "affected_stat": "boost"},
        {"id": 2, "round": 1, "is_global": True, "global_type": "NEUTRAL"},
    ]))
    events = Catalog(tmp_path).events_for_round(1, 1)
    assert [e.id for e in events] == [2, 1]


def test_round_without_events(catalog):
    with pytest.raises(NotFoundError):
        catalog.events_for_round(7, 1)


def test_briefing_hides_twist(catalog):
    event = catalog.events_for_round(1, 1)[0]
    assert event.is_twist
    item = briefing(event)
    assert set(item) == {"id", "round", "is_global", "news", "navigator", "log"}
    assert item["news"] == event.headline
