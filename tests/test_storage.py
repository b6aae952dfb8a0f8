import pytest

from mars_flight.errors import ConflictError, NotFoundError
from mars_flight.models import FlightLogEntry, FlightSession


# ── Sessions ─────────────────────────────────────────────────


def test_create_assigns_sequential_ids(storage):
    first = storage.create_session(FlightSession(rocket_id=1))
    second = storage.create_session(FlightSession(rocket_id=2))
    assert (first.id, second.id) == (1, 2)
    assert first.version == 1


def test_get_missing_session(storage):
    assert storage.get_session(42) is None
    with pytest.raises(NotFoundError):
        storage.require_session(42)


def test_save_bumps_version(storage):
    session = storage.create_session(FlightSession(rocket_id=1))
    saved = storage.save_session(session.model_copy(update={"current_fuel": 80.0}))
    assert saved.version == 2
    stored = storage.get_session(session.id)
    assert stored.current_fuel == 80
    assert stored.version == 2


def test_stale_save_rejected(storage):
    session = storage.create_session(FlightSession(rocket_id=1))
    storage.save_session(session.model_copy(update={"current_fuel": 90.0}))
    with pytest.raises(ConflictError):
        storage.save_session(session.model_copy(update={"current_fuel": 10.0}))
    assert storage.get_session(session.id).current_fuel == 90


def test_save_unknown_session(storage):
    with pytest.raises(NotFoundError):
        storage.save_session(FlightSession(id=7, rocket_id=1, version=1))


def test_find_active(storage):
    assert storage.find_active() is None
    done = storage.create_session(FlightSession(rocket_id=1, status="COMPLETED"))
    active = storage.create_session(FlightSession(rocket_id=2))
    assert storage.find_active().id == active.id
    assert storage.find_active().id != done.id


def test_list_finished_newest_first(storage):
    storage.create_session(FlightSession(rocket_id=1, status="FAILED",
                                         updated_at="2026-01-01T00:00:00+00:00"))
    storage.create_session(FlightSession(rocket_id=2, status="COMPLETED",
                                         updated_at="2026-03-01T00:00:00+00:00"))
    storage.create_session(FlightSession(rocket_id=3))
    finished = storage.list_finished()
    assert [s.rocket_id for s in finished] == [2, 1]
    assert len(storage.list_finished(limit=1)) == 1


# ── Flight log ──────────────────────────────────────────────


def _entry(round_number: int) -> FlightLogEntry:
    return FlightLogEntry(
        round=round_number, fuel_input=50, fuel_after=95,
        hull_after=100, distance_after=10 * round_number,
    )


def test_log_starts_empty(storage):
    session = storage.create_session(FlightSession(rocket_id=1))
    assert storage.get_log(session.id) == []


def test_log_appends_in_order(storage):
    session = storage.create_session(FlightSession(rocket_id=1))
    storage.append_log(session.id, [_entry(1)])
    storage.append_log(session.id, [_entry(2), _entry(3)])
    log = storage.get_log(session.id)
    assert [e.round for e in log] == [1, 2, 3]
    assert log[2].distance_after == 30


def test_storage_survives_reopen(storage, tmp_path):
    from mars_flight.storage import Storage

    session = storage.create_session(FlightSession(rocket_id=3))
    storage.append_log(session.id, [_entry(1)])
    reopened = Storage(tmp_path / "data")
    assert reopened.require_session(session.id).rocket_id == 3
    assert len(reopened.get_log(session.id)) == 1
