"""End-to-end flights through FlightService on the seed scenario."""

import pytest

from mars_flight.errors import ConflictError, InputValidationError, NotFoundError

# Rocket 1 (NVDA): rounds 1, 3, 4 and 6 are favourable, rounds 2 and 5 are not.
PERFECT_INPUTS = [80, 20, 80, 80, 20, 80]


def _play(service, inputs):
    results = []
    for fuel_input in inputs:
        service.news()
        service.begin_round()
        results.append(service.end_round(fuel_input))
    return results


# ── Lifecycle ───────────────────────────────────────────────


def test_start_flight(service):
    session = service.start_flight(1)
    assert session.id == 1
    assert session.current_fuel == 100
    assert service.status()["active"].id == 1


def test_start_with_unknown_rocket(service):
    with pytest.raises(NotFoundError):
        service.start_flight(42)
    assert service.status()["active"] is None


def test_only_one_active_flight(service):
    service.start_flight(1)
    with pytest.raises(ConflictError):
        service.start_flight(2)


def test_reset_abandons_flight(service):
    service.start_flight(1)
    abandoned = service.reset()
    assert abandoned.status == "FAILED"
    assert service.status()["active"] is None
    assert service.start_flight(2).id == 2


def test_reset_without_flight(service):
    assert service.reset() is None


def test_news_without_flight(service):
    with pytest.raises(NotFoundError):
        service.news()


# ── Round mode ──────────────────────────────────────────────


def test_news_briefing(service):
    service.start_flight(2)
    news = service.news()
    assert news["current_round"] == 1
    assert news["total_rounds"] == 6
    assert news["phase"] == "NEWS"
    assert len(news["events"]) == 1
    assert "twist_type" not in news["events"][0]


def test_perfect_flight(service):
    service.start_flight(1)
    results = _play(service, PERFECT_INPUTS)
    assert [r.overall_positive for r in results] == [True, False, True, True, False, True]
    assert all(r.choice.is_correct_choice for r in results)
    assert results[-1].is_game_over
    assert results[-1].final_ending == "INVASION"

    report = service.final_report()
    assert report["status"] == "COMPLETED"
    assert report["rocket"] == "NVDA"
    assert report["correct_answers"] == 6
    assert report["accuracy"] == 100
    assert report["final_ending"].ending == "INVASION"
    assert report["final_stats"]["fuel"] == pytest.approx(65.6)
    assert report["final_stats"]["hull"] == pytest.approx(90)
    assert [r["round"] for r in report["rounds"]] == [1, 2, 3, 4, 5, 6]
    assert report["rounds"][1]["explanation"] == "Dodged the downside"


def test_always_half_throttle(service):
    service.start_flight(1)
    _play(service, [50] * 6)
    report = service.final_report()
    assert report["correct_answers"] == 4
    assert report["accuracy"] == 67
    assert report["final_ending"].ending == "MARS"
    assert report["rounds"][1]["explanation"] == "Flew into the downside"


def test_round_is_logged(service, storage):
    session = service.start_flight(1)
    _play(service, [80])
    log = storage.get_log(session.id)
    assert len(log) == 1
    assert log[0].round == 1
    assert log[0].fuel_after == pytest.approx(92)
    assert log[0].is_correct_choice is True
    assert "Bear trap" in log[0].event_description


def test_choice_requires_begin_round(service):
    service.start_flight(1)
    service.news()
    with pytest.raises(ConflictError):
        service.end_round(80)
    active = service.status()["active"]
    assert active.current_round == 1
    assert active.round_phase == "NEWS"


def test_round_number_mismatch(service):
    service.start_flight(1)
    service.news()
    service.begin_round()
    with pytest.raises(ConflictError):
        service.end_round(80, round_number=2)
    assert service.status()["active"].current_round == 1


def test_invalid_fuel_input_leaves_session(service):
    service.start_flight(1)
    service.news()
    service.begin_round()
    with pytest.raises(InputValidationError):
        service.end_round(150)
    active = service.status()["active"]
    assert active.current_fuel == 100
    assert active.round_phase == "PLAYING"


def test_stale_session_rejected(service, storage):
    session = service.start_flight(1)
    service.news()
    with pytest.raises(ConflictError):
        storage.save_session(session.model_copy(update={"current_fuel": 1.0}))


def test_no_play_after_completion(service):
    service.start_flight(1)
    _play(service, PERFECT_INPUTS)
    with pytest.raises(NotFoundError):
        service.end_round(80)


def test_final_report_requires_finished_flight(service):
    service.start_flight(1)
    with pytest.raises(NotFoundError):
        service.final_report()


# ── Tick mode ───────────────────────────────────────────────


def test_tick_flight_and_landing(service, storage):
    session = service.start_flight(1)
    report = service.sync_tick(80, 102, 100)
    assert report.is_stable
    assert report.tick.distance_change > 0
    assert len(storage.get_log(session.id)) == 1

    landing = service.land()
    assert landing.tier == "F"
    assert landing.settlement_name == "Landing failed"
    stored = storage.get_session(session.id)
    assert stored.status == "FAILED"
    assert stored.tier == "F"
    assert stored.advice == landing.advice


def test_land_finished_flight(service):
    service.start_flight(1)
    _play(service, PERFECT_INPUTS)
    landing = service.land()
    assert landing.tier == "F"
    assert landing.archetype == "CAUTIOUS_VALUE"


def test_land_without_any_flight(service):
    with pytest.raises(NotFoundError):
        service.land()
