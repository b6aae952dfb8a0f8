"""Flight service — runs player actions end-to-end against storage and the catalog.

Round flow:
  1. start_flight()  create a session for the chosen rocket.
  2. news()          phase → NEWS, return the round's briefings.
  3. begin_round()   phase → PLAYING.
  4. end_round()     resolve the round through the engine, persist, log.
  5. Repeat 2–4 until the engine reports game over, then final_report().

Tick flow: start_flight(), sync_tick() per signal sample, then land().

Every write goes through Storage.save_session(), whose version check rejects a
second resolution racing on the same session.
"""

from __future__ import annotations

import logging
from typing import Any

from mars_flight.catalog import Catalog, briefing
from mars_flight.config import DEFAULT_CONFIG, EngineConfig
from mars_flight.engine import (
    begin_round,
    explain_choice,
    final_ending,
    land,
    open_briefing,
    resolve_round,
    sync_tick,
)
from mars_flight.errors import ConflictError, NotFoundError
from mars_flight.models import (
    FlightLogEntry,
    FlightSession,
    LandingReport,
    RoundResult,
    TickReport,
)
from mars_flight.storage import Storage

logger = logging.getLogger(__name__)


class FlightService:
    def __init__(
        self,
        storage: Storage,
        catalog: Catalog,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        self._storage = storage
        self._catalog = catalog
        self._config = config

    def _active(self) -> FlightSession:
        session = self._storage.find_active()
        if session is None:
            raise NotFoundError("No flight in progress")
        return session

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_flight(self, rocket_id: int, symbol: str = "AAPL") -> FlightSession:
        existing = self._storage.find_active()
        if existing is not None:
            raise ConflictError(
                f"Flight {existing.id} is already in progress. Finish or reset it first."
            )
        self._catalog.get_rocket(rocket_id)
        return self._storage.create_session(FlightSession(
            rocket_id=rocket_id,
            symbol=symbol,
            current_fuel=self._config.initial_fuel,
            current_hull=self._config.initial_hull,
        ))

    def status(self) -> dict[str, Any]:
        return {
            "active": self._storage.find_active(),
            "recent": self._storage.list_finished(limit=5),
        }

    def reset(self) -> FlightSession | None:
        """Abandon the active flight, if any, by marking it FAILED."""
        session = self._storage.find_active()
        if session is None:
            return None
        logger.info("Resetting flight %d", session.id)
        return self._storage.save_session(session.model_copy(update={"status": "FAILED"}))

    # ------------------------------------------------------------------
    # Round mode
    # ------------------------------------------------------------------

    def news(self) -> dict[str, Any]:
        session = self._active()
        events = self._catalog.events_for_round(session.current_round, session.rocket_id)
        self._storage.save_session(open_briefing(session))
        return {
            "current_round": session.current_round,
            "total_rounds": self._config.total_rounds,
            "phase": "NEWS",
            "events": [briefing(e) for e in events],
        }

    def begin_round(self) -> FlightSession:
        return self._storage.save_session(begin_round(self._active()))

    def end_round(self, fuel_input: float, round_number: int | None = None) -> RoundResult:
        session = self._active()
        profile = self._catalog.get_rocket(session.rocket_id)
        events = self._catalog.events_for_round(session.current_round, session.rocket_id)
        updated, result = resolve_round(
            session, events, profile, fuel_input,
            round_number=round_number, config=self._config,
        )
        saved = self._storage.save_session(updated)
        self._storage.append_log(saved.id, [FlightLogEntry(
            round=result.round,
            fuel_input=fuel_input,
            fuel_after=saved.current_fuel,
            hull_after=saved.current_hull,
            distance_after=saved.distance,
            thrust_multiplier=result.total_thrust_multiplier,
            event_description=" | ".join(e.result.description for e in result.events),
            is_positive_event=result.overall_positive,
            user_chose_fuel=result.choice.user_chose_fuel,
            is_correct_choice=result.choice.is_correct_choice,
        )])
        return result

    def final_report(self) -> dict[str, Any]:
        finished = self._storage.list_finished(limit=1)
        if not finished:
            raise NotFoundError("No finished flight")
        session = finished[0]
        total = self._config.total_rounds
        rounds = [
            {
                "round": entry.round,
                "fuel_input": entry.fuel_input,
                "is_correct": entry.is_correct_choice,
                "was_positive_event": entry.is_positive_event,
                "user_chose_fuel": entry.user_chose_fuel,
                "explanation": explain_choice(
                    bool(entry.is_correct_choice), bool(entry.is_positive_event)
                ),
            }
            for entry in sorted(self._storage.get_log(session.id), key=lambda e: e.round)
            if entry.is_correct_choice is not None
        ]
        return {
            "session_id": session.id,
            "status": session.status,
            "rocket": self._catalog.get_rocket(session.rocket_id).name,
            "correct_answers": session.correct_answers,
            "total_rounds": total,
            "accuracy": round(session.correct_answers / total * 100),
            "final_ending": final_ending(session.correct_answers, self._config),
            "rounds": rounds,
            "final_stats": {
                "fuel": session.current_fuel,
                "hull": session.current_hull,
                "distance": session.distance,
            },
        }

    # ------------------------------------------------------------------
    # Tick mode
    # ------------------------------------------------------------------

    def sync_tick(
        self, fuel_input: float, y_value: float, previous_y: float | None = None
    ) -> TickReport:
        session = self._active()
        profile = self._catalog.get_rocket(session.rocket_id)
        updated, report = sync_tick(
            session, profile, fuel_input, y_value, previous_y, config=self._config
        )
        saved = self._storage.save_session(updated)
        self._storage.append_log(saved.id, [FlightLogEntry(
            y_value=y_value,
            fuel_input=fuel_input,
            fuel_after=saved.current_fuel,
            hull_after=saved.current_hull,
            distance_after=saved.distance,
        )])
        return report

    def land(self) -> LandingReport:
        """Classify the most recent flight, closing it if still active."""
        session = self._storage.find_active()
        if session is None:
            finished = self._storage.list_finished(limit=1)
            if not finished:
                raise NotFoundError("No flight to land")
            session = finished[0]
        updated, report = land(session, self._config)
        self._storage.save_session(updated)
        return report
