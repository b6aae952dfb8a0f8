"""Round orchestrator — phase machine and session physics for both flight modes.

Round mode, one round end-to-end:
  1. Resolve every applicable event and fold the results: multipliers multiply,
     polarity is the AND over all events (every event is scanned).
  2. Baselines from the fuel input: fuel input/100 * 10, distance input/100 * 20,
     hull 5 when any event went negative. Scale by the composed modifiers.
  3. Apply clamped deltas (fuel, hull >= 0; distance within [0, target]).
  4. Judge the choice against the round polarity; count correct answers.
  5. Terminate: fuel or hull exhausted → FAILED; last round → COMPLETED with the
     final ending; otherwise advance and reset the phase to NEWS.

Phases: NEWS → PLAYING → RESULT (game over) or NEWS of the next round.
A round resolves only from PLAYING, i.e. after begin_round().

Tick mode applies tick_physics() to the session instead and tracks the
behavioural counters used by the archetype classifier.

Every function here returns a new session; the one passed in is never touched,
so a rejected call leaves no partial state behind.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict

from mars_flight.config import DEFAULT_CONFIG, EngineConfig
from mars_flight.engine.classifier import (
    ARCHETYPE_LABELS,
    SETTLEMENTS,
    advice_for,
    classify_archetype,
    classify_tier,
    final_ending,
)
from mars_flight.engine.events import resolve_event
from mars_flight.engine.judge import judge_choice
from mars_flight.engine.physics import tick_physics, validate_fuel_input, validate_profile
from mars_flight.engine.stability import is_stable, resolve_stability
from mars_flight.errors import ConflictError, NotFoundError
from mars_flight.models import (
    EventDefinition,
    EventResolutionResult,
    FlightSession,
    LandingReport,
    ResolvedEvent,
    RocketProfile,
    RoundResult,
    SessionStats,
    TickReport,
)

logger = logging.getLogger(__name__)


class ComposedEffect(BaseModel):
    """Net effect of all events of one round."""

    model_config = ConfigDict(frozen=True)

    thrust_multiplier: float = 1.0
    fuel_modifier: float = 1.0
    hull_damage_modifier: float = 1.0
    overall_positive: bool = True


def compose_events(results: list[EventResolutionResult]) -> ComposedEffect:
    thrust = fuel = hull = 1.0
    positive = True
    for result in results:
        thrust *= result.thrust_multiplier
        fuel *= result.fuel_modifier
        hull *= result.hull_damage_modifier
        positive = positive and result.is_positive_outcome
    return ComposedEffect(
        thrust_multiplier=thrust,
        fuel_modifier=fuel,
        hull_damage_modifier=hull,
        overall_positive=positive,
    )


# ---------------------------------------------------------------------------
# Phase transitions
# ---------------------------------------------------------------------------

def _touch(session: FlightSession, **fields) -> FlightSession:
    fields["updated_at"] = datetime.now(timezone.utc).isoformat()
    return session.model_copy(update=fields)


def _require_active(session: FlightSession) -> None:
    if session.is_terminal:
        logger.warning("Rejected call on session=%s with status=%s", session.id, session.status)
        raise ConflictError(f"Flight {session.id} is already {session.status}")


def open_briefing(session: FlightSession) -> FlightSession:
    """Player is viewing the round's news. Phase → NEWS."""
    _require_active(session)
    return _touch(session, round_phase="NEWS")


def begin_round(session: FlightSession) -> FlightSession:
    """Player has read the briefing and is now choosing. Phase → PLAYING.

    Live sessions only reach RESULT once terminal; the RESULT check guards sessions
    built or restored by hand.
    """
    _require_active(session)
    if session.round_phase == "RESULT":
        raise ConflictError(f"Round {session.current_round} has already been resolved")
    return _touch(session, round_phase="PLAYING")


# ---------------------------------------------------------------------------
# Round mode
# ---------------------------------------------------------------------------

def resolve_round(
    session: FlightSession,
    events: list[EventDefinition],
    profile: RocketProfile,
    fuel_input: float,
    round_number: int | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> tuple[FlightSession, RoundResult]:
    """Resolve the session's current round. Returns (updated session, round result)."""
    validate_fuel_input(fuel_input, config)
    validate_profile(profile)
    _require_active(session)
    if session.round_phase != "PLAYING":
        raise ConflictError(
            f"Flight {session.id} is in phase {session.round_phase}; begin the round first"
        )
    current_round = session.current_round
    if round_number is not None and round_number != current_round:
        raise ConflictError(
            f"Flight {session.id} is on round {current_round}, not round {round_number}"
        )
    if not events:
        raise NotFoundError(f"No events for round {current_round}")

    # 1. Resolve and compose
    resolved = [
        ResolvedEvent(
            event_id=event.id,
            is_global=event.is_global,
            is_twist=event.is_twist,
            twist_type=event.twist_type,
            result=resolve_event(event, profile, session.rocket_id, config),
        )
        for event in events
    ]
    effect = compose_events([r.result for r in resolved])
    any_negative = any(not r.result.is_positive_outcome for r in resolved)

    # 2. Round physics
    input_ratio = fuel_input / 100
    fuel_consumed = input_ratio * config.round_base_fuel * effect.fuel_modifier
    distance_gained = input_ratio * config.round_base_distance * effect.thrust_multiplier
    base_hull = config.round_base_hull_damage if any_negative else 0.0
    hull_damage = base_hull * effect.hull_damage_modifier

    # 3. Clamp
    new_fuel = max(0.0, session.current_fuel - fuel_consumed)
    new_hull = max(0.0, session.current_hull - hull_damage)
    new_distance = min(config.target_distance, max(0.0, session.distance + distance_gained))

    # 4. Judge
    choice = judge_choice(fuel_input, effect.overall_positive, config)
    correct_answers = session.correct_answers + (1 if choice.is_correct_choice else 0)
    high_count = session.high_stability_thrust_count
    low_count = session.low_stability_thrust_count
    if choice.user_chose_fuel:
        if effect.overall_positive:
            high_count += 1
        else:
            low_count += 1

    # 5. Terminate or advance
    status = session.status
    game_over_reason = ""
    ending = None
    if new_fuel <= 0 or new_hull <= 0:
        status = "FAILED"
        game_over_reason = "Out of fuel!" if new_fuel <= 0 else "Hull destroyed!"
    elif current_round >= config.total_rounds:
        status = "COMPLETED"
        game_over_reason = "All rounds completed!"
        ending = final_ending(correct_answers, config).ending
    is_game_over = status != "IN_PROGRESS"
    next_round = current_round if is_game_over else min(config.total_rounds, current_round + 1)

    updated = _touch(
        session,
        current_fuel=new_fuel,
        current_hull=new_hull,
        distance=new_distance,
        total_fuel_used=session.total_fuel_used + fuel_consumed,
        high_stability_thrust_count=high_count,
        low_stability_thrust_count=low_count,
        correct_answers=correct_answers,
        current_round=next_round,
        round_phase="RESULT" if is_game_over else "NEWS",
        status=status,
        final_ending=ending if ending is not None else session.final_ending,
    )
    result = RoundResult(
        round=current_round,
        fuel_input=fuel_input,
        events=resolved,
        total_thrust_multiplier=effect.thrust_multiplier,
        total_fuel_modifier=effect.fuel_modifier,
        total_hull_damage_modifier=effect.hull_damage_modifier,
        overall_positive=effect.overall_positive,
        choice=choice,
        fuel_consumed=fuel_consumed,
        distance_gained=distance_gained,
        hull_damage=hull_damage,
        next_round=next_round,
        is_game_over=is_game_over,
        game_over_reason=game_over_reason,
        final_ending=ending,
    )
    logger.debug(
        "round session=%s round=%d input=%s thrust=%.3f positive=%s correct=%s status=%s",
        session.id, current_round, fuel_input, effect.thrust_multiplier,
        effect.overall_positive, choice.is_correct_choice, status,
    )
    if is_game_over:
        logger.info("Flight %s ended on round %d: %s", session.id, current_round, status)
    return updated, result


# ---------------------------------------------------------------------------
# Tick mode
# ---------------------------------------------------------------------------

def sync_tick(
    session: FlightSession,
    profile: RocketProfile,
    fuel_input: float,
    y_value: float,
    previous_y: float | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> tuple[FlightSession, TickReport]:
    """Apply one tick of the continuous model to the session."""
    validate_fuel_input(fuel_input, config)
    validate_profile(profile)
    _require_active(session)

    prev = y_value if previous_y is None else previous_y
    change_rate = resolve_stability(y_value, prev)
    stable = is_stable(change_rate, config)
    tick = tick_physics(fuel_input, change_rate, profile, config)

    new_fuel = max(0.0, session.current_fuel - tick.fuel_consumed)
    new_hull = max(0.0, session.current_hull - tick.hull_damage)
    raw_distance = max(0.0, session.distance + tick.distance_change)

    high_thrust = fuel_input >= config.high_thrust_threshold
    high_count = session.high_stability_thrust_count + (1 if stable and high_thrust else 0)
    low_count = session.low_stability_thrust_count + (1 if not stable and high_thrust else 0)

    status = session.status
    reason = ""
    if new_fuel <= 0 or new_hull <= 0:
        status = "FAILED"
        reason = "Out of fuel!" if new_fuel <= 0 else "Hull destroyed!"
    # Reaching Mars wins over running dry on the same tick.
    if raw_distance >= config.target_distance:
        status = "COMPLETED"
        reason = "Arrived at Mars!"
    distance = min(raw_distance, config.target_distance)

    updated = _touch(
        session,
        current_fuel=new_fuel,
        current_hull=new_hull,
        distance=distance,
        total_fuel_used=session.total_fuel_used + tick.fuel_consumed,
        high_stability_thrust_count=high_count,
        low_stability_thrust_count=low_count,
        status=status,
    )
    report = TickReport(
        change_rate=change_rate,
        is_stable=stable,
        tick=tick,
        progress=distance / config.target_distance * 100,
        status=status,
        is_game_over=status != "IN_PROGRESS",
        game_over_reason=reason,
    )
    if report.is_game_over:
        logger.info("Flight %s ended on tick: %s", session.id, status)
    return updated, report


def land(
    session: FlightSession, config: EngineConfig = DEFAULT_CONFIG
) -> tuple[FlightSession, LandingReport]:
    """Close the flight and classify it (tier, archetype, advice).

    Works on active and finished sessions alike. The status follows the tier:
    F (target not reached) → FAILED, anything else → COMPLETED.
    """
    stats = SessionStats.from_session(session)
    tier = classify_tier(stats, config)
    archetype = classify_archetype(stats)
    advice = advice_for(archetype, tier)
    settlement = SETTLEMENTS[tier]

    updated = _touch(
        session,
        tier=tier,
        archetype=archetype,
        advice=advice,
        status="FAILED" if tier == "F" else "COMPLETED",
    )
    report = LandingReport(
        tier=tier,
        settlement_name=settlement["name"],
        settlement_description=settlement["description"],
        archetype=archetype,
        archetype_label=ARCHETYPE_LABELS[archetype],
        advice=advice,
        stats=stats,
    )
    logger.info("Flight %s landed: tier=%s archetype=%s", session.id, tier, archetype)
    return updated, report
