"""Event modifier resolution — one event against one rocket.

Resolution order (first match wins):

  1. Targeting guard   specific event aimed at another rocket → neutral result
  2. Global events     by global_type
       BEAR_TRAP     durability >= threshold → thrust_mod + durability * m, positive
                     otherwise               → thrust_mod * 0.5, hull x1.5, negative
       BULL_RUN      thrust_mod + acceleration * m, fuel x0.8, positive
       BUBBLE_BURST  max(0.1, thrust_mod - acceleration * |m|), negative
       NEUTRAL/None  thrust_mod, positive iff thrust_mod >= 1.0
  3. Specific events   by twist
       POSITIVE      thrust_mod + stat * |m|, positive (bad news that turns good)
       NEGATIVE      max(0.1, thrust_mod - stat * |m|), negative (good news that sours)
       no twist      thrust_mod + stat * m, positive iff thrust >= 1.0
     fuelEco events also scale fuel burn by 1 ∓ stat * |m| * 0.1.
  4. Clamp             thrust >= 0.1, fuel modifier in [0.5, 2.0], hull modifier >= 0

`m` is the event's stat_multiplier; `stat` is the rocket's value for affected_stat.
"""

from __future__ import annotations

import logging
from typing import assert_never

from mars_flight.config import DEFAULT_CONFIG, EngineConfig
from mars_flight.models import EventDefinition, EventResolutionResult, RocketProfile

logger = logging.getLogger(__name__)

NEUTRAL_RESULT = EventResolutionResult(
    thrust_multiplier=1.0,
    fuel_modifier=1.0,
    hull_damage_modifier=1.0,
    is_positive_outcome=True,
    description="",
)

_STAT_LABELS = {"boost": "Boost", "armor": "Armor", "fuelEco": "Fuel economy"}


def resolve_event(
    event: EventDefinition,
    profile: RocketProfile,
    rocket_id: int,
    config: EngineConfig = DEFAULT_CONFIG,
) -> EventResolutionResult:
    """Resolve a single event for the given rocket."""
    if (
        not event.is_global
        and event.target_rocket_id is not None
        and event.target_rocket_id != rocket_id
    ):
        logger.debug("event=%s targets rocket=%s, skipping rocket=%s",
                     event.id, event.target_rocket_id, rocket_id)
        return NEUTRAL_RESULT

    if event.is_global:
        thrust, fuel, hull, positive, description = _resolve_global(event, profile, config)
    else:
        thrust, fuel, hull, positive, description = _resolve_specific(event, profile, config)

    result = EventResolutionResult(
        thrust_multiplier=max(config.min_thrust_multiplier, thrust),
        fuel_modifier=min(config.max_fuel_modifier, max(config.min_fuel_modifier, fuel)),
        hull_damage_modifier=max(0.0, hull),
        is_positive_outcome=positive,
        description=description,
    )
    logger.debug(
        "event=%s rocket=%s thrust=%.3f fuel=%.3f hull=%.3f positive=%s",
        event.id, rocket_id, result.thrust_multiplier, result.fuel_modifier,
        result.hull_damage_modifier, result.is_positive_outcome,
    )
    return result


def _resolve_global(
    event: EventDefinition, profile: RocketProfile, config: EngineConfig
) -> tuple[float, float, float, bool, str]:
    thrust_mod = event.thrust_mod
    multiplier = event.stat_multiplier
    global_type = event.global_type

    if global_type == "BEAR_TRAP":
        durability = profile.durability_stat
        if durability >= config.bear_trap_durability_threshold:
            thrust = thrust_mod + durability * multiplier
            return thrust, 1.0, 1.0, True, (
                f"Bear trap turned slingshot: armor {durability:g} absorbed the shock "
                f"and converted it into thrust (x{thrust:.2f})."
            )
        thrust = thrust_mod * config.bear_trap_penalty_factor
        return thrust, 1.0, config.bear_trap_hull_modifier, False, (
            f"Bear trap: armor {durability:g} was too thin to ride the shock. "
            f"Thrust fell to x{thrust:.2f} and the hull took extra damage."
        )

    if global_type == "BULL_RUN":
        thrust = thrust_mod + profile.acceleration_stat * multiplier
        return thrust, config.bull_run_fuel_modifier, 1.0, True, (
            f"Bull run: favourable particle density across every route. "
            f"Thrust x{thrust:.2f} with reduced fuel burn."
        )

    if global_type == "BUBBLE_BURST":
        thrust = max(
            config.min_thrust_multiplier,
            thrust_mod - profile.acceleration_stat * abs(multiplier),
        )
        return thrust, 1.0, 1.0, False, (
            f"Bubble burst: the gravity field contracted and high-boost engines "
            f"overextended. Thrust dropped to x{thrust:.2f}."
        )

    if global_type == "NEUTRAL" or global_type is None:
        return thrust_mod, 1.0, 1.0, thrust_mod >= 1.0, ""

    assert_never(global_type)


def _resolve_specific(
    event: EventDefinition, profile: RocketProfile, config: EngineConfig
) -> tuple[float, float, float, bool, str]:
    thrust_mod = event.thrust_mod
    multiplier = event.stat_multiplier
    stat = event.affected_stat
    stat_value = profile.stat_value(stat) if stat is not None else 0.0
    label = _STAT_LABELS[stat] if stat is not None else "Hull"
    twist = event.twist_type if event.is_twist else "NONE"

    if twist == "POSITIVE":
        thrust = thrust_mod + stat_value * abs(multiplier)
        positive = True
        description = (
            f"Twist! The warning was a false alarm. {label} {stat_value:g} "
            f"turned the crisis into thrust (x{thrust:.2f})."
        )
    elif twist == "NEGATIVE":
        thrust = max(config.min_thrust_multiplier, thrust_mod - stat_value * abs(multiplier))
        positive = False
        description = (
            f"Twist! The good news collapsed. {label} {stat_value:g} "
            f"dragged thrust down to x{thrust:.2f}."
        )
    elif twist == "NONE":
        thrust = thrust_mod + stat_value * multiplier
        positive = thrust >= 1.0
        description = (
            f"As reported: {label} {stat_value:g} applied directly (x{thrust:.2f})."
        )
    else:
        assert_never(twist)

    fuel = 1.0
    if stat == "fuelEco":
        if multiplier > 0:
            fuel *= 1 - stat_value * multiplier * config.fuel_eco_factor
        else:
            fuel *= 1 + stat_value * abs(multiplier) * config.fuel_eco_factor

    return thrust, fuel, 1.0, positive, description
