"""Tick-mode flight physics.

One tick turns (fuel input, signal change rate, rocket profile) into three deltas:

  fuel consumed   base_rate * input_ratio * (ref_efficiency / efficiency) * scale
  distance change stable:   |rate| * input_ratio * distance_multiplier
                              * (ref_acceleration / acceleration)
                  unstable: -(|rate| * input_ratio * setback_factor)
  hull damage     stable → 0; input below the defensive threshold → 0;
                  otherwise hull_base * input_ratio * |rate| / 10 * durability

All functions are pure. Clamping the session fields is the caller's job.
"""

from __future__ import annotations

import logging

from mars_flight.config import DEFAULT_CONFIG, EngineConfig
from mars_flight.engine.stability import is_stable
from mars_flight.errors import InputValidationError
from mars_flight.models import RocketProfile, TickResult

logger = logging.getLogger(__name__)


def validate_fuel_input(fuel_input: float, config: EngineConfig = DEFAULT_CONFIG) -> None:
    if not 0 <= fuel_input <= config.max_fuel_input:
        raise InputValidationError(
            f"Fuel input must be between 0 and {config.max_fuel_input:g}, got {fuel_input!r}"
        )


def validate_profile(profile: RocketProfile) -> None:
    """Reject stats that would divide by zero or flip a sign.

    RocketProfile validates on construction; this catches instances built with
    model_construct() or copied with unchecked updates.
    """
    for name in ("acceleration_stat", "durability_stat", "efficiency_stat"):
        value = getattr(profile, name)
        if value <= 0:
            raise InputValidationError(f"Rocket {profile.id} has non-positive {name}: {value!r}")


def fuel_consumption(
    fuel_input: float, profile: RocketProfile, config: EngineConfig = DEFAULT_CONFIG
) -> float:
    if profile.efficiency_stat <= 0:
        raise InputValidationError(
            f"Rocket {profile.id} has non-positive efficiency_stat: {profile.efficiency_stat!r}"
        )
    input_ratio = fuel_input / 100
    efficiency = config.reference_efficiency / profile.efficiency_stat
    return config.fuel_efficiency_base * input_ratio * efficiency * config.fuel_scale


def distance_change(
    fuel_input: float,
    change_rate: float,
    profile: RocketProfile,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    input_ratio = fuel_input / 100
    if is_stable(change_rate, config):
        boost = config.reference_acceleration / profile.acceleration_stat
        return abs(change_rate) * input_ratio * config.distance_multiplier * boost
    # Pushing harder through turbulence costs more ground.
    return -(abs(change_rate) * input_ratio * config.unstable_setback_factor)


def hull_damage(
    fuel_input: float,
    change_rate: float,
    profile: RocketProfile,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    if is_stable(change_rate, config):
        return 0.0
    if fuel_input < config.defensive_input_threshold:
        return 0.0  # defensive flying
    input_ratio = fuel_input / 100
    base = config.hull_damage_base * input_ratio * abs(change_rate) / 10
    return base * profile.durability_stat


def tick_physics(
    fuel_input: float,
    change_rate: float,
    profile: RocketProfile,
    config: EngineConfig = DEFAULT_CONFIG,
) -> TickResult:
    """Compute fuel, distance and hull deltas for one tick."""
    validate_fuel_input(fuel_input, config)
    validate_profile(profile)
    result = TickResult(
        fuel_consumed=fuel_consumption(fuel_input, profile, config),
        distance_change=distance_change(fuel_input, change_rate, profile, config),
        hull_damage=hull_damage(fuel_input, change_rate, profile, config),
    )
    logger.debug(
        "tick rocket=%s input=%s rate=%.3f fuel=%.3f distance=%.3f hull=%.3f",
        profile.id, fuel_input, change_rate,
        result.fuel_consumed, result.distance_change, result.hull_damage,
    )
    return result
