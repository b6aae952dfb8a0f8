"""Engine configuration (game constants, tier table, ending thresholds).

EngineConfig is immutable and passed into every engine function, so tests can vary
constants per case without touching shared state. load_config() returns the
defaults merged with an optional JSON override file:

    {
      "target_distance": 800,
      "defensive_input_threshold": 25,
      "tiers": {"S": {"min_fuel": 80}}
    }

Scalars are overwritten; tiers are merged tier by tier, field by field.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from mars_flight.errors import NotFoundError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MARS_FLIGHT_CONFIG"
DATA_DIR_ENV_VAR = "MARS_FLIGHT_DATA_DIR"


class TierThreshold(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_fuel: float = Field(ge=0)
    min_hull: float = Field(ge=0)


class TierTable(BaseModel):
    """Minimum (fuel, hull) per landing tier, best tier first."""

    model_config = ConfigDict(frozen=True)

    S: TierThreshold = TierThreshold(min_fuel=70, min_hull=80)
    A: TierThreshold = TierThreshold(min_fuel=50, min_hull=60)
    B: TierThreshold = TierThreshold(min_fuel=30, min_hull=40)
    C: TierThreshold = TierThreshold(min_fuel=10, min_hull=20)
    D: TierThreshold = TierThreshold(min_fuel=0, min_hull=0)


class EngineConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Flight
    target_distance: float = Field(default=1000.0, gt=0)
    initial_fuel: float = Field(default=100.0, gt=0)
    initial_hull: float = Field(default=100.0, gt=0)
    max_fuel_input: float = Field(default=100.0, gt=0)
    high_thrust_threshold: float = 50.0

    # Stability (percent change of the signal)
    stability_threshold: float = 0.0

    # Tick physics
    fuel_efficiency_base: float = 0.1
    reference_efficiency: float = 20.0
    fuel_scale: float = 10.0
    distance_multiplier: float = 10.0
    reference_acceleration: float = 15.0
    unstable_setback_factor: float = 0.5
    hull_damage_base: float = 5.0
    defensive_input_threshold: float = 20.0

    # Event resolution
    bear_trap_durability_threshold: float = 1.5
    bear_trap_penalty_factor: float = 0.5
    bear_trap_hull_modifier: float = 1.5
    bull_run_fuel_modifier: float = 0.8
    fuel_eco_factor: float = 0.1
    min_thrust_multiplier: float = 0.1
    min_fuel_modifier: float = 0.5
    max_fuel_modifier: float = 2.0

    # Round mode
    total_rounds: int = Field(default=6, ge=1)
    round_base_fuel: float = 10.0
    round_base_distance: float = 20.0
    round_base_hull_damage: float = 5.0

    # Post-flight
    tiers: TierTable = TierTable()
    invasion_min_correct: int = 6
    mars_min_correct: int = 4
    stranded_min_correct: int = 2


DEFAULT_CONFIG = EngineConfig()


def _resolve_config_path() -> Path | None:
    explicit = os.getenv(CONFIG_ENV_VAR, "").strip()
    return Path(explicit) if explicit else None


def merge_config(overrides: dict[str, Any]) -> EngineConfig:
    """Merge overrides into the defaults and validate. Returns a new config."""
    merged: dict[str, Any] = DEFAULT_CONFIG.model_dump()
    for key, value in overrides.items():
        if key == "tiers" and isinstance(value, dict):
            for tier, fields in value.items():
                if tier in merged["tiers"] and isinstance(fields, dict):
                    merged["tiers"][tier].update(fields)
                else:
                    logger.warning("Ignoring unknown tier %r in config overrides", tier)
        elif key in merged:
            merged[key] = value
        else:
            logger.warning("Ignoring unknown config key %r", key)
    return EngineConfig.model_validate(merged)


def load_config(path: Path | None = None) -> EngineConfig:
    """Read config overrides from JSON, returning defaults merged with stored values.

    An explicit path must exist (NotFoundError otherwise). Without one,
    MARS_FLIGHT_CONFIG (from the environment or .env) is used, and a missing file
    there means plain defaults.
    """
    if path is not None:
        if not path.is_file():
            raise NotFoundError(f"Config file {path} not found")
    else:
        load_dotenv()
        path = _resolve_config_path()
        if path is None:
            return DEFAULT_CONFIG
        if not path.is_file():
            logger.warning(
                "Config file %s from %s not found, using defaults", path, CONFIG_ENV_VAR
            )
            return DEFAULT_CONFIG
    stored = json.loads(path.read_text())
    logger.debug("config loaded path=%s keys=%s", path, sorted(stored))
    return merge_config(stored)


def data_dir_from_env(default: Path) -> Path:
    load_dotenv()
    return Path(os.getenv(DATA_DIR_ENV_VAR, str(default)))
