"""Core domain models.

Every engine function, the storage adapter and the flight service operate on these
types. Pydantic is used for validation and serialisation at every data boundary;
the engine never mutates a model it was handed and returns copies instead.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SessionStatus = Literal["IN_PROGRESS", "COMPLETED", "FAILED"]
RoundPhase = Literal["NEWS", "PLAYING", "RESULT"]
GlobalType = Literal["BEAR_TRAP", "BULL_RUN", "BUBBLE_BURST", "NEUTRAL"]
TwistType = Literal["NONE", "POSITIVE", "NEGATIVE"]
AffectedStat = Literal["boost", "armor", "fuelEco"]
Tier = Literal["S", "A", "B", "C", "D", "F"]
Archetype = Literal[
    "AGGRESSIVE_GROWTH",
    "BALANCED_INVESTOR",
    "CAUTIOUS_VALUE",
    "RISK_TAKER",
    "DEFENSIVE",
]
Ending = Literal["INVASION", "MARS", "STRANDED", "CRASH"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class RocketProfile(BaseModel):
    """Per-rocket stats. Read-only for the whole flight."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    category: str = ""
    acceleration_stat: float = Field(gt=0)  # lower = stronger acceleration
    durability_stat: float = Field(gt=0)  # lower = less hull damage taken
    efficiency_stat: float = Field(gt=0)  # higher = less fuel burned

    def stat_value(self, stat: AffectedStat) -> float:
        """Value of the stat an event refers to by its short name."""
        if stat == "boost":
            return self.acceleration_stat
        if stat == "armor":
            return self.durability_stat
        return self.efficiency_stat


class EventDefinition(BaseModel):
    """One scenario event for a round, global or aimed at a single rocket."""

    model_config = ConfigDict(frozen=True)

    id: int = 0
    round: int = Field(default=1, ge=1)
    is_global: bool = False
    target_rocket_id: int | None = None
    thrust_mod: float = 1.0
    global_type: GlobalType | None = None
    affected_stat: AffectedStat | None = None
    stat_multiplier: float = 0.0
    is_twist: bool = False
    twist_type: TwistType = "NONE"
    # Briefing texts shown during the NEWS phase; the twist stays hidden.
    headline: str = ""
    navigator_note: str = ""
    log_note: str = ""


class EventResolutionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    thrust_multiplier: float = Field(default=1.0, ge=0.1)
    fuel_modifier: float = Field(default=1.0, ge=0.5, le=2.0)
    hull_damage_modifier: float = Field(default=1.0, ge=0)
    is_positive_outcome: bool = True
    description: str = ""


class ChoiceResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_chose_fuel: bool
    is_correct_choice: bool


class TickResult(BaseModel):
    """Deltas produced by one tick of the continuous flight model."""

    model_config = ConfigDict(frozen=True)

    fuel_consumed: float
    distance_change: float
    hull_damage: float


class FlightSession(BaseModel):
    """A single flight. Mutated only through engine functions that return copies."""

    id: int = 0
    rocket_id: int
    symbol: str = "AAPL"
    current_fuel: float = 100.0
    current_hull: float = 100.0
    distance: float = 0.0
    total_fuel_used: float = 0.0
    high_stability_thrust_count: int = 0
    low_stability_thrust_count: int = 0
    status: SessionStatus = "IN_PROGRESS"
    current_round: int = Field(default=1, ge=1)
    round_phase: RoundPhase = "NEWS"
    correct_answers: int = Field(default=0, ge=0)
    final_ending: Ending | None = None
    # Post-flight classification, filled in by the landing step.
    tier: Tier | None = None
    archetype: Archetype | None = None
    advice: str | None = None
    version: int = 0  # optimistic concurrency counter, bumped on every save
    created_at: str = Field(default_factory=_now)
    updated_at: str = Field(default_factory=_now)

    @property
    def is_terminal(self) -> bool:
        return self.status != "IN_PROGRESS"


class SessionStats(BaseModel):
    """The slice of a session the post-flight classifier looks at."""

    model_config = ConfigDict(frozen=True)

    current_fuel: float
    current_hull: float
    distance: float
    total_fuel_used: float = 0.0
    high_stability_thrust_count: int = 0
    low_stability_thrust_count: int = 0

    @classmethod
    def from_session(cls, session: FlightSession) -> SessionStats:
        return cls(
            current_fuel=session.current_fuel,
            current_hull=session.current_hull,
            distance=session.distance,
            total_fuel_used=session.total_fuel_used,
            high_stability_thrust_count=session.high_stability_thrust_count,
            low_stability_thrust_count=session.low_stability_thrust_count,
        )


class ResolvedEvent(BaseModel):
    """An event together with its resolution, as revealed after the round."""

    model_config = ConfigDict(frozen=True)

    event_id: int
    is_global: bool
    is_twist: bool
    twist_type: TwistType
    result: EventResolutionResult


class RoundResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    round: int
    fuel_input: float
    events: list[ResolvedEvent]
    total_thrust_multiplier: float
    total_fuel_modifier: float
    total_hull_damage_modifier: float
    overall_positive: bool
    choice: ChoiceResult
    fuel_consumed: float
    distance_gained: float
    hull_damage: float
    next_round: int
    is_game_over: bool
    game_over_reason: str = ""
    final_ending: Ending | None = None


class EndingDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    ending: Ending
    title: str
    description: str


class FlightLogEntry(BaseModel):
    """One row of a session's append-only flight log (a tick or a round)."""

    round: int = 1
    y_value: float = 0.0
    fuel_input: float
    fuel_after: float
    hull_after: float
    distance_after: float
    thrust_multiplier: float | None = None
    event_description: str | None = None
    is_positive_event: bool | None = None
    user_chose_fuel: bool | None = None
    is_correct_choice: bool | None = None
    timestamp: str = Field(default_factory=_now)


class TickReport(BaseModel):
    """Outcome of one tick-mode sync, after clamping and termination checks."""

    model_config = ConfigDict(frozen=True)

    change_rate: float
    is_stable: bool
    tick: TickResult
    progress: float
    status: SessionStatus
    is_game_over: bool
    game_over_reason: str = ""


class LandingReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    tier: Tier
    settlement_name: str
    settlement_description: str
    archetype: Archetype
    archetype_label: str
    advice: str
    stats: SessionStats
