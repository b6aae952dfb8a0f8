"""Flight engine — pure functions over the domain models.

  resolve_stability(current, previous)          percent change, 0-guarded
  tick_physics(fuel_input, rate, profile)       fuel / distance / hull deltas
  resolve_event(event, profile, rocket_id)      one event's modifiers
  resolve_round(session, events, profile, fuel) round mode, returns a new session
  sync_tick(session, profile, fuel, y, prev_y)  tick mode, returns a new session
  judge_choice(fuel_input, is_positive)         correctness of the player's call
  classify_tier(stats) / classify_archetype(stats) / final_ending(correct)

Every function takes an optional EngineConfig; none performs I/O or keeps state.
"""

from .classifier import (  # noqa: F401
    ARCHETYPE_LABELS,
    SETTLEMENTS,
    advice_for,
    classify_archetype,
    classify_tier,
    final_ending,
)
from .events import NEUTRAL_RESULT, resolve_event  # noqa: F401
from .judge import explain_choice, judge_choice  # noqa: F401
from .physics import (  # noqa: F401
    distance_change,
    fuel_consumption,
    hull_damage,
    tick_physics,
)
from .rounds import (  # noqa: F401
    ComposedEffect,
    begin_round,
    compose_events,
    land,
    open_briefing,
    resolve_round,
    sync_tick,
)
from .stability import is_stable, resolve_stability  # noqa: F401
