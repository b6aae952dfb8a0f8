"""Post-flight classification: tier, behavioural archetype, final ending.

Tier
  distance short of the target → F, whatever fuel and hull are left.
  Otherwise the first of S, A, B, C, D whose (min_fuel, min_hull) are both met.

Archetype (ordered, first match wins)
  no high-input actions                         DEFENSIVE
  low-stability ratio  > 0.4                    RISK_TAKER
  high-stability ratio > 0.7 and fuel used > 50 AGGRESSIVE_GROWTH
  fuel used < 30                                DEFENSIVE
  high ratio > 0.6 and low ratio < 0.2          CAUTIOUS_VALUE
  otherwise                                     BALANCED_INVESTOR

Final ending (round mode), by correct answers out of six
  >= 6 INVASION, >= 4 MARS, >= 2 STRANDED, otherwise CRASH
"""

from __future__ import annotations

from mars_flight.config import DEFAULT_CONFIG, EngineConfig
from mars_flight.models import Archetype, EndingDescriptor, SessionStats, Tier

TIER_ORDER: tuple[Tier, ...] = ("S", "A", "B", "C", "D")

ARCHETYPE_LABELS: dict[Archetype, str] = {
    "AGGRESSIVE_GROWTH": "Aggressive growth investor",
    "BALANCED_INVESTOR": "Balanced investor",
    "CAUTIOUS_VALUE": "Cautious value investor",
    "RISK_TAKER": "Risk taker",
    "DEFENSIVE": "Defensive investor",
}

_ADVICE: dict[Archetype, str] = {
    "AGGRESSIVE_GROWTH": (
        "You ride rising markets hard. The returns can be big, but in real markets "
        "spread your bets to keep the risk in check."
    ),
    "BALANCED_INVESTOR": (
        "You balanced risk and reward well. Keep the long view and it should pay off."
    ),
    "CAUTIOUS_VALUE": (
        "A careful value investor. Companies with solid asset value (low PBR) tend "
        "to deliver steady returns."
    ),
    "RISK_TAKER": (
        "You enjoy volatility. In real markets, mind your hull (PBR) too and get in "
        "the habit of setting a stop-loss."
    ),
    "DEFENSIVE": (
        "Safety first. You protect your capital well, but some measured risk helps "
        "it grow."
    ),
}

SETTLEMENTS: dict[Tier, dict[str, str]] = {
    "S": {"name": "Mega Doge City", "description": "A golden city rises on Mars!"},
    "A": {"name": "Doge Colony", "description": "A stable settlement has taken root."},
    "B": {"name": "Doge Village", "description": "A peaceful village was founded."},
    "C": {"name": "Doge Camp", "description": "The crew struggled but pitched a camp."},
    "D": {"name": "Doge Tents", "description": "Barely made it; a few small tents stand."},
    "F": {"name": "Landing failed", "description": "The rocket never reached Mars..."},
}

_ENDINGS: dict[str, tuple[str, str]] = {
    "INVASION": (
        "Earth invasion",
        "Flawless fuel management. Doge City grew on Mars and turned its eyes to Earth.",
    ),
    "MARS": (
        "Safe landing",
        "Efficient fuel use brought the crew safely down on Mars.",
    ),
    "STRANDED": (
        "Stranded in orbit",
        "Enough right calls to reach Mars orbit, but not enough fuel to land.",
    ),
    "CRASH": (
        "Crash",
        "Wasted fuel left the rocket short of Mars.",
    ),
}


def classify_tier(stats: SessionStats, config: EngineConfig = DEFAULT_CONFIG) -> Tier:
    if stats.distance < config.target_distance:
        return "F"
    for tier in TIER_ORDER:
        threshold = getattr(config.tiers, tier)
        if stats.current_fuel >= threshold.min_fuel and stats.current_hull >= threshold.min_hull:
            return tier
    return "D"


def classify_archetype(stats: SessionStats) -> Archetype:
    high = stats.high_stability_thrust_count
    low = stats.low_stability_thrust_count
    total_actions = high + low
    if total_actions == 0:
        return "DEFENSIVE"

    low_ratio = low / total_actions
    high_ratio = high / total_actions
    fuel_used = stats.total_fuel_used

    if low_ratio > 0.4:
        return "RISK_TAKER"
    if high_ratio > 0.7 and fuel_used > 50:
        return "AGGRESSIVE_GROWTH"
    if fuel_used < 30:
        return "DEFENSIVE"
    if high_ratio > 0.6 and low_ratio < 0.2:
        return "CAUTIOUS_VALUE"
    return "BALANCED_INVESTOR"


def final_ending(correct_answers: int, config: EngineConfig = DEFAULT_CONFIG) -> EndingDescriptor:
    if correct_answers >= config.invasion_min_correct:
        ending = "INVASION"
    elif correct_answers >= config.mars_min_correct:
        ending = "MARS"
    elif correct_answers >= config.stranded_min_correct:
        ending = "STRANDED"
    else:
        ending = "CRASH"
    title, description = _ENDINGS[ending]
    return EndingDescriptor(ending=ending, title=title, description=description)


def advice_for(archetype: Archetype, tier: Tier) -> str:
    advice = _ADVICE[archetype]
    if tier == "S":
        advice += " You reached Mars at peak efficiency. Go build Mega Doge City!"
    elif tier == "F":
        advice += " You didn't make it to Mars this time. Watch your fuel more closely next run."
    return advice
