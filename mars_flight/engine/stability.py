"""Signal stability: percent change between two consecutive values."""

from __future__ import annotations

from mars_flight.config import DEFAULT_CONFIG, EngineConfig


def resolve_stability(current: float, previous: float) -> float:
    """Percent change from previous to current. 0 when previous is 0."""
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def is_stable(change_rate: float, config: EngineConfig = DEFAULT_CONFIG) -> bool:
    return change_rate >= config.stability_threshold
