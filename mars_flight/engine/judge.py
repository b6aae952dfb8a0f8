"""Choice judging — the single correctness rule of the round game.

Supplying fuel (input >= 50) is correct exactly when the round's net effect is
favourable; holding back is correct exactly when it is not.
"""

from __future__ import annotations

from mars_flight.config import DEFAULT_CONFIG, EngineConfig
from mars_flight.models import ChoiceResult


def judge_choice(
    fuel_input: float, is_positive_outcome: bool, config: EngineConfig = DEFAULT_CONFIG
) -> ChoiceResult:
    user_chose_fuel = fuel_input >= config.high_thrust_threshold
    return ChoiceResult(
        user_chose_fuel=user_chose_fuel,
        is_correct_choice=is_positive_outcome == user_chose_fuel,
    )


def explain_choice(is_correct: bool, was_positive: bool) -> str:
    """Short label for a judged round, used in the final report."""
    if is_correct:
        return "Spotted the upside" if was_positive else "Dodged the downside"
    return "Missed the upside" if was_positive else "Flew into the downside"
