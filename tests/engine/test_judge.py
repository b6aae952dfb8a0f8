"""Tests for mars_flight.engine.judge."""

import pytest

from mars_flight.config import EngineConfig
from mars_flight.engine import explain_choice, judge_choice


@pytest.mark.parametrize(
    ("fuel_input", "is_positive", "chose_fuel", "correct"),
    [
        (80, True, True, True),
        (80, False, True, False),
        (20, False, False, True),
        (20, True, False, False),
        (50, True, True, True),
        (49.9, True, False, False),
        (0, False, False, True),
        (100, False, True, False),
    ],
)
def test_judge_truth_table(fuel_input, is_positive, chose_fuel, correct) -> None:
    result = judge_choice(fuel_input, is_positive)
    assert result.user_chose_fuel is chose_fuel
    assert result.is_correct_choice is correct


def test_threshold_from_config() -> None:
    config = EngineConfig(high_thrust_threshold=70)
    assert judge_choice(60, True, config).user_chose_fuel is False
    assert judge_choice(70, True, config).user_chose_fuel is True


def test_explanations_cover_all_outcomes() -> None:
    labels = {
        explain_choice(correct, positive)
        for correct in (True, False)
        for positive in (True, False)
    }
    assert labels == {
        "Spotted the upside",
        "Dodged the downside",
        "Missed the upside",
        "Flew into the downside",
    }
