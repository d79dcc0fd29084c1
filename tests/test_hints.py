"""Tests for guess feedback and hints."""

import pytest

from guesswork.engine.hints import CRITICAL_HINT, HintResult, evaluate_guess
from guesswork.engine.levels import HintStyle


class TestDirection:
    def test_low_guess_says_higher(self):
        assert evaluate_guess(3, 7, HintStyle.BASIC, 4).feedback == "higher"

    def test_high_guess_says_lower(self):
        assert evaluate_guess(9, 7, HintStyle.BASIC, 4).feedback == "lower"

    def test_basic_has_no_extras(self):
        result = evaluate_guess(3, 7, HintStyle.BASIC, 1)
        assert result == HintResult("higher")
        assert result.to_dict() == {"feedback": "higher"}


class TestDistance:
    @pytest.mark.parametrize("guess,expected", [
        (48, "Very close!"),
        (52, "Very close!"),
        (45, "Getting warm"),
        (40, "Moderate distance"),
        (39, "Far away"),
    ])
    def test_bands(self, guess, expected):
        assert evaluate_guess(guess, 50, HintStyle.DISTANCE, 5).hint == expected


class TestHotCold:
    def test_burning_at_five_percent(self):
        result = evaluate_guess(45, 50, "hot_cold", 3)
        assert result.feedback == "higher"
        assert result.hint == "Burning hot!"
        assert result.penalty is None
        assert "penalty" not in result.to_dict()

    @pytest.mark.parametrize("distance,expected", [
        (10, "Very hot"),
        (20, "Warm"),
        (40, "Cool"),
        (41, "Freezing cold"),
    ])
    def test_bands_use_fixed_scale(self, distance, expected):
        assert evaluate_guess(100, 100 + distance, HintStyle.HOT_COLD, 3).hint == expected


class TestPenalty:
    def test_critical_when_two_left(self):
        result = evaluate_guess(1, 5, HintStyle.PENALTY, 2)
        assert result.hint == CRITICAL_HINT
        assert result.penalty == 1

    def test_quiet_with_attempts_to_spare(self):
        result = evaluate_guess(1, 5, HintStyle.PENALTY, 3)
        assert result.hint is None
        assert result.penalty == 0
        assert result.to_dict() == {"feedback": "higher", "penalty": 0}


def test_idempotent():
    first = evaluate_guess(12, 40, HintStyle.DISTANCE, 2)
    assert all(evaluate_guess(12, 40, HintStyle.DISTANCE, 2) == first for _ in range(5))


def test_unknown_style_rejected():
    with pytest.raises(ValueError):
        evaluate_guess(1, 2, "telepathy", 3)
