"""Directional feedback and mode-specific hints for a wrong guess."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from guesswork.engine.levels import HintStyle

# Fixed denominator regardless of the level's range size.
HOT_COLD_SCALE = 100
CRITICAL_ATTEMPTS = 2

DISTANCE_BANDS: list[tuple[int, str]] = [
    (2, "Very close!"),
    (5, "Getting warm"),
    (10, "Moderate distance"),
]
DISTANCE_FAR = "Far away"

HOT_COLD_BANDS: list[tuple[float, str]] = [
    (0.05, "Burning hot!"),
    (0.1, "Very hot"),
    (0.2, "Warm"),
    (0.4, "Cool"),
]
HOT_COLD_FREEZING = "Freezing cold"

CRITICAL_HINT = "Critical! Limited attempts"


@dataclass(frozen=True)
class HintResult:
    feedback: str  # "higher" or "lower"
    hint: Optional[str] = None
    penalty: Optional[int] = None

    def to_dict(self) -> dict:
        d: dict = {"feedback": self.feedback}
        if self.hint is not None:
            d["hint"] = self.hint
        if self.penalty is not None:
            d["penalty"] = self.penalty
        return d


def _band(value: float, bands, fallback: str) -> str:
    for limit, text in bands:
        if value <= limit:
            return text
    return fallback


def evaluate_guess(
    guess: int,
    target: int,
    hint_style: HintStyle | str,
    attempts_left: int,
) -> HintResult:
    """Feedback for a guess that missed ``target``.

    The caller handles the exact-match case before calling this.
    """
    style = HintStyle(hint_style)
    feedback = "higher" if guess < target else "lower"
    distance = abs(target - guess)

    if style is HintStyle.DISTANCE:
        return HintResult(feedback, hint=_band(distance, DISTANCE_BANDS, DISTANCE_FAR))

    if style is HintStyle.HOT_COLD:
        ratio = distance / HOT_COLD_SCALE
        return HintResult(feedback, hint=_band(ratio, HOT_COLD_BANDS, HOT_COLD_FREEZING))

    if style is HintStyle.PENALTY:
        if attempts_left <= CRITICAL_ATTEMPTS:
            return HintResult(feedback, hint=CRITICAL_HINT, penalty=1)
        return HintResult(feedback, penalty=0)

    return HintResult(feedback)
