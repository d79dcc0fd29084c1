"""Level synthesizer: skill metrics + seed -> balanced LevelParams."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from guesswork.engine.rng import SeededRandom

logger = logging.getLogger("guesswork.levels")

RANGE_CEILING = 1000
MIN_ATTEMPTS = 2
MIN_TIME_LIMIT = 10


class GameMode(str, Enum):
    CLASSIC = "classic"
    DEPTH = "depth"
    STRATEGIC = "strategic"
    TACTICAL = "tactical"


class HintStyle(str, Enum):
    BASIC = "basic"
    DISTANCE = "distance"
    PENALTY = "penalty"
    HOT_COLD = "hot_cold"


_MODES = [GameMode.CLASSIC, GameMode.DEPTH, GameMode.STRATEGIC, GameMode.TACTICAL]

BASE_RANGES: dict[GameMode, tuple[int, int]] = {
    GameMode.CLASSIC: (1, 10),
    GameMode.DEPTH: (1, 16),
    GameMode.STRATEGIC: (1, 8),
    GameMode.TACTICAL: (1, 20),
}

BASE_ATTEMPTS: dict[GameMode, int] = {
    GameMode.CLASSIC: 5,
    GameMode.DEPTH: 6,
    GameMode.STRATEGIC: 4,
    GameMode.TACTICAL: 3,
}

TIME_LIMITS: dict[GameMode, Optional[int]] = {
    GameMode.CLASSIC: None,
    GameMode.DEPTH: None,
    GameMode.STRATEGIC: 60,
    GameMode.TACTICAL: 30,
}

HINT_STYLES: dict[GameMode, HintStyle] = {
    GameMode.CLASSIC: HintStyle.BASIC,
    GameMode.DEPTH: HintStyle.DISTANCE,
    GameMode.STRATEGIC: HintStyle.PENALTY,
    GameMode.TACTICAL: HintStyle.HOT_COLD,
}

_DESCRIPTIONS = {
    GameMode.CLASSIC: "Pure logic and deduction. No time limits, straightforward hints.",
    GameMode.DEPTH: "Mining for numbers. Deeper ranges with distance-based hints.",
    GameMode.STRATEGIC: "Think carefully. Penalties for running low on attempts.",
    GameMode.TACTICAL: "Fast-paced action. Tight time limits and thermal hints.",
}


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (builtin round() is banker's)."""
    return math.floor(value + 0.5)


def min_attempts_for(range_size: int) -> int:
    """Attempts a binary search needs to cover ``range_size`` values."""
    return math.ceil(math.log2(range_size))


def hint_style_for(mode: GameMode | str) -> HintStyle:
    return HINT_STYLES[GameMode(mode)]


def mode_description(mode: GameMode | str) -> str:
    return _DESCRIPTIONS[GameMode(mode)]


@dataclass(frozen=True)
class LevelParams:
    seed: int
    level_number: int
    range_min: int
    range_max: int
    max_attempts: int
    time_limit: Optional[int]
    game_mode: GameMode
    target_number: int
    hint_style: HintStyle
    difficulty_score: int

    @property
    def range_size(self) -> int:
        return self.range_max - self.range_min + 1

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "levelNumber": self.level_number,
            "rangeMin": self.range_min,
            "rangeMax": self.range_max,
            "maxAttempts": self.max_attempts,
            "timeLimit": self.time_limit,
            "gameMode": self.game_mode.value,
            "targetNumber": self.target_number,
            "hintStyle": self.hint_style.value,
            "difficultyScore": self.difficulty_score,
        }

    @classmethod
    def from_dict(cls, data: dict) -> LevelParams:
        return cls(
            seed=data["seed"],
            level_number=data["levelNumber"],
            range_min=data["rangeMin"],
            range_max=data["rangeMax"],
            max_attempts=data["maxAttempts"],
            time_limit=data.get("timeLimit"),
            game_mode=GameMode(data["gameMode"]),
            target_number=data["targetNumber"],
            hint_style=HintStyle(data["hintStyle"]),
            difficulty_score=data.get("difficultyScore", 0),
        )


def _select_mode(level_number: int, skill_level: float, rng: SeededRandom) -> GameMode:
    if level_number <= 3:
        return GameMode.CLASSIC

    if level_number <= 6:
        return GameMode.CLASSIC if rng.draw() > 0.5 else GameMode.DEPTH

    if level_number <= 10:
        return _MODES[rng.draw_int(0, 2)]

    if skill_level >= 70:
        return _MODES[rng.draw_int(0, 3)]

    roll = rng.draw()
    if roll < 0.3:
        return GameMode.CLASSIC
    if roll < 0.55:
        return GameMode.DEPTH
    if roll < 0.8:
        return GameMode.STRATEGIC
    return GameMode.TACTICAL


def _range_expansion(level_number: int, metrics) -> float:
    expansion = (
        level_number ** 1.3
        * (1 + metrics.skill_level / 100 * 0.5)
        * (1 + metrics.consistency_score * 0.2)
    )
    if metrics.failure_streak > 2:
        expansion *= max(0.5, 1 - metrics.failure_streak * 0.1)
    return expansion


def _attempt_reduction(level_number: int, metrics) -> int:
    if level_number < 5:
        return 0
    reduction = (level_number - 4) // 5
    if metrics.skill_level > 60:
        reduction += 1
    if metrics.failure_streak > 1:
        reduction -= 1
    return max(0, reduction)


def _time_limit(mode: GameMode, level_number: int, failure_streak: int) -> Optional[int]:
    limit = TIME_LIMITS[mode]
    if limit is None:
        return None
    if level_number > 10:
        limit = max(15, limit - (level_number - 10) * 2)
    if failure_streak > 2:
        limit = min(60, limit + 10)
    return limit


def difficulty_score(range_size: int, max_attempts: int, time_limit: Optional[int]) -> int:
    score = math.log2(range_size) * 10
    score += max(0, (10 - max_attempts) * 5)
    if time_limit is not None:
        score += max(0, (60 - time_limit) * 0.5)
    return round_half_up(score)


def generate_level(level_number: int, skill_metrics, seed: Optional[int] = None) -> LevelParams:
    """Synthesize the next level for a player at ``skill_metrics``.

    Without a seed the level is derived from the wall clock (progression);
    pass an explicit seed to get a reproducible level (retries, tests).
    The target is always the final draw from the stream.
    """
    if level_number < 1:
        raise ValueError(f"level_number must be >= 1, got {level_number}")

    actual_seed = seed if seed is not None else int(time.time() * 1000) + level_number
    rng = SeededRandom(actual_seed)

    mode = _select_mode(level_number, skill_metrics.skill_level, rng)

    base_min, base_max = BASE_RANGES[mode]
    expansion = _range_expansion(level_number, skill_metrics)
    range_min = base_min
    range_max = min(RANGE_CEILING, round_half_up(base_max + expansion * (base_max - base_min)))

    max_attempts = max(MIN_ATTEMPTS, BASE_ATTEMPTS[mode] - _attempt_reduction(level_number, skill_metrics))
    time_limit = _time_limit(mode, level_number, skill_metrics.failure_streak)

    target = rng.draw_int(range_min, range_max)

    range_size = range_max - range_min + 1
    score = difficulty_score(range_size, max_attempts, time_limit)

    # Feasibility floor: only ever raises the budget.
    max_attempts = max(max_attempts, min_attempts_for(range_size), MIN_ATTEMPTS)
    if time_limit is not None and time_limit < MIN_TIME_LIMIT:
        time_limit = MIN_TIME_LIMIT

    params = LevelParams(
        seed=actual_seed,
        level_number=level_number,
        range_min=range_min,
        range_max=range_max,
        max_attempts=max_attempts,
        time_limit=time_limit,
        game_mode=mode,
        target_number=target,
        hint_style=hint_style_for(mode),
        difficulty_score=score,
    )
    logger.debug(
        "level %d seed=%d mode=%s range=%d..%d attempts=%d limit=%s score=%d",
        level_number, actual_seed, mode.value, range_min, range_max,
        max_attempts, time_limit, score,
    )
    return params


def regenerate_level(params: LevelParams) -> LevelParams:
    """Same level, new target: one throwaway draw then redraw from ``params.seed``."""
    rng = SeededRandom(params.seed)
    rng.draw()
    target = rng.draw_int(params.range_min, params.range_max)
    return replace(params, target_number=target)
