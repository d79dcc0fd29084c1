"""Shared fixtures for Guesswork tests."""

from __future__ import annotations

import pytest

from guesswork.engine.levels import GameMode, HintStyle, LevelParams
from guesswork.engine.results import LevelResult
from guesswork.engine.skill import SkillMetrics
from guesswork.state.store import ProfileStore


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def default_metrics():
    return SkillMetrics()


@pytest.fixture
def store(tmp_path):
    return ProfileStore(db_path=tmp_path / "data" / "profile.db")


def make_result(
    won: bool = True,
    attempts_used: int = 3,
    accuracy: float = 0.8,
    game_mode: GameMode = GameMode.CLASSIC,
    time_used: int | None = None,
    level_number: int = 1,
    completed_at: int = 0,
) -> LevelResult:
    return LevelResult(
        level_number=level_number,
        won=won,
        attempts_used=attempts_used,
        max_attempts=5,
        accuracy=accuracy,
        game_mode=game_mode,
        target_number=7,
        time_used=time_used,
        completed_at=completed_at,
    )


def make_level(
    game_mode: GameMode = GameMode.CLASSIC,
    hint_style: HintStyle = HintStyle.BASIC,
    range_min: int = 1,
    range_max: int = 10,
    max_attempts: int = 5,
    time_limit: int | None = None,
    target_number: int = 5,
    seed: int = 42,
    level_number: int = 1,
) -> LevelParams:
    return LevelParams(
        seed=seed,
        level_number=level_number,
        range_min=range_min,
        range_max=range_max,
        max_attempts=max_attempts,
        time_limit=time_limit,
        game_mode=game_mode,
        target_number=target_number,
        hint_style=hint_style,
        difficulty_score=0,
    )
