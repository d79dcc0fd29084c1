"""Skill model: cumulative player stats and the metrics derived from them.

``record_outcome`` folds one finished level into ``PlayerStats``;
``derive_skill_metrics`` rebuilds ``SkillMetrics`` from scratch out of those
stats plus the recent level history. Both are pure: inputs are never
mutated, a new snapshot is returned.
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

from guesswork.engine.levels import GameMode, round_half_up
from guesswork.engine.results import LevelResult

HISTORY_SIZE = 20
RECENT_WINDOW = 10
CONSISTENCY_WINDOW = 5
MIN_SAMPLES = 3
BLEND_AFTER_GAMES = 5
# Solve times (seconds) at or above this never count towards reaction speed.
REACTION_TIME_THRESHOLD = 30000

SKILL_FLOOR = 10
SKILL_CEILING = 100

_SKILL_NAMES: list[tuple[int, str]] = [
    (90, "Master"),
    (75, "Expert"),
    (60, "Advanced"),
    (45, "Intermediate"),
    (30, "Beginner"),
]


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _running_mean(old: float, count: int, value: float) -> float:
    return (old * (count - 1) + value) / count


@dataclass(frozen=True)
class ModeStats:
    games_played: int = 0
    wins: int = 0
    current_streak: int = 0
    best_streak: int = 0
    average_attempts: float = 0.0

    def to_dict(self) -> dict:
        return {
            "gamesPlayed": self.games_played,
            "wins": self.wins,
            "currentStreak": self.current_streak,
            "bestStreak": self.best_streak,
            "averageAttempts": self.average_attempts,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ModeStats:
        return cls(
            games_played=data.get("gamesPlayed", 0),
            wins=data.get("wins", 0),
            current_streak=data.get("currentStreak", 0),
            best_streak=data.get("bestStreak", 0),
            average_attempts=data.get("averageAttempts", 0.0),
        )


def _empty_mode_stats() -> dict[GameMode, ModeStats]:
    return {mode: ModeStats() for mode in GameMode}


@dataclass(frozen=True)
class PlayerStats:
    total_games: int = 0
    total_wins: int = 0
    total_losses: int = 0
    current_streak: int = 0
    best_streak: int = 0
    average_attempts: float = 0.0
    average_time: float = 0.0
    accuracy_history: tuple[float, ...] = ()
    reaction_times: tuple[int, ...] = ()
    mode_stats: dict[GameMode, ModeStats] = field(default_factory=_empty_mode_stats)
    last_played_at: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "totalGames": self.total_games,
            "totalWins": self.total_wins,
            "totalLosses": self.total_losses,
            "currentStreak": self.current_streak,
            "bestStreak": self.best_streak,
            "averageAttempts": self.average_attempts,
            "averageTime": self.average_time,
            "accuracyHistory": list(self.accuracy_history),
            "reactionTimes": list(self.reaction_times),
            "modeStats": {m.value: s.to_dict() for m, s in self.mode_stats.items()},
            "lastPlayedAt": self.last_played_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PlayerStats:
        mode_stats = _empty_mode_stats()
        for key, raw in data.get("modeStats", {}).items():
            mode_stats[GameMode(key)] = ModeStats.from_dict(raw)
        return cls(
            total_games=data.get("totalGames", 0),
            total_wins=data.get("totalWins", 0),
            total_losses=data.get("totalLosses", 0),
            current_streak=data.get("currentStreak", 0),
            best_streak=data.get("bestStreak", 0),
            average_attempts=data.get("averageAttempts", 0.0),
            average_time=data.get("averageTime", 0.0),
            accuracy_history=tuple(data.get("accuracyHistory", [])),
            reaction_times=tuple(data.get("reactionTimes", [])),
            mode_stats=mode_stats,
            last_played_at=data.get("lastPlayedAt"),
        )


@dataclass(frozen=True)
class SkillMetrics:
    skill_level: float = 50.0
    success_rate: float = 0.5
    consistency_score: float = 0.5
    reaction_speed: float = 0.5
    failure_streak: int = 0
    win_streak: int = 0
    difficulty_modifier: float = 1.0

    def to_dict(self) -> dict:
        return {
            "skillLevel": self.skill_level,
            "successRate": self.success_rate,
            "consistencyScore": self.consistency_score,
            "reactionSpeed": self.reaction_speed,
            "failureStreak": self.failure_streak,
            "winStreak": self.win_streak,
            "difficultyModifier": self.difficulty_modifier,
        }

    @classmethod
    def from_dict(cls, data: dict) -> SkillMetrics:
        defaults = cls()
        return cls(
            skill_level=data.get("skillLevel", defaults.skill_level),
            success_rate=data.get("successRate", defaults.success_rate),
            consistency_score=data.get("consistencyScore", defaults.consistency_score),
            reaction_speed=data.get("reactionSpeed", defaults.reaction_speed),
            failure_streak=data.get("failureStreak", defaults.failure_streak),
            win_streak=data.get("winStreak", defaults.win_streak),
            difficulty_modifier=data.get("difficultyModifier", defaults.difficulty_modifier),
        )


def initial_stats() -> PlayerStats:
    return PlayerStats()


def initial_metrics() -> SkillMetrics:
    return SkillMetrics()


def _update_mode_stats(mode_stats: ModeStats, result: LevelResult) -> ModeStats:
    games = mode_stats.games_played + 1
    if result.won:
        streak = mode_stats.current_streak + 1
        wins = mode_stats.wins + 1
    else:
        streak = 0
        wins = mode_stats.wins
    return ModeStats(
        games_played=games,
        wins=wins,
        current_streak=streak,
        best_streak=max(mode_stats.best_streak, streak),
        average_attempts=_running_mean(mode_stats.average_attempts, games, result.attempts_used),
    )


def record_outcome(stats: PlayerStats, result: LevelResult) -> PlayerStats:
    """Fold one finished level into a new ``PlayerStats``."""
    games = stats.total_games + 1

    if result.won:
        wins, losses = stats.total_wins + 1, stats.total_losses
        streak = stats.current_streak + 1
    else:
        wins, losses = stats.total_wins, stats.total_losses + 1
        streak = 0

    average_time = stats.average_time
    reaction_times = stats.reaction_times
    if result.time_used is not None:
        # Averaged over all games, not just the timed ones.
        average_time = _running_mean(stats.average_time, games, result.time_used)
        if result.time_used < REACTION_TIME_THRESHOLD:
            reaction_times = (reaction_times + (result.time_used,))[-HISTORY_SIZE:]

    mode_stats = dict(stats.mode_stats)
    mode_stats[result.game_mode] = _update_mode_stats(
        mode_stats.get(result.game_mode, ModeStats()), result,
    )

    return replace(
        stats,
        total_games=games,
        total_wins=wins,
        total_losses=losses,
        current_streak=streak,
        best_streak=max(stats.best_streak, streak),
        average_attempts=_running_mean(stats.average_attempts, games, result.attempts_used),
        average_time=average_time,
        accuracy_history=(stats.accuracy_history + (result.accuracy,))[-HISTORY_SIZE:],
        reaction_times=reaction_times,
        mode_stats=mode_stats,
        last_played_at=result.completed_at or stats.last_played_at,
    )


def _streaks(recent: Sequence[LevelResult]) -> tuple[int, int]:
    """(win_streak, failure_streak) of the run ending at the latest result."""
    win_streak = failure_streak = 0
    for result in reversed(recent):
        if result.won:
            if failure_streak:
                break
            win_streak += 1
        else:
            if win_streak:
                break
            failure_streak += 1
    return win_streak, failure_streak


def _consistency(accuracy_history: Sequence[float]) -> float:
    if len(accuracy_history) < MIN_SAMPLES:
        return 0.5
    window = list(accuracy_history[-CONSISTENCY_WINDOW:])
    return _clamp(1 - statistics.pstdev(window), 0.0, 1.0)


def _reaction_speed(reaction_times: Sequence[int]) -> float:
    if len(reaction_times) < MIN_SAMPLES:
        return 0.5
    return _clamp(1 - statistics.fmean(reaction_times) / REACTION_TIME_THRESHOLD, 0.0, 1.0)


def derive_skill_metrics(stats: PlayerStats, recent_results: Sequence[LevelResult]) -> SkillMetrics:
    """Recompute skill metrics from lifetime stats and the last few results."""
    recent = list(recent_results)[-RECENT_WINDOW:]

    overall_rate = stats.total_wins / stats.total_games if stats.total_games > 0 else 0.5
    recent_rate = sum(1 for r in recent if r.won) / len(recent) if recent else 0.5

    if stats.total_games < BLEND_AFTER_GAMES:
        success_rate = recent_rate
    else:
        success_rate = overall_rate * 0.3 + recent_rate * 0.7

    consistency = _consistency(stats.accuracy_history)
    reaction_speed = _reaction_speed(stats.reaction_times)
    win_streak, failure_streak = _streaks(recent)

    raw_skill = (
        success_rate * 40
        + consistency * 30
        + reaction_speed * 30
        + win_streak * 2
        - failure_streak * 3
    )
    skill_level = _clamp(raw_skill, SKILL_FLOOR, SKILL_CEILING)

    # Not consumed by generate_level yet.
    modifier = 1.0
    if failure_streak >= 3:
        modifier = max(0.6, 1 - failure_streak * 0.1)
    elif win_streak >= 5:
        modifier = min(1.4, 1 + win_streak * 0.05)

    return SkillMetrics(
        skill_level=skill_level,
        success_rate=success_rate,
        consistency_score=consistency,
        reaction_speed=reaction_speed,
        failure_streak=failure_streak,
        win_streak=win_streak,
        difficulty_modifier=modifier,
    )


def compute_accuracy(attempts_used: int, max_attempts: int, range_size: int) -> float:
    """Efficiency against the binary-search optimum, in [0, 1] at 0.01 steps."""
    if max_attempts <= 0:
        raise ValueError(f"max_attempts must be positive, got {max_attempts}")
    if range_size < 1:
        raise ValueError(f"range_size must be >= 1, got {range_size}")
    if attempts_used < 0:
        raise ValueError(f"attempts_used must be non-negative, got {attempts_used}")

    optimal = math.ceil(math.log2(range_size))
    efficiency = _clamp(1 - (attempts_used - optimal) / max_attempts, 0.0, 1.0)
    return round_half_up(efficiency * 100) / 100


def skill_level_name(skill_level: float) -> str:
    for floor, name in _SKILL_NAMES:
        if skill_level >= floor:
            return name
    return "Novice"
