"""Immutable records of guesses and finished levels."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from guesswork.engine.levels import GameMode

FEEDBACK_VALUES = ("correct", "higher", "lower")


@dataclass(frozen=True)
class GuessResult:
    guess: int
    feedback: str  # "correct", "higher", "lower"
    timestamp: int  # epoch milliseconds
    hint: Optional[str] = None
    penalty: Optional[int] = None

    def __post_init__(self):
        if self.feedback not in FEEDBACK_VALUES:
            raise ValueError(f"Unknown feedback: {self.feedback}")

    def to_dict(self) -> dict:
        return {
            "guess": self.guess,
            "feedback": self.feedback,
            "hint": self.hint,
            "penalty": self.penalty,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> GuessResult:
        return cls(
            guess=data["guess"],
            feedback=data["feedback"],
            timestamp=data.get("timestamp", 0),
            hint=data.get("hint"),
            penalty=data.get("penalty"),
        )


@dataclass(frozen=True)
class LevelResult:
    """Snapshot taken once, when a level is won or its attempts run out."""
    level_number: int
    won: bool
    attempts_used: int
    max_attempts: int
    accuracy: float
    game_mode: GameMode
    target_number: int
    time_used: Optional[int] = None  # milliseconds
    time_limit: Optional[int] = None  # seconds
    guesses: tuple[GuessResult, ...] = field(default_factory=tuple)
    completed_at: int = 0  # epoch milliseconds

    def to_dict(self) -> dict:
        return {
            "levelNumber": self.level_number,
            "won": self.won,
            "attemptsUsed": self.attempts_used,
            "maxAttempts": self.max_attempts,
            "timeUsed": self.time_used,
            "timeLimit": self.time_limit,
            "accuracy": self.accuracy,
            "gameMode": self.game_mode.value,
            "targetNumber": self.target_number,
            "guesses": [g.to_dict() for g in self.guesses],
            "completedAt": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> LevelResult:
        return cls(
            level_number=data["levelNumber"],
            won=bool(data["won"]),
            attempts_used=data["attemptsUsed"],
            max_attempts=data["maxAttempts"],
            accuracy=data["accuracy"],
            game_mode=GameMode(data["gameMode"]),
            target_number=data["targetNumber"],
            time_used=data.get("timeUsed"),
            time_limit=data.get("timeLimit"),
            guesses=tuple(GuessResult.from_dict(g) for g in data.get("guesses", [])),
            completed_at=data.get("completedAt", 0),
        )
