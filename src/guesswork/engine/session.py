"""Game controller state machine: idle -> playing <-> paused -> finished.

Every event replaces the current ``GameState`` snapshot with a new one.
Elapsed time is never accumulated by a background loop; it is derived from
``start_time`` and the injected clock whenever it is asked for.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional

from guesswork.engine.hints import evaluate_guess
from guesswork.engine.levels import LevelParams, generate_level
from guesswork.engine.results import GuessResult, LevelResult
from guesswork.engine.skill import (
    RECENT_WINDOW,
    PlayerStats,
    SkillMetrics,
    compute_accuracy,
    derive_skill_metrics,
    initial_metrics,
    initial_stats,
    record_outcome,
)

logger = logging.getLogger("guesswork.session")

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class Phase(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


class SessionError(RuntimeError):
    """An event arrived that the current phase does not accept."""


@dataclass(frozen=True)
class GameState:
    level: Optional[LevelParams] = None
    guesses: tuple[GuessResult, ...] = ()
    phase: Phase = Phase.IDLE
    start_time: Optional[int] = None  # ms; shifted on resume
    elapsed_ms: int = 0  # frozen value while not playing
    won: Optional[bool] = None
    next_level: Optional[LevelParams] = None  # queued after a win

    @property
    def attempts_used(self) -> int:
        return len(self.guesses)

    @property
    def attempts_left(self) -> int:
        if self.level is None:
            return 0
        return self.level.max_attempts - len(self.guesses)


class GameController:
    """Owns one player's session and routes gameplay events through the engine."""

    def __init__(
        self,
        clock: Optional[Clock] = None,
        stats: Optional[PlayerStats] = None,
        history: Optional[list[LevelResult]] = None,
        level_number: int = 1,
    ):
        self.clock = clock or wall_clock_ms
        self.stats = stats or initial_stats()
        # Only the window the skill model reads; the store keeps the full log.
        self.history: tuple[LevelResult, ...] = tuple(history or ())[-RECENT_WINDOW:]
        self.metrics: SkillMetrics = (
            derive_skill_metrics(self.stats, self.history) if self.history else initial_metrics()
        )
        self.level_number = level_number
        self.state = GameState()
        self._listeners: list[Callable[[LevelResult], None]] = []

    # --- derived values ---

    @property
    def elapsed_ms(self) -> int:
        if self.state.phase is Phase.PLAYING and self.state.start_time is not None:
            return max(0, self.clock() - self.state.start_time)
        return self.state.elapsed_ms

    @property
    def elapsed_seconds(self) -> int:
        return self.elapsed_ms // 1000

    @property
    def time_remaining(self) -> Optional[int]:
        """Seconds left on a timed level, None when untimed."""
        level = self.state.level
        if level is None or level.time_limit is None:
            return None
        return max(0, level.time_limit - self.elapsed_seconds)

    @property
    def has_saved_game(self) -> bool:
        return self.state.level is not None and self.state.phase is not Phase.PLAYING

    @property
    def active_level(self) -> Optional[LevelParams]:
        """The level a continue or restart would act on."""
        return self.state.next_level or self.state.level

    @property
    def saved_level(self) -> Optional[LevelParams]:
        """The level a later session should load.

        A lost level is never saved as-is: its target has been played out, so
        the retry that ``continue_game`` would start is saved instead.
        """
        if self.state.phase is Phase.FINISHED and self.state.won is False:
            return self._retry(self.state.level)
        return self.active_level

    def on_complete(self, listener: Callable[[LevelResult], None]) -> None:
        """Register a callback fired with each finished LevelResult."""
        self._listeners.append(listener)

    # --- events ---

    def start_new_game(self) -> GameState:
        self.level_number = 1
        level = generate_level(1, self.metrics, seed=self.clock() + 1)
        return self._begin(level)

    def continue_game(self) -> GameState:
        """Resume the saved level, or start over when there is none."""
        if self.state.level is None:
            return self.start_new_game()
        if self.state.phase is Phase.FINISHED:
            if self.state.next_level is not None:
                return self._begin(self.state.next_level)
            return self.restart_level()
        self.state = replace(
            self.state,
            phase=Phase.PLAYING,
            start_time=self.clock() - self.state.elapsed_ms,
        )
        return self.state

    def load_level(self, level: LevelParams) -> GameState:
        """Queue a previously saved level without starting the clock."""
        self.level_number = level.level_number
        self.state = GameState(level=level, phase=Phase.IDLE)
        return self.state

    def submit_guess(self, guess: int) -> GuessResult:
        # The deadline is checked before the guess is judged.
        self.tick()
        self._require(Phase.PLAYING, "guess")
        level = self.state.level
        if not level.range_min <= guess <= level.range_max:
            raise ValueError(
                f"Guess {guess} outside range {level.range_min}..{level.range_max}"
            )

        now = self.clock()
        if guess == level.target_number:
            result = GuessResult(guess=guess, feedback="correct", timestamp=now)
            self.state = replace(self.state, guesses=self.state.guesses + (result,))
            self._complete(won=True)
            return result

        hint = evaluate_guess(
            guess,
            level.target_number,
            level.hint_style,
            level.max_attempts - len(self.state.guesses) - 1,
        )
        result = GuessResult(
            guess=guess,
            feedback=hint.feedback,
            hint=hint.hint,
            penalty=hint.penalty,
            timestamp=now,
        )
        self.state = replace(self.state, guesses=self.state.guesses + (result,))

        if len(self.state.guesses) >= level.max_attempts:
            self._complete(won=False)
        return result

    def tick(self) -> GameState:
        """Check the clock; a timed level that has run out is lost."""
        if self.state.phase is not Phase.PLAYING:
            return self.state
        level = self.state.level
        if level.time_limit is not None and self.elapsed_ms >= level.time_limit * 1000:
            logger.info("level %d timed out after %ds", level.level_number, level.time_limit)
            self._complete(won=False)
        return self.state

    def pause(self) -> GameState:
        self._require(Phase.PLAYING, "pause")
        self.state = replace(self.state, phase=Phase.PAUSED, elapsed_ms=self.elapsed_ms)
        return self.state

    def resume(self) -> GameState:
        self._require(Phase.PAUSED, "resume")
        self.state = replace(
            self.state,
            phase=Phase.PLAYING,
            start_time=self.clock() - self.state.elapsed_ms,
        )
        return self.state

    def restart_level(self) -> GameState:
        """Replay the current level number with the next seed."""
        current = self.active_level
        if current is None:
            raise SessionError("No level to restart")
        return self._begin(self._retry(current))

    def go_to_main_menu(self) -> GameState:
        if self.state.phase is Phase.PLAYING:
            self.state = replace(self.state, phase=Phase.IDLE, elapsed_ms=self.elapsed_ms)
        elif self.state.phase is Phase.PAUSED:
            self.state = replace(self.state, phase=Phase.IDLE)
        return self.state

    def reset_progress(self) -> GameState:
        self.stats = initial_stats()
        self.metrics = initial_metrics()
        self.history = ()
        self.level_number = 1
        self.state = GameState()
        return self.state

    # --- internals ---

    def _require(self, phase: Phase, action: str) -> None:
        if self.state.phase is not phase:
            raise SessionError(f"Cannot {action} while {self.state.phase.value}")

    def _retry(self, level: LevelParams) -> LevelParams:
        return generate_level(level.level_number, self.metrics, seed=level.seed + 1)

    def _begin(self, level: LevelParams) -> GameState:
        self.level_number = level.level_number
        self.state = GameState(level=level, phase=Phase.PLAYING, start_time=self.clock())
        return self.state

    def _complete(self, won: bool) -> LevelResult:
        level = self.state.level
        elapsed = self.elapsed_ms
        guesses = self.state.guesses
        result = LevelResult(
            level_number=self.level_number,
            won=won,
            attempts_used=len(guesses),
            max_attempts=level.max_attempts,
            accuracy=compute_accuracy(len(guesses), level.max_attempts, level.range_size),
            game_mode=level.game_mode,
            target_number=level.target_number,
            time_used=elapsed // 1000,
            time_limit=level.time_limit,
            guesses=guesses,
            completed_at=self.clock(),
        )

        self.history = (self.history + (result,))[-RECENT_WINDOW:]
        self.stats = record_outcome(self.stats, result)
        self.metrics = derive_skill_metrics(self.stats, self.history)
        logger.info(
            "level %d %s in %d/%d attempts, skill now %.1f",
            result.level_number, "won" if won else "lost",
            result.attempts_used, result.max_attempts, self.metrics.skill_level,
        )

        next_level = None
        if won:
            self.level_number += 1
            next_level = generate_level(
                self.level_number, self.metrics, seed=self.clock() + self.level_number,
            )
        self.state = replace(
            self.state,
            phase=Phase.FINISHED,
            elapsed_ms=elapsed,
            won=won,
            next_level=next_level,
        )

        for listener in self._listeners:
            listener(result)
        return result
