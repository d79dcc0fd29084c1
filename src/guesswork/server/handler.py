"""Server handler: dispatches JSON-lines requests to engine components."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from guesswork.config.settings import Settings
from guesswork.engine.hints import evaluate_guess
from guesswork.engine.levels import LevelParams, generate_level, mode_description, regenerate_level
from guesswork.engine.results import LevelResult
from guesswork.engine.rng import fresh_seed
from guesswork.engine.session import Clock, GameController
from guesswork.engine.skill import (
    RECENT_WINDOW,
    PlayerStats,
    SkillMetrics,
    compute_accuracy,
    derive_skill_metrics,
    initial_stats,
    record_outcome,
    skill_level_name,
)
from guesswork.state.store import ProfileStore

from .protocol import Notification

logger = logging.getLogger("guesswork.server")


def _require(params: dict, *keys: str) -> None:
    missing = [k for k in keys if k not in params]
    if missing:
        raise ValueError(f"Missing params: {', '.join(missing)}")


def _metrics_from(params: dict) -> SkillMetrics:
    return SkillMetrics.from_dict(params.get("skillMetrics") or {})


def _stats_from(params: dict) -> PlayerStats:
    raw = params.get("stats")
    return PlayerStats.from_dict(raw) if raw else initial_stats()


class ServerHandler:
    """Routes incoming requests to engine functions and returns result dicts."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        write_notification: Optional[Callable[[Notification], None]] = None,
        store: Optional[ProfileStore] = None,
        clock: Optional[Clock] = None,
    ):
        self.settings = settings or Settings.load()
        self._write_notification = write_notification or (lambda n: None)
        self.store = store or ProfileStore(
            db_path=self.settings.db_path,
            history_limit=self.settings.history_limit,
        )
        self.controller = GameController(
            clock=clock,
            stats=self.store.load_stats(),
            history=self.store.load_history(limit=RECENT_WINDOW),
        )
        saved = self.store.load_game()
        if saved is not None:
            self.controller.load_level(saved)
        self.controller.on_complete(self._on_level_complete)

    async def dispatch(self, msg: dict) -> dict:
        """Route a request message to the appropriate handler method."""
        method = msg.get("method", "")
        params = msg.get("params") or {}

        handler_map = {
            # stateless engine operations
            "generateLevel": self._generate_level,
            "regenerateLevel": self._regenerate_level,
            "evaluateGuess": self._evaluate_guess,
            "recordOutcome": self._record_outcome,
            "deriveSkillMetrics": self._derive_skill_metrics,
            "computeAccuracy": self._compute_accuracy,
            "skillLevelName": self._skill_level_name,
            "modeDescription": self._mode_description,
            "freshSeed": self._fresh_seed,
            # session
            "startGame": self._start_game,
            "continueGame": self._continue_game,
            "guess": self._guess,
            "tick": self._tick,
            "pause": self._pause,
            "resume": self._resume,
            "restartLevel": self._restart_level,
            "getState": self._get_state,
            "getStats": self._get_stats,
            "resetProgress": self._reset_progress,
        }

        handler = handler_map.get(method)
        if handler is None:
            raise ValueError(f"Unknown method: {method}")

        logger.debug("dispatch %s", method)
        return await handler(params)

    # --- stateless engine operations ---

    async def _generate_level(self, params: dict) -> dict:
        _require(params, "levelNumber")
        level = generate_level(params["levelNumber"], _metrics_from(params), seed=params.get("seed"))
        return {"level": level.to_dict()}

    async def _regenerate_level(self, params: dict) -> dict:
        _require(params, "level")
        level = regenerate_level(LevelParams.from_dict(params["level"]))
        return {"level": level.to_dict()}

    async def _evaluate_guess(self, params: dict) -> dict:
        _require(params, "guess", "target", "hintStyle", "attemptsLeft")
        result = evaluate_guess(
            params["guess"], params["target"], params["hintStyle"], params["attemptsLeft"],
        )
        return result.to_dict()

    async def _record_outcome(self, params: dict) -> dict:
        _require(params, "result")
        stats = record_outcome(_stats_from(params), LevelResult.from_dict(params["result"]))
        return {"stats": stats.to_dict()}

    async def _derive_skill_metrics(self, params: dict) -> dict:
        recent = [LevelResult.from_dict(r) for r in params.get("recentResults", [])]
        metrics = derive_skill_metrics(_stats_from(params), recent)
        return {"metrics": metrics.to_dict()}

    async def _compute_accuracy(self, params: dict) -> dict:
        _require(params, "attemptsUsed", "maxAttempts", "rangeSize")
        accuracy = compute_accuracy(params["attemptsUsed"], params["maxAttempts"], params["rangeSize"])
        return {"accuracy": accuracy}

    async def _skill_level_name(self, params: dict) -> dict:
        _require(params, "skillLevel")
        return {"name": skill_level_name(params["skillLevel"])}

    async def _mode_description(self, params: dict) -> dict:
        _require(params, "gameMode")
        return {"description": mode_description(params["gameMode"])}

    async def _fresh_seed(self, params: dict) -> dict:
        return {"seed": fresh_seed()}

    # --- session ---

    def _state_dict(self) -> dict:
        c = self.controller
        state = c.state
        return {
            "phase": state.phase.value,
            "levelNumber": c.level_number,
            "level": state.level.to_dict() if state.level else None,
            "nextLevel": state.next_level.to_dict() if state.next_level else None,
            "guesses": [g.to_dict() for g in state.guesses],
            "attemptsLeft": state.attempts_left,
            "elapsedSeconds": c.elapsed_seconds,
            "timeRemaining": c.time_remaining,
            "won": state.won,
            "hasSavedGame": c.has_saved_game,
        }

    def _save_level(self) -> None:
        level = self.controller.saved_level
        if level is not None:
            self.store.save_game(level)

    def _on_level_complete(self, result: LevelResult) -> None:
        self.store.append_result(result)
        self.store.save_stats(self.controller.stats)
        self._save_level()
        next_level = self.controller.state.next_level
        self._write_notification(Notification.level_complete(
            result.to_dict(),
            self.controller.metrics.to_dict(),
            next_level.to_dict() if next_level else None,
        ))

    async def _start_game(self, params: dict) -> dict:
        self.controller.start_new_game()
        self._save_level()
        return self._state_dict()

    async def _continue_game(self, params: dict) -> dict:
        self.controller.continue_game()
        self._save_level()
        return self._state_dict()

    async def _guess(self, params: dict) -> dict:
        _require(params, "guess")
        result = self.controller.submit_guess(int(params["guess"]))
        return {"guess": result.to_dict(), "state": self._state_dict()}

    async def _tick(self, params: dict) -> dict:
        self.controller.tick()
        return self._state_dict()

    async def _pause(self, params: dict) -> dict:
        self.controller.pause()
        return self._state_dict()

    async def _resume(self, params: dict) -> dict:
        self.controller.resume()
        return self._state_dict()

    async def _restart_level(self, params: dict) -> dict:
        self.controller.restart_level()
        self._save_level()
        return self._state_dict()

    async def _get_state(self, params: dict) -> dict:
        return self._state_dict()

    async def _get_stats(self, params: dict) -> dict:
        c = self.controller
        return {
            "stats": c.stats.to_dict(),
            "metrics": c.metrics.to_dict(),
            "skillName": skill_level_name(c.metrics.skill_level),
            "history": [r.to_dict() for r in c.history[-10:]],
        }

    async def _reset_progress(self, params: dict) -> dict:
        self.controller.reset_progress()
        self.store.reset()
        return {"ok": True}
