"""Tests for the ServerHandler dispatch layer."""

from __future__ import annotations

import json

import pytest

from conftest import make_level, make_result
from guesswork.config.settings import Settings
from guesswork.server.__main__ import handle_line
from guesswork.server.handler import ServerHandler
from guesswork.server.protocol import Notification
from guesswork.state.store import ProfileStore


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def handler(tmp_path, clock, notifications):
    settings = Settings(data_dir=tmp_path / "data")
    store = ProfileStore(db_path=settings.db_path)
    return ServerHandler(
        settings=settings,
        write_notification=notifications.append,
        store=store,
        clock=clock,
    )


async def call(handler, method, **params):
    return await handler.dispatch({"method": method, "params": params})


class TestEngineOperations:
    @pytest.mark.asyncio
    async def test_generate_level(self, handler):
        result = await call(handler, "generateLevel", levelNumber=1, seed=42)
        level = result["level"]
        assert level["rangeMax"] == 22
        assert level["targetNumber"] == 1
        assert level["gameMode"] == "classic"
        assert level["seed"] == 42

    @pytest.mark.asyncio
    async def test_generate_level_uses_metrics(self, handler):
        result = await call(
            handler, "generateLevel", levelNumber=1, seed=42, skillMetrics={"failureStreak": 4},
        )
        assert result["level"]["rangeMax"] == 17

    @pytest.mark.asyncio
    async def test_regenerate_level(self, handler):
        level = (await call(handler, "generateLevel", levelNumber=1, seed=42))["level"]
        again = (await call(handler, "regenerateLevel", level=level))["level"]
        assert again["targetNumber"] == 12
        assert {k: v for k, v in again.items() if k != "targetNumber"} == {
            k: v for k, v in level.items() if k != "targetNumber"
        }

    @pytest.mark.asyncio
    async def test_evaluate_guess(self, handler):
        result = await call(handler, "evaluateGuess", guess=45, target=50, hintStyle="hot_cold", attemptsLeft=3)
        assert result == {"feedback": "higher", "hint": "Burning hot!"}

    @pytest.mark.asyncio
    async def test_record_outcome_from_scratch(self, handler):
        result = await call(handler, "recordOutcome", result=make_result(attempts_used=3).to_dict())
        stats = result["stats"]
        assert stats["totalGames"] == 1
        assert stats["totalWins"] == 1
        assert stats["currentStreak"] == 1
        assert stats["averageAttempts"] == 3.0

    @pytest.mark.asyncio
    async def test_derive_skill_metrics_defaults(self, handler):
        result = await call(handler, "deriveSkillMetrics")
        assert result["metrics"]["skillLevel"] == 50

    @pytest.mark.asyncio
    async def test_derive_skill_metrics_streak(self, handler):
        recent = [make_result(won=False).to_dict() for _ in range(3)]
        result = await call(handler, "deriveSkillMetrics", recentResults=recent)
        assert result["metrics"]["failureStreak"] == 3
        assert result["metrics"]["difficultyModifier"] == pytest.approx(0.7)

    @pytest.mark.asyncio
    async def test_compute_accuracy(self, handler):
        result = await call(handler, "computeAccuracy", attemptsUsed=7, maxAttempts=5, rangeSize=22)
        assert result == {"accuracy": 0.6}

    @pytest.mark.asyncio
    async def test_names_and_descriptions(self, handler):
        assert (await call(handler, "skillLevelName", skillLevel=77))["name"] == "Expert"
        description = (await call(handler, "modeDescription", gameMode="depth"))["description"]
        assert description

    @pytest.mark.asyncio
    async def test_fresh_seed(self, handler):
        assert (await call(handler, "freshSeed"))["seed"] >= 1


class TestErrors:
    @pytest.mark.asyncio
    async def test_unknown_method(self, handler):
        with pytest.raises(ValueError, match="Unknown method"):
            await call(handler, "nonExistent")

    @pytest.mark.asyncio
    async def test_missing_params(self, handler):
        with pytest.raises(ValueError, match="Missing params: attemptsUsed, rangeSize"):
            await call(handler, "computeAccuracy", maxAttempts=5)

    @pytest.mark.asyncio
    async def test_engine_errors_propagate(self, handler):
        with pytest.raises(ValueError):
            await call(handler, "generateLevel", levelNumber=0, seed=1)


class TestSession:
    @pytest.mark.asyncio
    async def test_start_game(self, handler):
        state = await call(handler, "startGame")
        assert state["phase"] == "playing"
        assert state["levelNumber"] == 1
        assert state["level"]["seed"] == 1_000_001
        assert state["guesses"] == []
        assert state["hasSavedGame"] is False
        assert handler.store.load_game().seed == 1_000_001

    @pytest.mark.asyncio
    async def test_winning_guess_persists_and_notifies(self, handler, notifications):
        state = await call(handler, "startGame")
        target = state["level"]["targetNumber"]

        result = await call(handler, "guess", guess=target)

        assert result["guess"]["feedback"] == "correct"
        assert result["state"]["phase"] == "finished"
        assert result["state"]["won"] is True
        assert result["state"]["nextLevel"]["levelNumber"] == 2

        assert len(notifications) == 1
        notif = notifications[0]
        assert isinstance(notif, Notification)
        assert notif.method == "levelComplete"
        assert notif.params["result"]["won"] is True
        assert notif.params["nextLevel"]["levelNumber"] == 2

        assert handler.store.load_stats().total_wins == 1
        assert len(handler.store.load_history()) == 1
        assert handler.store.load_game().level_number == 2

    @pytest.mark.asyncio
    async def test_wrong_guess_returns_feedback(self, handler):
        handler.controller.load_level(make_level(target_number=5))
        await call(handler, "continueGame")
        result = await call(handler, "guess", guess=2)
        assert result["guess"]["feedback"] == "higher"
        assert result["state"]["attemptsLeft"] == 4

    @pytest.mark.asyncio
    async def test_pause_and_resume(self, handler, clock):
        await call(handler, "startGame")
        clock.advance(3000)
        paused = await call(handler, "pause")
        assert paused["phase"] == "paused"
        clock.advance(60_000)
        assert (await call(handler, "getState"))["elapsedSeconds"] == 3
        assert (await call(handler, "resume"))["phase"] == "playing"

    @pytest.mark.asyncio
    async def test_tick_timeout_notifies(self, handler, clock, notifications):
        handler.controller.load_level(make_level(time_limit=20))
        await call(handler, "continueGame")
        clock.advance(20_000)
        state = await call(handler, "tick")
        assert state["phase"] == "finished"
        assert state["won"] is False
        assert notifications[0].params["result"]["won"] is False

    @pytest.mark.asyncio
    async def test_restart_level(self, handler):
        await call(handler, "startGame")
        state = await call(handler, "restartLevel")
        assert state["level"]["seed"] == 1_000_002

    @pytest.mark.asyncio
    async def test_get_stats(self, handler):
        state = await call(handler, "startGame")
        await call(handler, "guess", guess=state["level"]["targetNumber"])
        stats = await call(handler, "getStats")
        assert stats["stats"]["totalGames"] == 1
        assert stats["skillName"]
        assert len(stats["history"]) == 1

    @pytest.mark.asyncio
    async def test_reset_progress(self, handler):
        state = await call(handler, "startGame")
        await call(handler, "guess", guess=state["level"]["targetNumber"])
        assert await call(handler, "resetProgress") == {"ok": True}
        assert handler.store.load_history() == []
        assert handler.store.load_game() is None
        assert (await call(handler, "getState"))["phase"] == "idle"


@pytest.mark.asyncio
async def test_saved_game_restored(tmp_path, clock):
    settings = Settings(data_dir=tmp_path / "data")
    store = ProfileStore(db_path=settings.db_path)
    store.save_game(make_level(level_number=6, seed=77))
    handler = ServerHandler(settings=settings, store=store, clock=clock)
    state = await call(handler, "getState")
    assert state["phase"] == "idle"
    assert state["levelNumber"] == 6
    assert state["hasSavedGame"] is True


class TestHandleLine:
    @pytest.mark.asyncio
    async def test_success(self, handler):
        line = '{"id": 3, "method": "computeAccuracy", "params": {"attemptsUsed": 5, "maxAttempts": 5, "rangeSize": 22}}'
        reply = json.loads(await handle_line(handler, line))
        assert reply == {"id": 3, "result": {"accuracy": 1.0}}

    @pytest.mark.asyncio
    async def test_blank_line_ignored(self, handler):
        assert await handle_line(handler, "   \n") is None

    @pytest.mark.asyncio
    async def test_bad_json(self, handler):
        reply = json.loads(await handle_line(handler, "{oops"))
        assert reply["id"] == 0
        assert reply["error"].startswith("Invalid JSON")

    @pytest.mark.asyncio
    async def test_session_error_reported(self, handler):
        reply = json.loads(await handle_line(handler, '{"id": 9, "method": "pause"}'))
        assert reply["id"] == 9
        assert reply["errorType"] == "SessionError"


@pytest.mark.asyncio
async def test_lost_level_not_resumed_after_restart(tmp_path, clock):
    settings = Settings(data_dir=tmp_path / "data")
    first = ServerHandler(settings=settings, store=ProfileStore(db_path=settings.db_path), clock=clock)
    first.controller.load_level(make_level(max_attempts=2, target_number=5))
    await call(first, "continueGame")
    await call(first, "guess", guess=1)
    lost = await call(first, "guess", guess=2)
    assert lost["state"]["won"] is False

    second = ServerHandler(settings=settings, store=ProfileStore(db_path=settings.db_path), clock=clock)
    state = await call(second, "continueGame")
    assert state["phase"] == "playing"
    assert state["level"]["levelNumber"] == 1
    assert state["level"]["seed"] == 43
    assert state["guesses"] == []
    assert state["level"] == second.controller.state.level.to_dict()
    assert second.controller.state.level != make_level(max_attempts=2, target_number=5)
