"""Tests for the SQLite profile store."""

from __future__ import annotations

from conftest import make_level, make_result
from guesswork.engine.levels import GameMode
from guesswork.engine.skill import initial_stats, record_outcome
from guesswork.state.store import ProfileStore


class TestStats:
    def test_empty_store_gives_initial_stats(self, store):
        assert store.load_stats() == initial_stats()

    def test_round_trip(self, store):
        stats = record_outcome(initial_stats(), make_result(game_mode=GameMode.DEPTH, time_used=5))
        store.save_stats(stats)
        assert store.load_stats() == stats

    def test_overwrite(self, store):
        first = record_outcome(initial_stats(), make_result())
        second = record_outcome(first, make_result(won=False))
        store.save_stats(first)
        store.save_stats(second)
        assert store.load_stats().total_games == 2


class TestHistory:
    def test_oldest_first(self, store):
        for n in (1, 2, 3):
            store.append_result(make_result(level_number=n))
        assert [r.level_number for r in store.load_history()] == [1, 2, 3]

    def test_limit_keeps_most_recent(self, store):
        for n in range(1, 8):
            store.append_result(make_result(level_number=n))
        assert [r.level_number for r in store.load_history(limit=3)] == [5, 6, 7]

    def test_history_limit_prunes(self, tmp_path):
        store = ProfileStore(db_path=tmp_path / "profile.db", history_limit=4)
        for n in range(1, 11):
            store.append_result(make_result(level_number=n))
        assert [r.level_number for r in store.load_history()] == [7, 8, 9, 10]

    def test_result_round_trip(self, store):
        result = make_result(won=False, attempts_used=5, accuracy=0.4, time_used=12)
        store.append_result(result)
        assert store.load_history() == [result]


class TestSavedGame:
    def test_none_when_empty(self, store):
        assert store.load_game() is None

    def test_round_trip(self, store):
        level = make_level(level_number=3, time_limit=45, game_mode=GameMode.TACTICAL)
        store.save_game(level)
        assert store.load_game() == level

    def test_only_one_saved(self, store):
        store.save_game(make_level(level_number=3))
        store.save_game(make_level(level_number=4))
        assert store.load_game().level_number == 4

    def test_clear(self, store):
        store.save_game(make_level())
        store.clear_game()
        assert store.load_game() is None


def test_reset_clears_everything(store):
    store.save_stats(record_outcome(initial_stats(), make_result()))
    store.append_result(make_result())
    store.save_game(make_level())
    store.reset()
    assert store.load_stats() == initial_stats()
    assert store.load_history() == []
    assert store.load_game() is None


def test_survives_reopen(tmp_path):
    path = tmp_path / "nested" / "profile.db"
    ProfileStore(db_path=path).append_result(make_result(level_number=9))
    assert ProfileStore(db_path=path).load_history()[0].level_number == 9
