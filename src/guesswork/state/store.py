"""SQLite-backed persistence for player stats, level history and the saved game."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from guesswork.engine.levels import LevelParams
from guesswork.engine.results import LevelResult
from guesswork.engine.skill import PlayerStats, initial_stats

logger = logging.getLogger("guesswork.store")


class ProfileStore:
    def __init__(self, db_path: Optional[Path] = None, history_limit: int = 0):
        self.db_path = db_path or (Path.home() / ".guesswork" / "profile.db")
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.history_limit = history_limit
        self._init_db()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS stats (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    data TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS history (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    level_number INTEGER NOT NULL,
                    won INTEGER NOT NULL,
                    data TEXT NOT NULL,
                    completed_at INTEGER NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS saved_game (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    level_number INTEGER NOT NULL,
                    level TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

    def _conn(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    # --- stats ---

    def load_stats(self) -> PlayerStats:
        with self._conn() as conn:
            row = conn.execute("SELECT data FROM stats WHERE id = 1").fetchone()
        if not row:
            return initial_stats()
        return PlayerStats.from_dict(json.loads(row[0]))

    def save_stats(self, stats: PlayerStats) -> None:
        now = datetime.now().isoformat()
        with self._conn() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO stats (id, data, updated_at) VALUES (1, ?, ?)",
                (json.dumps(stats.to_dict()), now),
            )

    # --- history ---

    def append_result(self, result: LevelResult) -> None:
        with self._conn() as conn:
            conn.execute(
                """INSERT INTO history (level_number, won, data, completed_at)
                   VALUES (?, ?, ?, ?)""",
                (result.level_number, int(result.won), json.dumps(result.to_dict()), result.completed_at),
            )
            if self.history_limit > 0:
                conn.execute(
                    """DELETE FROM history WHERE seq NOT IN
                       (SELECT seq FROM history ORDER BY seq DESC LIMIT ?)""",
                    (self.history_limit,),
                )

    def load_history(self, limit: Optional[int] = None) -> list[LevelResult]:
        """Results oldest first; ``limit`` keeps only the most recent ones."""
        with self._conn() as conn:
            if limit is None:
                rows = conn.execute("SELECT data FROM history ORDER BY seq").fetchall()
            else:
                rows = conn.execute(
                    "SELECT data FROM (SELECT seq, data FROM history ORDER BY seq DESC LIMIT ?) "
                    "ORDER BY seq",
                    (limit,),
                ).fetchall()
        return [LevelResult.from_dict(json.loads(r[0])) for r in rows]

    # --- saved game ---

    def save_game(self, level: LevelParams) -> None:
        now = datetime.now().isoformat()
        with self._conn() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO saved_game (id, level_number, level, updated_at)
                   VALUES (1, ?, ?, ?)""",
                (level.level_number, json.dumps(level.to_dict()), now),
            )

    def load_game(self) -> Optional[LevelParams]:
        with self._conn() as conn:
            row = conn.execute("SELECT level FROM saved_game WHERE id = 1").fetchone()
        if not row:
            return None
        return LevelParams.from_dict(json.loads(row[0]))

    def clear_game(self) -> None:
        with self._conn() as conn:
            conn.execute("DELETE FROM saved_game")

    def reset(self) -> None:
        with self._conn() as conn:
            conn.execute("DELETE FROM stats")
            conn.execute("DELETE FROM history")
            conn.execute("DELETE FROM saved_game")
        logger.info("progress reset in %s", self.db_path)
