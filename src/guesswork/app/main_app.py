"""Guesswork main Textual application."""

from __future__ import annotations

import logging
from typing import Optional

from textual.app import App

from guesswork.app.screens.game_screen import GameScreen
from guesswork.app.screens.home_screen import HomeScreen
from guesswork.app.screens.settings_screen import SettingsScreen
from guesswork.app.screens.stats_screen import StatsScreen
from guesswork.config.settings import Settings
from guesswork.engine.results import LevelResult
from guesswork.engine.session import GameController
from guesswork.engine.skill import RECENT_WINDOW
from guesswork.state.store import ProfileStore

logger = logging.getLogger("guesswork.app")


class GuessworkApp(App):
    """Adaptive number-guessing game."""

    TITLE = "Guesswork"
    SUB_TITLE = "Adaptive number guessing"

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def __init__(self, settings: Optional[Settings] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.settings = settings or Settings.load()
        self.store = ProfileStore(
            db_path=self.settings.db_path,
            history_limit=self.settings.history_limit,
        )
        self.controller = GameController(
            stats=self.store.load_stats(),
            history=self.store.load_history(limit=RECENT_WINDOW),
        )
        saved = self.store.load_game()
        if saved is not None:
            self.controller.load_level(saved)
        self.controller.on_complete(self._on_level_complete)

    def on_mount(self) -> None:
        self.push_screen(HomeScreen(controller=self.controller, settings=self.settings))

    def _on_level_complete(self, result: LevelResult) -> None:
        self.store.append_result(result)
        self.store.save_stats(self.controller.stats)
        self.save_game()
        if self.settings.profile.sound_enabled:
            self.bell()

    def save_game(self) -> None:
        level = self.controller.saved_level
        if level is not None:
            self.store.save_game(level)

    def open_game(self, fresh: bool) -> None:
        """Called by HomeScreen to start or continue playing."""
        if fresh:
            self.controller.start_new_game()
        else:
            self.controller.continue_game()
        self.save_game()
        self.push_screen(GameScreen(controller=self.controller))

    def open_stats(self) -> None:
        self.push_screen(StatsScreen(controller=self.controller))

    def open_settings(self) -> None:
        self.push_screen(SettingsScreen(settings=self.settings))

    def reset_progress(self) -> None:
        self.controller.reset_progress()
        self.store.reset()
        logger.info("progress reset from the home screen")
