"""Level banner: mode, range, attempts and clock."""

from __future__ import annotations

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static

from guesswork.engine.levels import GameMode, LevelParams, mode_description

_MODE_COLORS = {
    GameMode.CLASSIC: "cyan",
    GameMode.DEPTH: "magenta",
    GameMode.STRATEGIC: "yellow",
    GameMode.TACTICAL: "red",
}


class LevelPane(Vertical):
    def __init__(self, **kwargs) -> None:
        super().__init__(id="level-pane", **kwargs)
        self.border_title = "Level"

    def compose(self) -> ComposeResult:
        yield Static("", id="level-title")
        yield Static("", id="level-status")

    def set_level(self, level: LevelParams) -> None:
        color = _MODE_COLORS.get(level.game_mode, "white")
        self.query_one("#level-title", Static).update(
            f"[bold]Level {level.level_number}[/] "
            f"[{color}]{level.game_mode.value.upper()}[/]  "
            f"[dim]difficulty {level.difficulty_score}[/]\n"
            f"{mode_description(level.game_mode)}\n"
            f"Guess a number between [bold]{level.range_min}[/] and [bold]{level.range_max}[/]."
        )

    def update_status(self, attempts_left: int, elapsed: int, remaining: Optional[int]) -> None:
        clock = f"{elapsed}s"
        if remaining is not None:
            style = "red bold" if remaining <= 10 else "white"
            clock = f"[{style}]{remaining}s left[/]"
        self.query_one("#level-status", Static).update(
            f"Attempts left: [bold]{attempts_left}[/]   ⏱ {clock}"
        )
