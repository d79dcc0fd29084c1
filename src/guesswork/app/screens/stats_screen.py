"""Stats screen — lifetime totals, skill metrics and per-mode breakdown."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Static

from guesswork.engine.session import GameController
from guesswork.engine.skill import skill_level_name


class StatsScreen(Screen):
    BINDINGS = [
        ("escape", "app.pop_screen", "Back"),
    ]

    CSS = """
    #stats-container {
        padding: 1 2;
    }
    #mode-table {
        height: auto;
        margin: 1 0;
    }
    """

    def __init__(self, controller: GameController, **kwargs) -> None:
        super().__init__(**kwargs)
        self.controller = controller

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="stats-container"):
            yield Static("", id="stats-summary")
            yield DataTable(id="mode-table")
            yield Static("", id="recent-results")
        yield Footer()

    def on_mount(self) -> None:
        stats = self.controller.stats
        m = self.controller.metrics
        rate = stats.total_wins / stats.total_games if stats.total_games else 0

        self.query_one("#stats-summary", Static).update(
            f"[bold]{skill_level_name(m.skill_level)}[/] — skill {m.skill_level:.0f}/100\n\n"
            f"Games {stats.total_games}   Wins {stats.total_wins}   Losses {stats.total_losses}   "
            f"Win rate {rate:.0%}\n"
            f"Streak {stats.current_streak} (best {stats.best_streak})   "
            f"Avg attempts {stats.average_attempts:.1f}   "
            f"Avg time {stats.average_time:.1f}s\n\n"
            f"Success rate {m.success_rate:.0%}   Consistency {m.consistency_score:.0%}   "
            f"Reaction speed {m.reaction_speed:.0%}   "
            f"Difficulty modifier ×{m.difficulty_modifier:.2f}"
        )

        table = self.query_one("#mode-table", DataTable)
        table.add_columns("Mode", "Played", "Wins", "Best streak", "Avg attempts")
        for mode, ms in stats.mode_stats.items():
            table.add_row(
                mode.value, str(ms.games_played), str(ms.wins),
                str(ms.best_streak), f"{ms.average_attempts:.1f}",
            )

        recent = self.controller.history[-10:]
        marks = "".join("[green]●[/]" if r.won else "[red]●[/]" for r in recent)
        self.query_one("#recent-results", Static).update(
            f"Recent: {marks or '[dim]no games yet[/]'}"
        )
