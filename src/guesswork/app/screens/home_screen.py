"""Home screen — new game, continue, stats and reset."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, Static

from guesswork.config.settings import Settings
from guesswork.engine.session import GameController
from guesswork.engine.skill import skill_level_name

_AVATAR_BADGES = {
    "cpu": "[cyan]▣[/]",
    "layers": "[magenta]≋[/]",
    "target": "[yellow]◎[/]",
    "crosshair": "[red]⌖[/]",
}


class HomeScreen(Screen):
    """Main menu with the player's current standing."""

    BINDINGS = [
        ("n", "new_game", "New game"),
        ("c", "continue_game", "Continue"),
        ("s", "stats", "Stats"),
        ("p", "settings", "Profile"),
        ("q", "quit", "Quit"),
    ]

    CSS = """
    #home-container {
        align: center middle;
        padding: 2 4;
    }
    #home-container Button {
        width: 30;
        margin: 1 0 0 0;
    }
    """

    def __init__(self, controller: GameController, settings: Settings, **kwargs) -> None:
        super().__init__(**kwargs)
        self.controller = controller
        self.settings = settings
        self._confirm_reset = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="home-container"):
            yield Static(
                "╔═╗┬ ┬┌─┐┌─┐┌─┐┬ ┬┌─┐┬─┐┬┌─\n"
                "║ ╦│ │├┤ └─┐└─┐││││ │├┬┘├┴┐\n"
                "╚═╝└─┘└─┘└─┘└─┘└┴┘└─┘┴└─┴ ┴",
                id="welcome-art",
            )
            yield Label("", id="standing")
            yield Button("Continue →", id="continue-btn", variant="warning")
            yield Button("New Game →", id="new-btn", variant="primary")
            yield Button("Stats", id="stats-btn", variant="default")
            yield Button("Profile", id="settings-btn", variant="default")
            yield Button("Reset Progress", id="reset-btn", variant="error")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_standing()

    def on_screen_resume(self) -> None:
        self.refresh_standing()

    def refresh_standing(self) -> None:
        metrics = self.controller.metrics
        stats = self.controller.stats
        profile = self.settings.profile
        self.query_one("#standing", Label).update(
            f"\n{_AVATAR_BADGES[profile.avatar]} [bold]{profile.display_name}[/] — "
            f"{skill_level_name(metrics.skill_level)} (skill {metrics.skill_level:.0f})\n"
            f"[dim]{stats.total_wins}/{stats.total_games} won • "
            f"next level {self.controller.level_number}[/]\n"
        )
        self.query_one("#continue-btn", Button).display = self.controller.has_saved_game

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != "reset-btn":
            self._confirm_reset = False
        if event.button.id == "continue-btn":
            self.action_continue_game()
        elif event.button.id == "new-btn":
            self.action_new_game()
        elif event.button.id == "stats-btn":
            self.action_stats()
        elif event.button.id == "settings-btn":
            self.action_settings()
        elif event.button.id == "reset-btn":
            if not self._confirm_reset:
                self._confirm_reset = True
                event.button.label = "Press again to confirm"
                return
            self._confirm_reset = False
            event.button.label = "Reset Progress"
            self.app.reset_progress()
            self.refresh_standing()

    def action_new_game(self) -> None:
        self.app.open_game(fresh=True)

    def action_continue_game(self) -> None:
        if self.controller.has_saved_game:
            self.app.open_game(fresh=False)

    def action_stats(self) -> None:
        self.app.open_stats()

    def action_settings(self) -> None:
        self.app.open_settings()
