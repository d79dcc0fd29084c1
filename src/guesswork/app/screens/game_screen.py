"""Game screen: level banner, guess input and feedback log."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, Input, Static

from guesswork.app.widgets.guess_log import GuessLog
from guesswork.app.widgets.level_pane import LevelPane
from guesswork.engine.session import GameController, Phase, SessionError

TICK_SECONDS = 0.5


class GameScreen(Screen):
    """One level at a time; the controller owns every state change."""

    BINDINGS = [
        Binding("ctrl+p", "toggle_pause", "Pause/Resume", show=True),
        Binding("ctrl+r", "restart", "Restart level", show=True),
        Binding("ctrl+n", "next_level", "Next level", show=True),
        Binding("escape", "go_home", "Menu", show=True),
    ]

    CSS = """
    #game-layout {
        padding: 1 2;
    }
    #level-pane {
        height: auto;
        border: round $accent;
        padding: 0 1;
    }
    #guess-log {
        height: 1fr;
        border: round $primary;
    }
    #game-message {
        height: auto;
        padding: 0 1;
    }
    """

    def __init__(self, controller: GameController, **kwargs) -> None:
        super().__init__(**kwargs)
        self.controller = controller

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="game-layout"):
            yield LevelPane()
            yield GuessLog()
            yield Static("", id="game-message")
            yield Input(placeholder="Your guess (Enter to submit)", type="integer", id="guess-input")
        yield Footer()

    def on_mount(self) -> None:
        self._show_level()
        self.set_interval(TICK_SECONDS, self._tick)
        self.query_one("#guess-input", Input).focus()

    # ── Rendering ──

    def _show_level(self) -> None:
        level = self.controller.state.level
        if level is None:
            return
        self.query_one(LevelPane).set_level(level)
        log = self.query_one(GuessLog)
        log.clear()
        for i, guess in enumerate(self.controller.state.guesses, start=1):
            log.add_guess(i, guess)
        self._message("")
        self._refresh_status()

    def _refresh_status(self) -> None:
        self.query_one(LevelPane).update_status(
            self.controller.state.attempts_left,
            self.controller.elapsed_seconds,
            self.controller.time_remaining,
        )

    def _message(self, text: str) -> None:
        self.query_one("#game-message", Static).update(text)

    def _show_finished(self) -> None:
        result = self.controller.history[-1]
        self.query_one(GuessLog).add_summary(result)
        if result.won:
            self._message("[green]Level complete![/] [bold]ctrl+n[/] for the next level.")
        else:
            self._message("[red]Level lost.[/] [bold]ctrl+r[/] to try again with a new number.")

    # ── Events ──

    def _tick(self) -> None:
        before = self.controller.state.phase
        self.controller.tick()
        if before is Phase.PLAYING and self.controller.state.phase is Phase.FINISHED:
            self._message("[red]Time's up![/]")
            self._show_finished()
        self._refresh_status()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        raw = event.value.strip()
        event.input.clear()
        if not raw:
            return
        try:
            result = self.controller.submit_guess(int(raw))
        except (ValueError, SessionError) as e:
            self._message(f"[yellow]{e}[/]")
            return

        self.query_one(GuessLog).add_guess(self.controller.state.attempts_used, result)
        self._message("")
        if self.controller.state.phase is Phase.FINISHED:
            self._show_finished()
        self._refresh_status()

    # ── Actions ──

    def action_toggle_pause(self) -> None:
        phase = self.controller.state.phase
        if phase is Phase.PLAYING:
            self.controller.pause()
            self._message("[yellow]Paused.[/] ctrl+p to resume.")
        elif phase is Phase.PAUSED:
            self.controller.resume()
            self._message("")
        self._refresh_status()

    def action_restart(self) -> None:
        if self.controller.active_level is None:
            return
        self.controller.restart_level()
        self.app.save_game()
        self._show_level()

    def action_next_level(self) -> None:
        if self.controller.state.phase is Phase.FINISHED:
            self.controller.continue_game()
            self.app.save_game()
            self._show_level()

    def action_go_home(self) -> None:
        self.controller.go_to_main_menu()
        self.app.save_game()
        self.app.pop_screen()
