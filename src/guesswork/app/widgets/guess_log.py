"""Scrolling log of guesses and their feedback."""

from __future__ import annotations

from textual.widgets import RichLog

from guesswork.engine.results import GuessResult, LevelResult

_ARROWS = {"higher": "↑ higher", "lower": "↓ lower", "correct": "✓ correct"}


class GuessLog(RichLog):
    def __init__(self, **kwargs) -> None:
        super().__init__(markup=True, id="guess-log", **kwargs)
        self.border_title = "Guesses"

    def add_guess(self, number: int, result: GuessResult) -> None:
        style = "green bold" if result.feedback == "correct" else "white"
        line = f"[dim]#{number}[/] [{style}]{result.guess:>4}  {_ARROWS[result.feedback]}[/]"
        if result.hint:
            hint_style = "red" if result.penalty else "cyan"
            line += f"  [{hint_style}]{result.hint}[/]"
        self.write(line)

    def add_summary(self, result: LevelResult) -> None:
        if result.won:
            self.write(
                f"[green bold]Solved in {result.attempts_used}/{result.max_attempts}[/] "
                f"— accuracy {result.accuracy:.0%}"
            )
        else:
            self.write(f"[red bold]Out of luck.[/] The number was {result.target_number}.")
