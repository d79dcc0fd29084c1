"""Profile settings: display name, avatar and sound."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, Label, RadioButton, RadioSet, Switch

from guesswork.config.settings import AVATARS, Settings


class SettingsScreen(Screen):
    BINDINGS = [
        ("escape", "app.pop_screen", "Back"),
    ]

    CSS = """
    #settings-container {
        padding: 1 2;
        width: 60;
    }
    #settings-container Label {
        margin: 1 0 0 0;
    }
    #sound-row {
        height: auto;
        margin: 1 0;
    }
    #sound-row Label {
        margin: 1 1 0 0;
    }
    """

    def __init__(self, settings: Settings, **kwargs) -> None:
        super().__init__(**kwargs)
        self.settings = settings

    def compose(self) -> ComposeResult:
        profile = self.settings.profile
        yield Header(show_clock=True)
        with Vertical(id="settings-container"):
            yield Label("Display name")
            yield Input(value=profile.display_name, max_length=24, id="name-input")
            yield Label("Avatar")
            with RadioSet(id="avatar-set"):
                for i, name in enumerate(AVATARS):
                    yield RadioButton(name, value=i == profile.avatar_id)
            with Horizontal(id="sound-row"):
                yield Label("Sound")
                yield Switch(value=profile.sound_enabled, id="sound-switch")
            yield Button("Save", id="save-btn", variant="primary")
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-btn":
            self.save()

    def save(self) -> None:
        avatar = self.query_one("#avatar-set", RadioSet).pressed_index
        self.settings.update_profile(
            display_name=self.query_one("#name-input", Input).value,
            avatar_id=avatar if avatar >= 0 else None,
            sound_enabled=self.query_one("#sound-switch", Switch).value,
        )
        self.app.notify("Profile saved")
        self.app.pop_screen()
