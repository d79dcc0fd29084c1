"""Configuration model for Guesswork."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_DATA_DIR = Path.home() / ".guesswork"

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# Avatar ids index this tuple; each one borrows a game mode's emblem.
AVATARS = ("cpu", "layers", "target", "crosshair")


class ProfileConfig(BaseModel):
    display_name: str = "Player"
    avatar_id: int = Field(default=0, ge=0, lt=len(AVATARS))
    sound_enabled: bool = True

    @field_validator("display_name")
    @classmethod
    def _non_blank_name(cls, value: str) -> str:
        return value.strip() or "Player"

    @property
    def avatar(self) -> str:
        return AVATARS[self.avatar_id]


class Settings(BaseModel):
    data_dir: Path = Field(default_factory=lambda: DEFAULT_DATA_DIR)
    log_level: str = "WARNING"
    # Level results kept in the store; 0 keeps everything.
    history_limit: int = 200
    profile: ProfileConfig = Field(default_factory=ProfileConfig)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def db_path(self) -> Path:
        return self.data_dir / "profile.db"

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        data_dir = Path(os.environ.get("GUESSWORK_DATA_DIR") or DEFAULT_DATA_DIR)
        config_path = config_path or data_dir / "config.yaml"
        data: dict = {}
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        if os.environ.get("GUESSWORK_DATA_DIR"):
            data["data_dir"] = os.environ["GUESSWORK_DATA_DIR"]
        if os.environ.get("GUESSWORK_LOG_LEVEL"):
            data["log_level"] = os.environ["GUESSWORK_LOG_LEVEL"]
        return cls(**data)

    def update_profile(self, **changes) -> ProfileConfig:
        """Validate the given profile fields (None leaves one as is) and save."""
        merged = self.profile.model_dump()
        merged.update({k: v for k, v in changes.items() if v is not None})
        self.profile = ProfileConfig(**merged)
        self.save()
        return self.profile

    def save(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        config_path = self.data_dir / "config.yaml"
        with open(config_path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False)


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a stderr handler to the ``guesswork`` logger (once)."""
    logger = logging.getLogger("guesswork")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger
