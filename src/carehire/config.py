"""Configuration loading from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

TEMPLATE_SOURCES = ("settings", "static")


@dataclass
class Config:
    horizon_weeks: int = 3
    shift_chunk_hours: float = 4

    # "settings" reads settings_file (falling back to defaults), "static" uses the rules table
    template_source: str = "settings"
    settings_file: Path = field(default_factory=lambda: Path("availability.json"))

    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.template_source not in TEMPLATE_SOURCES:
            self.template_source = "settings"
        self.log_level = self.log_level.upper()


def load_config(env_file: str | None = None) -> Config:
    """Load configuration from .env file and environment variables."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return Config(
        horizon_weeks=_number("CAREHIRE_HORIZON_WEEKS", "3", int),
        shift_chunk_hours=_number("CAREHIRE_SHIFT_CHUNK_HOURS", "4", float),
        template_source=os.getenv("CAREHIRE_TEMPLATE_SOURCE", "settings").lower(),
        settings_file=Path(os.getenv("CAREHIRE_SETTINGS_FILE", "availability.json")),
        log_level=os.getenv("CAREHIRE_LOG_LEVEL", "WARNING"),
    )


def _number(name: str, default: str, kind: type) -> Any:
    raw = os.getenv(name, default)
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None

