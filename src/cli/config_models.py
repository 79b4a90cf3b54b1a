"""Pydantic configuration models for spendwatch."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class PathsConfig(BaseModel):
    """File paths configuration."""

    db_path: Path = Path("~/spendwatch/reminders.db")

    @model_validator(mode="after")
    def expand_paths(self):
        """Expand ~ in all paths."""
        self.db_path = self.db_path.expanduser()
        return self


class RemindersConfig(BaseModel):
    """Reminder engine policy knobs."""

    # Flat per-problem estimate, not a real savings calculation.
    savings_per_problem: float = 50.0
    auto_add_suggestions: bool = True
    reset_counters_on_toggle: bool = True

    @field_validator("savings_per_problem")
    @classmethod
    def validate_savings(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"savings_per_problem must be >= 0, got {v}")
        return v


class EffectsConfig(BaseModel):
    """Timeouts for best-effort persistence/notification calls."""

    timeout_seconds: float = 5.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {v}")
        return v


VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    json_mode: bool = False
    log_file: Optional[Path] = None

    @field_validator("log_file")
    @classmethod
    def expand_log_file(cls, v: Optional[Path]) -> Optional[Path]:
        return v.expanduser() if v is not None else None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return v_upper


class SpendwatchConfig(BaseModel):
    """Main configuration model."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    reminders: RemindersConfig = Field(default_factory=RemindersConfig)
    effects: EffectsConfig = Field(default_factory=EffectsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "SpendwatchConfig":
        """Create config from dict, accepting string paths."""
        if "paths" in data and isinstance(data["paths"], dict):
            for key in ["db_path"]:
                if key in data["paths"] and isinstance(data["paths"][key], str):
                    data["paths"][key] = Path(data["paths"][key])
        return cls.model_validate(data)
