"""Configuration models describing workdir settings."""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class WorkdirBaseModel(BaseModel):
    """Shared configuration for workdir Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class SessionSettings(WorkdirBaseModel):
    """Per-session limits applied to working-directory operations.

    Attributes:
        text_file_size_limit: Largest text file, in bytes, whose content is loaded.
        max_concurrency: Maximum number of entries classified at the same time.
    """

    text_file_size_limit: int = Field(default=1_048_576, ge=0)
    max_concurrency: int = Field(default=32, ge=1)


class MimeSettings(WorkdirBaseModel):
    """Supplemental MIME types merged into the builtin table.

    Attributes:
        types_file: Optional path to an extra ``mime.types`` formatted file.
        extra_types: Inline mapping of extension to MIME type.
    """

    types_file: Optional[str] = None
    extra_types: Dict[str, str] = Field(default_factory=dict)


class LoggingSettings(WorkdirBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"

    @field_validator("level", mode="before")
    @classmethod
    def _known_level(cls, value: object) -> str:
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level


class WorkdirConfig(WorkdirBaseModel):
    """Top-level configuration struct for workdir.

    Attributes:
        session: Session limits.
        mime: MIME table supplements.
        logging: Logging configuration.
    """

    session: SessionSettings = Field(default_factory=SessionSettings)
    mime: MimeSettings = Field(default_factory=MimeSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


__all__ = [
    "LOG_LEVELS",
    "WorkdirBaseModel",
    "SessionSettings",
    "MimeSettings",
    "LoggingSettings",
    "WorkdirConfig",
]
