"""
Configuration for booksum.

Provides environment-based configuration with Pydantic settings. Grouped
values are read from ``GROUP__FIELD`` variables, e.g.
``SEGMENTATION__MAX_CHUNK_CHARACTER_SIZE=40000`` or
``RATE_LIMIT__SETTLING_DELAY_SECONDS=0``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


class SegmentationSettings(BaseModel):
    """Segmentation engine settings."""

    strategy: Literal["structural", "flat", "auto"] = "structural"
    max_chunk_character_size: int = Field(
        default=100_000,
        gt=0,
        description="Cap applied to structural chunks",
    )
    flat_chunk_character_size: int = Field(
        default=40_000,
        gt=0,
        description="Cap applied to flat-strategy sections",
    )
    structural_marker_pattern: str = r"\bchapter\b"
    structural_label: str = Field(
        default="Chapter",
        min_length=1,
        description="Name prefix for chunks opened by the structural marker",
    )
    sentence_group_size: int = Field(default=4, gt=0)

    @field_validator("structural_marker_pattern")
    @classmethod
    def check_pattern(cls, v: str) -> str:
        if not v:
            raise ValueError("structural marker pattern must not be empty")
        try:
            re.compile(v)
        except re.error as exc:
            raise ValueError(f"invalid structural marker pattern: {exc}") from exc
        return v

    def marker_regex(self) -> re.Pattern[str]:
        """Compiled, case-insensitive structural marker."""
        return re.compile(self.structural_marker_pattern, re.IGNORECASE)


class RateLimitSettings(BaseModel):
    """Token budget and pacing settings."""

    max_tokens_per_minute: int = Field(default=30_000, gt=0)
    max_tokens_per_request: int = Field(
        default=6_000,
        gt=0,
        description="Completion budget for each generation request",
    )
    throttle_window_seconds: float = Field(default=65.0, gt=0)
    settling_delay_seconds: float = Field(
        default=15.0,
        ge=0,
        description="Pause between the last chunk summary and aggregation",
    )


class GenerationSettings(BaseModel):
    """Text-generation service settings."""

    api_base: str = "https://api.openai.com"
    api_key: Optional[SecretStr] = None
    model: str = "gpt-4o-2024-08-06"
    temperature: float = Field(default=0.5, ge=0, le=2)
    timeout_seconds: float = Field(default=120.0, gt=0)

    def is_configured(self) -> bool:
        """Check if an API key and base URL are available."""
        return bool(
            self.api_base and self.api_key and self.api_key.get_secret_value()
        )


class BookSumSettings(BaseSettings):
    """Top-level configuration."""

    # Service identification
    service_name: str = Field(
        default="booksum",
        validation_alias=AliasChoices("SERVICE_NAME"),
    )
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT", "ENV"),
    )

    # Local result store root
    data_dir: Path = Field(
        default=Path("./data"),
        validation_alias=AliasChoices("DATA_DIR"),
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL"),
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        validation_alias=AliasChoices("LOG_FORMAT"),
        description="Log format: 'json' or 'text'",
    )

    # Conventional key name; copied into generation.api_key when that is unset
    openai_api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY"),
    )

    # Nested settings
    segmentation: SegmentationSettings = Field(default_factory=SegmentationSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def apply_openai_api_key(self) -> "BookSumSettings":
        if self.generation.api_key is None and self.openai_api_key is not None:
            self.generation = self.generation.model_copy(
                update={"api_key": self.openai_api_key}
            )
        return self


@lru_cache
def get_settings() -> BookSumSettings:
    """Get cached settings instance."""
    return BookSumSettings()


def configure_logging(settings: Optional[BookSumSettings] = None) -> None:
    """Configure logging based on settings.

    Args:
        settings: Optional settings instance, uses cached settings if not provided
    """
    import json
    import logging
    import sys

    if settings is None:
        settings = get_settings()

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if settings.log_format == "json":
        # Attributes every LogRecord carries; anything else came in via extra=
        reserved = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

        class JSONFormatter(logging.Formatter):
            def format(self, record):
                log_record = {
                    "timestamp": self.formatTime(record),
                    "level": record.levelname,
                    "logger": record.name,
                    "message": record.getMessage(),
                    "service": settings.service_name,
                }
                for key, value in vars(record).items():
                    if key not in reserved and key not in log_record:
                        log_record[key] = value
                if record.exc_info:
                    log_record["exception"] = self.formatException(record.exc_info)
                return json.dumps(log_record, default=str)

        handler.setFormatter(JSONFormatter())
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)

    root_logger.addHandler(handler)

    # Third-party request logs are noisy at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
