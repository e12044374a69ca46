"""User configuration models."""

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_config_dir() -> Path:
    """XDG config directory for apkship."""
    if "XDG_CONFIG_HOME" in os.environ:
        return Path(os.environ["XDG_CONFIG_HOME"]) / "apkship"
    return Path.home() / ".config" / "apkship"


class PublishSettings(BaseModel):
    """Tunables of the publish subsystem."""

    http_timeout: float = Field(
        default=300.0, gt=0, description="Whole-request timeout for uploads (seconds)"
    )
    connect_timeout: float = Field(
        default=30.0, gt=0, description="TCP connect timeout (seconds)"
    )
    poll_max_attempts: int = Field(
        default=60, ge=1, description="Status checks before giving up on processing"
    )
    poll_intervals: tuple[float, ...] = Field(
        default=(3.0, 4.0, 5.0),
        description="Waits cycled through between status checks (seconds)",
    )
    fir_cli_name: str = Field(
        default="go-fir-cli", description="Executable searched on PATH for fir.im"
    )

    @field_validator("poll_intervals", mode="before")
    @classmethod
    def decode_intervals(cls, v: Any) -> Any:
        if isinstance(v, str):
            return tuple(float(part) for part in v.split(",") if part.strip())
        return v

    @field_validator("poll_intervals")
    @classmethod
    def validate_intervals(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        if not v:
            raise ValueError("poll_intervals must not be empty")
        if any(interval < 0 for interval in v):
            raise ValueError("poll_intervals must be non-negative")
        return v


class UserConfigData(BaseSettings):
    """User configuration data model with automatic environment variable support.

    Precedence order (highest to lowest):
    1. Environment variables (APKSHIP_*, nested with "__")
    2. Constructor arguments (config file data)
    3. .env file
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="APKSHIP_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Environment variables override values read from the config file."""
        return (
            env_settings,
            init_settings,
            dotenv_settings,
            file_secret_settings,
        )

    log_level: str = "WARNING"

    config_dir: Path = Field(
        default_factory=default_config_dir,
        description="Directory holding the registry files",
    )
    projects_file: Path | None = Field(
        default=None, description="Project registry file (JSON)"
    )
    profiles_file: Path | None = Field(
        default=None, description="Publish profile registry file (JSON)"
    )

    publish: PublishSettings = Field(default_factory=PublishSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper_v = v.strip().upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return upper_v

    @field_validator("config_dir", "projects_file", "profiles_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip():
            return Path(v.strip()).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v
