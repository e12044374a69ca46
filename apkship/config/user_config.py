"""
User configuration management for apkship.

This module handles user-specific configuration settings with multiple sources:
1. Environment variables (highest precedence)
2. Command-line provided config file
3. Config file in current directory
4. User's XDG config directory
5. Default values (lowest precedence)
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from apkship.adapters.file_adapter import create_file_adapter
from apkship.config.models import PublishSettings, UserConfigData, default_config_dir
from apkship.core.errors import ConfigError, FileSystemError
from apkship.protocols import FileAdapterProtocol


logger = logging.getLogger(__name__)

# Environment variable prefix
ENV_PREFIX = "APKSHIP_"

PROJECTS_FILENAME = "projects.json"
PROFILES_FILENAME = "publish_platforms.json"


class UserConfig:
    """
    Manages user-specific configuration for apkship using Pydantic Settings.

    The first config file found in the search order is loaded; environment
    variables override its values. Each top-level key remembers where its
    value came from so ``get_source`` can explain the effective setting.
    """

    def __init__(
        self,
        cli_config_path: str | Path | None = None,
        file_adapter: FileAdapterProtocol | None = None,
    ):
        """
        Initialize the user configuration handler.

        Args:
            cli_config_path: Optional config file path provided via CLI
            file_adapter: Optional adapter for file operations
        """
        self._adapter = file_adapter or create_file_adapter()
        self._config_sources: dict[str, str] = {}
        self._main_config_path: Path | None = None
        self._config_paths = self._generate_config_paths(cli_config_path)
        self._load_config()

    def _generate_config_paths(self, cli_config_path: str | Path | None) -> list[Path]:
        """Generate a list of config paths to search in order of precedence."""
        config_paths = []

        if cli_config_path:
            cli_path = Path(cli_config_path).expanduser().resolve()
            if not cli_path.exists():
                raise ConfigError(f"Config file not found: {cli_path}")
            config_paths.append(cli_path)

        config_paths.extend([Path.cwd() / "apkship.yaml", Path.cwd() / ".apkship.yml"])

        xdg_dir = default_config_dir()
        config_paths.extend([xdg_dir / "config.yaml", xdg_dir / "config.yml"])

        return config_paths

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        try:
            content = self._adapter.read_text(path)
            data = yaml.safe_load(content)
        except FileSystemError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return data

    def _load_config(self) -> None:
        """Load configuration from the first config file found plus environment."""
        logger.debug("Config search paths: %s", [str(p) for p in self._config_paths])

        config_data: dict[str, Any] = {}
        for path in self._config_paths:
            if self._adapter.is_file(path):
                config_data = self._read_yaml(path)
                self._main_config_path = path
                logger.debug("Loaded user configuration from %s", path)
                break
        else:
            logger.debug("No user configuration file found, using defaults")

        try:
            self._config = UserConfigData(**config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        for key in config_data:
            if self._main_config_path is not None:
                self._config_sources[key] = f"file:{self._main_config_path.name}"

        env_keys = {
            k[len(ENV_PREFIX) :].lower().split("__")[0]
            for k in os.environ
            if k.upper().startswith(ENV_PREFIX)
        }
        for key in env_keys:
            self._config_sources[key] = "environment"

    def get_source(self, key: str) -> str:
        """Return where a top-level setting came from."""
        return self._config_sources.get(key.split(".")[0], "default")

    @property
    def config_path(self) -> Path | None:
        """Config file that was loaded, if any."""
        return self._main_config_path

    @property
    def data(self) -> UserConfigData:
        return self._config

    @property
    def publish(self) -> PublishSettings:
        return self._config.publish

    def get_log_level_int(self) -> int:
        """Get the configured log level as a logging module constant."""
        return int(getattr(logging, self._config.log_level, logging.WARNING))

    def _registry_path(self, explicit: Path | None, filename: str) -> Path:
        if explicit is not None:
            return explicit

        # Layout used by earlier releases: config/<file> next to the working dir
        for candidate in (
            Path.cwd() / "config" / filename,
            Path.cwd().parent / "config" / filename,
        ):
            if candidate.exists():
                logger.debug("Using registry file found next to cwd: %s", candidate)
                return candidate

        return self._config.config_dir / filename

    @property
    def projects_file(self) -> Path:
        """Resolved path of the project registry."""
        return self._registry_path(self._config.projects_file, PROJECTS_FILENAME)

    @property
    def profiles_file(self) -> Path:
        """Resolved path of the publish profile registry."""
        return self._registry_path(self._config.profiles_file, PROFILES_FILENAME)


def create_user_config(
    cli_config_path: str | Path | None = None,
    file_adapter: FileAdapterProtocol | None = None,
) -> UserConfig:
    """Factory function to create a UserConfig instance.

    Args:
        cli_config_path: Optional config file path provided via CLI
        file_adapter: Optional adapter for file operations

    Returns:
        Configured UserConfig instance
    """
    return UserConfig(cli_config_path=cli_config_path, file_adapter=file_adapter)
