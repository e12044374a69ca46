"""Tests for UserConfig file search, environment overrides and registry paths."""

from pathlib import Path

import pytest

from apkship.config.models import PublishSettings
from apkship.config.user_config import UserConfig, create_user_config
from apkship.core.errors import ConfigError


class TestUserConfigLoading:
    """Tests for config file discovery and precedence."""

    def test_defaults_without_config_file(self, isolated_config: UserConfig):
        """No config file anywhere gives default values."""
        assert isolated_config.config_path is None
        assert isolated_config.data.log_level == "WARNING"
        assert isolated_config.publish == PublishSettings()
        assert isolated_config.get_source("log_level") == "default"

    def test_cwd_file_beats_xdg_file(self, isolated_config: UserConfig, tmp_path: Path):
        """A config file in the working directory is found before the XDG one."""
        xdg_dir = tmp_path / "config-home" / "apkship"
        xdg_dir.mkdir(parents=True)
        (xdg_dir / "config.yaml").write_text("log_level: error\n")
        (tmp_path / "work" / "apkship.yaml").write_text("log_level: debug\n")

        config = UserConfig()

        assert config.config_path == tmp_path / "work" / "apkship.yaml"
        assert config.data.log_level == "DEBUG"
        assert config.get_source("log_level") == "file:apkship.yaml"

    def test_xdg_file_used_as_fallback(
        self, isolated_config: UserConfig, tmp_path: Path
    ):
        xdg_dir = tmp_path / "config-home" / "apkship"
        xdg_dir.mkdir(parents=True)
        (xdg_dir / "config.yml").write_text(
            "publish:\n  poll_max_attempts: 10\n  poll_intervals: [1, 2]\n"
        )

        config = UserConfig()

        assert config.publish.poll_max_attempts == 10
        assert config.publish.poll_intervals == (1.0, 2.0)

    def test_cli_config_path_has_priority(
        self, isolated_config: UserConfig, tmp_path: Path
    ):
        (tmp_path / "work" / "apkship.yaml").write_text("log_level: debug\n")
        cli_file = tmp_path / "custom.yml"
        cli_file.write_text("log_level: critical\n")

        config = create_user_config(cli_config_path=cli_file)

        assert config.config_path == cli_file
        assert config.data.log_level == "CRITICAL"

    def test_missing_cli_config_path(self, isolated_config: UserConfig, tmp_path: Path):
        with pytest.raises(ConfigError, match="Config file not found"):
            UserConfig(cli_config_path=tmp_path / "absent.yml")

    def test_environment_overrides_file(
        self,
        isolated_config: UserConfig,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """APKSHIP_ variables win over the config file, nested keys use '__'."""
        (tmp_path / "work" / "apkship.yaml").write_text(
            "log_level: debug\npublish:\n  http_timeout: 100\n"
        )
        monkeypatch.setenv("APKSHIP_LOG_LEVEL", "error")
        monkeypatch.setenv("APKSHIP_PUBLISH__POLL_INTERVALS", "[0.5, 1.5]")

        config = UserConfig()

        assert config.data.log_level == "ERROR"
        assert config.publish.poll_intervals == (0.5, 1.5)
        assert config.publish.http_timeout == 100
        assert config.get_source("log_level") == "environment"

    @pytest.mark.parametrize(
        "content",
        ["log_level: [unclosed\n", "- just\n- a list\n", "log_level: LOUD\n"],
    )
    def test_invalid_config_file(
        self, isolated_config: UserConfig, tmp_path: Path, content: str
    ):
        (tmp_path / "work" / "apkship.yaml").write_text(content)

        with pytest.raises(ConfigError):
            UserConfig()

    def test_empty_config_file(self, isolated_config: UserConfig, tmp_path: Path):
        (tmp_path / "work" / "apkship.yaml").write_text("")

        assert UserConfig().data.log_level == "WARNING"

    def test_log_level_int(self, isolated_config: UserConfig):
        assert isolated_config.get_log_level_int() == 30


class TestRegistryPaths:
    """Tests for registry file resolution."""

    def test_registry_files_live_in_config_dir(
        self, isolated_config: UserConfig, tmp_path: Path
    ):
        config_dir = tmp_path / "config-home" / "apkship"

        assert isolated_config.projects_file == config_dir / "projects.json"
        assert isolated_config.profiles_file == config_dir / "publish_platforms.json"

    def test_legacy_config_dir_next_to_cwd(
        self, isolated_config: UserConfig, tmp_path: Path
    ):
        """Registries from the older config/ layout are picked up first."""
        legacy = tmp_path / "config"
        legacy.mkdir()
        (legacy / "projects.json").write_text('{"projects": []}')

        assert isolated_config.projects_file == legacy / "projects.json"
        config_dir = tmp_path / "config-home" / "apkship"
        assert isolated_config.profiles_file.parent == config_dir

    def test_explicit_registry_files(
        self,
        isolated_config: UserConfig,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        monkeypatch.setenv("APKSHIP_PROJECTS_FILE", str(tmp_path / "p.json"))

        assert UserConfig().projects_file == tmp_path / "p.json"


class TestPublishSettings:
    """Tests for PublishSettings validation."""

    def test_defaults(self):
        settings = PublishSettings()

        assert settings.poll_max_attempts == 60
        assert settings.poll_intervals == (3.0, 4.0, 5.0)
        assert settings.fir_cli_name == "go-fir-cli"

    @pytest.mark.parametrize("intervals", [(), (1.0, -1.0)])
    def test_invalid_intervals(self, intervals):
        with pytest.raises(ValueError):
            PublishSettings(poll_intervals=intervals)
