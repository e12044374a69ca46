"""End-to-end tests for the apkship command line."""

import json
import sys
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import typer
from typer.testing import CliRunner

from apkship.config.user_config import UserConfig
from apkship.publish.models import PublishResult


UPLOADED = PublishResult(
    success=True,
    message="Upload succeeded",
    download_url="https://www.pgyer.com/abcd",
    qr_code_url="https://www.pgyer.com/qr/abcd",
    build_key="bk-1",
)

posix_only = pytest.mark.skipif(
    sys.platform.startswith("win"), reason="fake gradlew is a POSIX shell script"
)


def invoke(runner: CliRunner, app: typer.Typer, *args: str, **kwargs):
    return runner.invoke(app, list(args), **kwargs)


@pytest.fixture
def registry_dir(
    isolated_config: UserConfig, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Path:
    monkeypatch.setenv("COLUMNS", "200")
    return tmp_path / "config-home" / "apkship"


class TestGlobalOptions:
    """Tests for the main callback."""

    def test_version(self, cli_runner: CliRunner, cli_app: typer.Typer):
        result = invoke(cli_runner, cli_app, "--version")

        assert result.exit_code == 0
        assert result.output.startswith("apkship v")

    def test_missing_config_file(
        self, cli_runner: CliRunner, cli_app: typer.Typer, registry_dir: Path
    ):
        result = invoke(
            cli_runner, cli_app, "-c", "/nonexistent/apkship.yml", "projects", "list"
        )

        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestProjectCommands:
    """Tests for the projects command group."""

    def test_add_and_list(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        registry_dir: Path,
        android_project: Path,
    ):
        result = invoke(
            cli_runner,
            cli_app,
            "projects",
            "add",
            "app",
            str(android_project),
            "--module",
            "app",
            "--variant",
            "free",
            "--variant",
            "paid",
        )
        assert result.exit_code == 0, result.output
        assert "✅ Project 'app' added" in result.output

        stored = json.loads((registry_dir / "projects.json").read_text())
        assert stored["projects"][0]["variants"] == ["free", "paid"]
        assert stored["projects"][0]["path"] == str(android_project)

        listing = invoke(cli_runner, cli_app, "projects", "list")
        assert listing.exit_code == 0
        assert "app" in listing.output
        assert "free, paid" in listing.output

    def test_add_without_launcher_fails(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        registry_dir: Path,
        make_android_project,
    ):
        root = make_android_project("plain", launcher=False)

        result = invoke(cli_runner, cli_app, "projects", "add", "plain", str(root))

        assert result.exit_code == 1
        assert "launcher not found" in result.output

    def test_no_emoji_uses_text_icons(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        registry_dir: Path,
        android_project: Path,
    ):
        result = invoke(
            cli_runner,
            cli_app,
            "--no-emoji",
            "projects",
            "add",
            "app",
            str(android_project),
        )

        assert result.exit_code == 0
        assert "[OK] Project 'app' added" in result.output

    def test_update_and_delete(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        registry_dir: Path,
        android_project: Path,
    ):
        invoke(cli_runner, cli_app, "projects", "add", "app", str(android_project))

        result = invoke(
            cli_runner, cli_app, "projects", "update", "app", "-b", "Release"
        )
        assert result.exit_code == 0, result.output
        stored = json.loads((registry_dir / "projects.json").read_text())
        assert stored["projects"][0]["buildType"] == "Release"

        declined = invoke(
            cli_runner, cli_app, "projects", "delete", "app", input="n\n"
        )
        assert declined.exit_code == 1

        result = invoke(cli_runner, cli_app, "projects", "delete", "app", "-y")
        assert result.exit_code == 0
        stored = json.loads((registry_dir / "projects.json").read_text())
        assert stored["projects"] == []

    def test_update_unknown_project(
        self, cli_runner: CliRunner, cli_app: typer.Typer, registry_dir: Path
    ):
        result = invoke(cli_runner, cli_app, "projects", "update", "ghost", "-b", "X")

        assert result.exit_code == 1
        assert "Project not found: ghost" in result.output


class TestProfileCommands:
    """Tests for the profiles command group."""

    def test_add_and_list_masks_credentials(
        self, cli_runner: CliRunner, cli_app: typer.Typer, registry_dir: Path
    ):
        result = invoke(
            cli_runner,
            cli_app,
            "profiles",
            "add",
            "beta",
            "--platform",
            "pgyer",
            "--api-key",
            "abcdef1234567890",
            "-d",
            "nightly",
        )
        assert result.exit_code == 0, result.output

        listing = invoke(cli_runner, cli_app, "profiles", "list")
        assert listing.exit_code == 0
        assert "abcdef..." in listing.output
        assert "abcdef1234567890" not in listing.output

    def test_unknown_platform_rejected(
        self, cli_runner: CliRunner, cli_app: typer.Typer, registry_dir: Path
    ):
        result = invoke(
            cli_runner, cli_app, "profiles", "add", "x", "--platform", "playstore"
        )

        assert result.exit_code == 2

    def test_update_clears_password(
        self, cli_runner: CliRunner, cli_app: typer.Typer, registry_dir: Path
    ):
        invoke(
            cli_runner,
            cli_app,
            "profiles",
            "add",
            "beta",
            "-p",
            "pgyer",
            "--api-key",
            "k",
            "--password",
            "1234",
        )

        result = invoke(
            cli_runner, cli_app, "profiles", "update", "beta", "--password", ""
        )

        assert result.exit_code == 0, result.output
        stored = json.loads((registry_dir / "publish_platforms.json").read_text())
        assert stored["platforms"][0]["password"] is None
        assert stored["platforms"][0]["api_key"] == "k"


class TestPublishCommand:
    """Tests for the publish command."""

    def test_publish_with_ad_hoc_credentials(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        registry_dir: Path,
        apk_file: Path,
    ):
        service = Mock()
        service.publish_many.return_value = [UPLOADED]

        with patch(
            "apkship.cli.commands.publish.create_publish_service",
            return_value=service,
        ):
            result = invoke(
                cli_runner,
                cli_app,
                "publish",
                str(apk_file),
                "--platform",
                "pgyer",
                "--api-key",
                "k",
                "--changelog",
                "notes",
            )

        assert result.exit_code == 0, result.output
        assert "Download: https://www.pgyer.com/abcd" in result.output
        assert "QR code: https://www.pgyer.com/qr/abcd" in result.output
        files, profile, changelog = service.publish_many.call_args.args
        assert files == [apk_file]
        assert profile.platform == "pgyer"
        assert profile.api_key == "k"
        assert changelog == "notes"

    def test_publish_failure_exits_nonzero(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        registry_dir: Path,
        tmp_path: Path,
    ):
        result = invoke(
            cli_runner,
            cli_app,
            "publish",
            str(tmp_path / "missing.apk"),
            "--platform",
            "fir",
            "--api-token",
            "tok",
        )

        assert result.exit_code == 1
        assert "Publish failed: File not found" in result.output

    def test_publish_requires_profile_or_platform(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        registry_dir: Path,
        apk_file: Path,
    ):
        result = invoke(cli_runner, cli_app, "publish", str(apk_file))

        assert result.exit_code == 1
        assert "--profile or --platform" in result.output

    def test_publish_unknown_profile(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        registry_dir: Path,
        apk_file: Path,
    ):
        result = invoke(cli_runner, cli_app, "publish", str(apk_file), "-p", "nope")

        assert result.exit_code == 1
        assert "Publish profile not found: nope" in result.output


@posix_only
class TestBuildCommand:
    """Tests for the build command against a fake gradlew."""

    @pytest.fixture
    def registered(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        registry_dir: Path,
        android_project: Path,
    ) -> Path:
        result = invoke(
            cli_runner,
            cli_app,
            "projects",
            "add",
            "app",
            str(android_project),
            "-m",
            "app",
            "--variant",
            "free",
        )
        assert result.exit_code == 0, result.output
        return android_project

    def test_build_stages_artifacts(
        self, cli_runner: CliRunner, cli_app: typer.Typer, registered: Path
    ):
        result = invoke(cli_runner, cli_app, "build", "-p", "app")

        assert result.exit_code == 0, result.output
        assert "> Task :app:assemblefreeDebug" in result.output
        assert "Build succeeded (:app:assemblefreeDebug), 2 artifacts" in result.output
        assert (registered / "app" / "free" / "Debug" / "app-free-debug.apk").exists()

    def test_build_failure_exits_nonzero(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        registered: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        monkeypatch.setenv("FAKE_GRADLE_EXIT", "1")

        result = invoke(cli_runner, cli_app, "build", "-p", "app")

        assert result.exit_code == 1
        assert "BUILD FAILED" in result.output
        assert "exit code 1" in result.output

    def test_build_unknown_project(
        self, cli_runner: CliRunner, cli_app: typer.Typer, registry_dir: Path
    ):
        result = invoke(cli_runner, cli_app, "build", "-p", "ghost")

        assert result.exit_code == 1
        assert "Project not found: ghost" in result.output

    def test_build_and_publish_first_artifact(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        registered: Path,
        tmp_path: Path,
    ):
        invoke(
            cli_runner,
            cli_app,
            "profiles",
            "add",
            "beta",
            "-p",
            "pgyer",
            "--api-key",
            "k",
        )
        service = Mock()
        service.publish.return_value = UPLOADED
        dest = tmp_path / "out"

        with patch(
            "apkship.cli.commands.build.create_publish_service",
            return_value=service,
        ):
            result = invoke(
                cli_runner,
                cli_app,
                "build",
                "-p",
                "app",
                "-o",
                str(dest),
                "--publish",
                "beta",
            )

        assert result.exit_code == 0, result.output
        artifact, profile, changelog = service.publish.call_args.args
        assert artifact == dest / "app-free-debug.aab"
        assert profile.name == "beta"
        assert changelog is None
        assert "Download: https://www.pgyer.com/abcd" in result.output

    def test_publish_without_artifacts_fails(
        self, cli_runner: CliRunner, cli_app: typer.Typer, registered: Path
    ):
        with (
            patch(
                "apkship.build.service.ArtifactLocator.locate", return_value=[]
            ),
            patch("apkship.cli.commands.build.create_publish_service") as factory,
        ):
            result = invoke(
                cli_runner, cli_app, "build", "-p", "app", "--publish", "beta"
            )

        assert result.exit_code == 1
        assert "No APK/AAB files were staged" in result.output
        assert "No APK/AAB files found in" in result.output
        factory.assert_not_called()
