"""Core test fixtures for the apkship project."""

import os
import stat
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
from typer.testing import CliRunner

from apkship.config.user_config import UserConfig
from apkship.protocols import FileAdapterProtocol
from apkship.registry import (
    MemoryStore,
    Project,
    ProjectRegistry,
    PublishProfile,
    PublishProfileRegistry,
)


FAKE_GRADLEW = """#!/bin/sh
echo "> Task $1"
for arg in "$@"; do echo "arg: $arg"; done
echo "warning: deprecated API" >&2
if [ "${FAKE_GRADLE_EXIT:-0}" != "0" ]; then
    echo "BUILD FAILED"
    exit "$FAKE_GRADLE_EXIT"
fi
mkdir -p app/build/outputs/apk/free/debug app/build/outputs/bundle/freeDebug
echo apk > app/build/outputs/apk/free/debug/app-free-debug.apk
echo aab > app/build/outputs/bundle/freeDebug/app-free-debug.aab
echo "BUILD SUCCESSFUL"
"""


# ---- Base Fixtures ----


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def mock_file_adapter() -> Mock:
    """Create a mock file adapter for testing."""
    adapter = Mock(spec=FileAdapterProtocol)
    return adapter


# ---- Test Isolation Fixtures ----


@pytest.fixture
def isolated_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[UserConfig, None, None]:
    """UserConfig whose config dir, XDG dir and cwd all live under tmp_path.

    Any APKSHIP_ variables from the developer's shell are removed first.
    """
    for key in list(os.environ):
        if key.startswith("APKSHIP_"):
            monkeypatch.delenv(key)

    work_dir = tmp_path / "work"
    work_dir.mkdir()
    config_dir = tmp_path / "config-home" / "apkship"

    monkeypatch.chdir(work_dir)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config-home"))
    monkeypatch.setenv("APKSHIP_CONFIG_DIR", str(config_dir))

    yield UserConfig()


# ---- Domain Fixtures ----


@pytest.fixture
def make_android_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory creating a project root with an executable fake gradlew."""

    def _make(name: str = "app-root", launcher: bool = True) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        if launcher:
            gradlew = root / "gradlew"
            gradlew.write_text(FAKE_GRADLEW)
            gradlew.chmod(gradlew.stat().st_mode | stat.S_IXUSR)
        return root

    return _make


@pytest.fixture
def android_project(make_android_project: Callable[..., Path]) -> Path:
    return make_android_project()


@pytest.fixture
def project_registry() -> ProjectRegistry:
    return ProjectRegistry(MemoryStore({"projects": []}))


@pytest.fixture
def profile_registry() -> PublishProfileRegistry:
    return PublishProfileRegistry(MemoryStore({"platforms": []}))


@pytest.fixture
def app_project(android_project: Path) -> Project:
    return Project(
        name="app",
        path=str(android_project),
        modules=["app"],
        variants=["free"],
        build_type="Debug",
    )


@pytest.fixture
def pgyer_profile() -> PublishProfile:
    return PublishProfile(
        name="pgyer-beta",
        platform="pgyer",
        api_key="abcdef1234567890",
        default_description="nightly build",
    )


@pytest.fixture
def fir_profile() -> PublishProfile:
    return PublishProfile(name="fir-prod", platform="fir", api_token="tok123456789")


@pytest.fixture
def apk_file(tmp_path: Path) -> Path:
    path = tmp_path / "dist" / "app-release.apk"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"PK\x03\x04fake-apk")
    return path


@pytest.fixture
def make_response() -> Callable[..., Mock]:
    """Factory for mock requests.Response objects."""

    def _make(json_data: Any = None, status_code: int = 200, text: str = "") -> Mock:
        response = Mock()
        response.status_code = status_code
        response.text = text
        if isinstance(json_data, Exception):
            response.json.side_effect = json_data
        else:
            response.json.return_value = json_data
        return response

    return _make
