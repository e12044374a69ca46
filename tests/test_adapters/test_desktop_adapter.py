"""Tests for DesktopAdapter."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from apkship.adapters.desktop_adapter import DesktopAdapter, file_manager_command
from apkship.core.errors import ConfigError, ExternalProcessError, NotFoundError


@pytest.mark.parametrize(
    ("platform", "expected"),
    [("darwin", "open"), ("win32", "explorer"), ("linux", "xdg-open")],
)
def test_file_manager_command(platform: str, expected: str):
    assert file_manager_command(platform) == expected


class TestRevealDirectory:
    """Test DesktopAdapter.reveal_directory."""

    def test_runs_opener(self, tmp_path: Path):
        completed = subprocess.CompletedProcess(["xdg-open"], 0, "", "")

        with patch(
            "apkship.adapters.desktop_adapter.subprocess.run", return_value=completed
        ) as mock_run:
            DesktopAdapter("linux").reveal_directory(tmp_path)

        assert mock_run.call_args.args[0] == ["xdg-open", str(tmp_path)]

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(NotFoundError):
            DesktopAdapter("linux").reveal_directory(tmp_path / "missing")

    def test_file_is_rejected(self, tmp_path: Path):
        path = tmp_path / "file.txt"
        path.write_text("x")

        with pytest.raises(ConfigError):
            DesktopAdapter("linux").reveal_directory(path)

    def test_opener_failure(self, tmp_path: Path):
        completed = subprocess.CompletedProcess(["open"], 1, "", "no display")

        with (
            patch(
                "apkship.adapters.desktop_adapter.subprocess.run",
                return_value=completed,
            ),
            pytest.raises(ExternalProcessError, match="no display"),
        ):
            DesktopAdapter("darwin").reveal_directory(tmp_path)

    def test_explorer_exit_code_ignored(self, tmp_path: Path):
        completed = subprocess.CompletedProcess(["explorer"], 1, "", "")

        with patch(
            "apkship.adapters.desktop_adapter.subprocess.run", return_value=completed
        ):
            DesktopAdapter("win32").reveal_directory(tmp_path)

    def test_opener_not_installed(self, tmp_path: Path):
        with (
            patch(
                "apkship.adapters.desktop_adapter.subprocess.run",
                side_effect=FileNotFoundError("xdg-open"),
            ),
            pytest.raises(ExternalProcessError),
        ):
            DesktopAdapter("linux").reveal_directory(tmp_path)
