"""Tests for FileSystemAdapter implementation."""

import json
from pathlib import Path
from unittest.mock import mock_open, patch

import pytest

from apkship.adapters.file_adapter import FileSystemAdapter, create_file_adapter
from apkship.core.errors import FileSystemError
from apkship.protocols import FileAdapterProtocol


@pytest.fixture
def adapter() -> FileSystemAdapter:
    return FileSystemAdapter()


class TestFileSystemAdapter:
    """Test FileSystemAdapter class."""

    def test_satisfies_protocol(self):
        """Test the factory returns a protocol-compliant adapter."""
        assert isinstance(create_file_adapter(), FileAdapterProtocol)

    def test_read_json_keeps_camel_case_keys(self, adapter: FileSystemAdapter):
        """Test read_json preserves original field names."""
        content = '{"defaultModule": "app", "buildType": "Debug"}'

        with patch("pathlib.Path.open", mock_open(read_data=content)):
            result = adapter.read_json(Path("/test/projects.json"))

        assert result == {"defaultModule": "app", "buildType": "Debug"}

    def test_read_text_missing_file(self, adapter: FileSystemAdapter, tmp_path: Path):
        with pytest.raises(FileSystemError) as exc_info:
            adapter.read_text(tmp_path / "missing.txt")

        assert exc_info.value.operation == "read_text"
        assert exc_info.value.context["error_type"] == "FileNotFoundError"

    def test_read_json_invalid(self, adapter: FileSystemAdapter, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{oops")

        with pytest.raises(FileSystemError) as exc_info:
            adapter.read_json(path)

        assert exc_info.value.operation == "read_json"

    def test_read_json_requires_object(
        self, adapter: FileSystemAdapter, tmp_path: Path
    ):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")

        with pytest.raises(FileSystemError, match="Expected a JSON object"):
            adapter.read_json(path)

    def test_write_json_creates_parents_and_keeps_unicode(
        self, adapter: FileSystemAdapter, tmp_path: Path
    ):
        """Test write_json writes readable UTF-8 through a temporary file."""
        path = tmp_path / "nested" / "dir" / "data.json"

        adapter.write_json(path, {"description": "夜间构建", "password": None})

        assert json.loads(path.read_text(encoding="utf-8")) == {
            "description": "夜间构建",
            "password": None,
        }
        assert "夜间构建" in path.read_text(encoding="utf-8")
        assert [p.name for p in path.parent.iterdir()] == ["data.json"]

    def test_write_failure_leaves_no_temp_file(
        self, adapter: FileSystemAdapter, tmp_path: Path
    ):
        path = tmp_path / "data.json"

        with (
            patch("apkship.adapters.file_adapter.os.replace", side_effect=OSError("x")),
            pytest.raises(FileSystemError),
        ):
            adapter.write_text(path, "content")

        assert list(tmp_path.iterdir()) == []

    def test_copy_file(self, adapter: FileSystemAdapter, tmp_path: Path):
        src = tmp_path / "a.apk"
        src.write_bytes(b"apk")

        adapter.copy_file(src, tmp_path / "out" / "a.apk")

        assert (tmp_path / "out" / "a.apk").read_bytes() == b"apk"

    def test_copy_missing_source(self, adapter: FileSystemAdapter, tmp_path: Path):
        with pytest.raises(FileSystemError) as exc_info:
            adapter.copy_file(tmp_path / "none.apk", tmp_path / "out.apk")

        assert exc_info.value.operation == "copy_file"

    def test_list_directory_missing(
        self, adapter: FileSystemAdapter, tmp_path: Path
    ):
        with pytest.raises(FileSystemError):
            adapter.list_directory(tmp_path / "missing")

    def test_remove_helpers_ignore_missing(
        self, adapter: FileSystemAdapter, tmp_path: Path
    ):
        adapter.remove_file(tmp_path / "none.txt")
        adapter.remove_dir(tmp_path / "none")

    def test_remove_dir_recursive(self, adapter: FileSystemAdapter, tmp_path: Path):
        target = tmp_path / "tree"
        (target / "sub").mkdir(parents=True)
        (target / "sub" / "f.txt").write_text("x")

        adapter.remove_dir(target)

        assert not target.exists()
