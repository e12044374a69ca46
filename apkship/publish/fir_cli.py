"""Delegated-CLI publisher for fir.im.

The upload itself is performed by the external ``go-fir-cli`` tool. This
module finds the tool, makes sure it is executable, runs it and reads the
download page URL back from its output.
"""

import logging
import os
import shutil
import stat
import sys
from collections.abc import Callable
from pathlib import Path

from apkship.config.models import PublishSettings
from apkship.core.errors import ConfigError, ExternalProcessError
from apkship.core.structlog_logger import StructlogMixin, mask_secret
from apkship.publish.models import PublishOptions, PublishResult
from apkship.utils.stream_process import LoggerOutputMiddleware, run_command


logger = logging.getLogger(__name__)

DOWNLOAD_PAGE_MARKER = "下载页面:"
RELEASES_URL = "https://github.com/PGYER/go-fir-cli/releases"

CommandRunner = Callable[[list[str]], tuple[int, list[str], list[str]]]


def default_runner(cmd: list[str]) -> tuple[int, list[str], list[str]]:
    """Run a command, logging its output and returning it split by stream."""
    return run_command(cmd, middleware=LoggerOutputMiddleware(prefix="[fir] "))


def parse_download_page(stdout: str) -> str | None:
    """Return the URL following the download page marker, if any."""
    for line in stdout.splitlines():
        index = line.find(DOWNLOAD_PAGE_MARKER)
        if index < 0:
            continue
        url = line[index + len(DOWNLOAD_PAGE_MARKER) :].strip()
        if url:
            return url
    return None


class FirCliPublisher(StructlogMixin):
    """Publish artifacts to fir.im through go-fir-cli."""

    def __init__(
        self,
        settings: PublishSettings | None = None,
        which: Callable[[str], str | None] = shutil.which,
        runner: CommandRunner = default_runner,
        platform: str | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings or PublishSettings()
        self.which = which
        self.runner = runner
        self.platform = platform or sys.platform

    @property
    def tool_name(self) -> str:
        return self.settings.fir_cli_name

    def publish(self, artifact: Path, options: PublishOptions) -> PublishResult:
        """Upload ``artifact`` with the CLI.

        Raises:
            ConfigError: The tool cannot be found or made executable
            ExternalProcessError: The tool could not start or exited non-zero
        """
        token = options.api_token or ""
        cli = self.discover(options.go_fir_cli_path)
        self.ensure_executable(cli)

        cmd = [str(cli), "-t", token, "upload", "-f", str(artifact)]
        changelog = (options.changelog or "").strip()
        if changelog:
            cmd.extend(["-c", changelog])

        self.logger.info(
            "fir_upload_started",
            cli=str(cli),
            file=str(artifact),
            api_token=mask_secret(token),
        )
        try:
            exit_code, stdout_lines, stderr_lines = self.runner(cmd)
        except OSError as e:
            raise ExternalProcessError(
                f"Running {self.tool_name} failed: {e}\n\n"
                f"Tool path: {cli}\n"
                f"Make sure {self.tool_name} is installed and executable "
                f"(chmod +x {cli}).",
                context={"cli": str(cli)},
            ) from e

        stdout = "\n".join(stdout_lines)
        stderr = "\n".join(stderr_lines)
        if exit_code != 0:
            raise ExternalProcessError(
                f"{self.tool_name} upload failed (exit code {exit_code})\n"
                f"stdout: {stdout}\nstderr: {stderr}",
                exit_code=exit_code,
                stdout=stdout,
                stderr=stderr,
            )

        page_url = parse_download_page(stdout)
        if page_url is None:
            self.logger.warning("fir_download_page_missing")
        self.logger.info("fir_upload_finished", download_url=page_url)
        return PublishResult(
            success=True,
            message="fir.im upload succeeded",
            download_url=page_url,
            build_shortcut_url=page_url,
        )

    def discover(self, configured_path: str | None) -> Path:
        """Locate the CLI on PATH, then at the profile's configured path."""
        details: list[str] = []

        found = self.which(self.tool_name)
        if found and Path(found).exists():
            logger.debug("Found %s on PATH: %s", self.tool_name, found)
            return Path(found)
        if found:
            details.append(f"PATH lookup returned a missing file: {found}")
        else:
            details.append(f"{self.tool_name} is not on PATH")

        candidate = (configured_path or "").strip()
        if not configured_path:
            details.append(f"No {self.tool_name} path set in the publish profile")
        elif not candidate:
            details.append("The configured tool path is blank")
        elif Path(candidate).exists():
            logger.debug("Using configured %s: %s", self.tool_name, candidate)
            return Path(candidate)
        else:
            details.append(f"Configured path does not exist: {candidate}")

        raise ConfigError(self._missing_tool_message(details))

    def _missing_tool_message(self, details: list[str]) -> str:
        lines = [
            f"{self.tool_name} not found",
            "",
            "To fix this:",
            f"1. Set the {self.tool_name} path in the fir publish profile,",
            f"   for example /usr/local/bin/{self.tool_name}",
            f"2. Or install {self.tool_name} into a directory on PATH:",
            f"   - download a release from {RELEASES_URL}",
            "   - place the binary in a PATH directory such as /usr/local/bin",
            f"   - make it executable: chmod +x /usr/local/bin/{self.tool_name}",
            "",
            "Search details:",
        ]
        lines.extend(f"  {i}. {detail}" for i, detail in enumerate(details, 1))
        return "\n".join(lines)

    def ensure_executable(self, cli: Path) -> None:
        """Add execute permission bits when the tool has none."""
        if self.platform.startswith("win"):
            return

        try:
            mode = os.stat(cli).st_mode
        except OSError as e:
            logger.debug("Cannot stat %s, trying to run it anyway: %s", cli, e)
            return

        if mode & 0o111:
            return

        self.logger.warning("fir_cli_not_executable", cli=str(cli), mode=oct(mode))
        try:
            os.chmod(cli, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as e:
            raise ConfigError(
                f"{self.tool_name} is not executable and the permission could not "
                f"be fixed automatically\n\n"
                f"Tool path: {cli}\n"
                f"Error: {e}\n\n"
                f"Run this command to fix it:\n"
                f"chmod +x {cli}",
                context={"cli": str(cli)},
            ) from e


def create_fir_publisher(
    settings: PublishSettings | None = None,
    which: Callable[[str], str | None] = shutil.which,
    runner: CommandRunner = default_runner,
) -> FirCliPublisher:
    """Create a FirCliPublisher instance."""
    return FirCliPublisher(settings=settings, which=which, runner=runner)
