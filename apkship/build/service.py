"""Build orchestration: resolve parameters, run the build tool, stage artifacts."""

import asyncio
from collections.abc import Sequence
from pathlib import Path

from apkship.adapters import create_file_adapter
from apkship.build.locator import ArtifactLocator, create_artifact_locator
from apkship.build.models import BuildRequest, BuildResult, ResolvedBuild
from apkship.build.stager import OutputStager, create_output_stager
from apkship.core.errors import ConfigError
from apkship.core.structlog_logger import StructlogMixin
from apkship.protocols import FileAdapterProtocol
from apkship.publish.models import PUBLISHABLE_SUFFIXES
from apkship.registry import ProjectRegistry, create_project_registry
from apkship.utils.stream_process import (
    CombinedOutputMiddleware,
    LoggerOutputMiddleware,
    run_command,
)


class BuildService(StructlogMixin):
    """Run builds for registered projects.

    Once the launcher is found a build call never raises: a failed build, a
    staging problem or a launcher that cannot be started all end up in the
    returned result's log.
    """

    def __init__(
        self,
        projects: ProjectRegistry,
        file_adapter: FileAdapterProtocol | None = None,
        locator: ArtifactLocator | None = None,
        stager: OutputStager | None = None,
        platform: str | None = None,
    ) -> None:
        super().__init__()
        self.projects = projects
        self.file_adapter = file_adapter or create_file_adapter()
        self.locator = locator or create_artifact_locator(self.file_adapter)
        self.stager = stager or create_output_stager(self.file_adapter)
        self.platform = platform

    def build(
        self,
        project_name: str,
        module: str | None = None,
        variant: str | None = None,
        build_type: str | None = None,
        output_dir: Path | None = None,
        extra_args: Sequence[str] = (),
    ) -> BuildResult:
        """Build one project and stage its artifacts.

        Args:
            project_name: Registered project name
            module: Module override
            variant: Variant override
            build_type: Build type override
            output_dir: Destination for staged artifacts
            extra_args: Additional build-tool arguments after the task

        Returns:
            BuildResult with the exit code and the annotated log

        Raises:
            NotFoundError: If the project is not registered
            ConfigError: If the project has no build-tool launcher
        """
        project = self.projects.get_project(project_name)
        resolved = ResolvedBuild.resolve(
            project,
            module=module,
            variant=variant,
            build_type=build_type,
            output_dir=output_dir,
        )

        launcher = project.launcher_path(self.platform)
        if not self.file_adapter.is_file(launcher):
            raise ConfigError(
                f"Build tool launcher not found at {launcher}, check the project path",
                context={"project": project.name, "launcher": str(launcher)},
            )

        cmd = [str(launcher), resolved.task, *extra_args]
        self.logger.info(
            "build_started",
            project=project.name,
            task=resolved.task,
            output_dir=str(resolved.output_dir),
        )

        capture = CombinedOutputMiddleware(
            LoggerOutputMiddleware(prefix=f"[{project.name}] ")
        )
        try:
            exit_code, _, _ = run_command(
                cmd, middleware=capture, cwd=resolved.project_root
            )
        except OSError as e:
            self.logger.error(
                "build_launch_failed", project=project.name, error=str(e)
            )
            capture.process(f"Failed to run {launcher}: {e}", "stderr")
            exit_code = -1

        staged: list[Path] = []
        if exit_code == 0:
            log, staged = self._collect(resolved, capture.text)
        else:
            log = f"Output directory: {resolved.output_dir}\n\n{capture.text}"

        self.logger.info(
            "build_finished",
            project=project.name,
            exit_code=exit_code,
            staged=len(staged),
        )
        return BuildResult(
            exit_code=exit_code,
            output=log,
            task=resolved.task,
            module=resolved.module,
            variant=resolved.variant,
            build_type=resolved.build_type,
            output_dir=resolved.output_dir,
            staged_files=staged,
        )

    def run(self, request: BuildRequest) -> BuildResult:
        """Build from a BuildRequest."""
        return self.build(
            request.project,
            module=request.module,
            variant=request.variant,
            build_type=request.build_type,
            output_dir=request.output_dir,
            extra_args=request.extra_args,
        )

    def _collect(self, resolved: ResolvedBuild, log: str) -> tuple[str, list[Path]]:
        """Append the locate and stage narration to a successful build log."""
        lines = [
            "",
            "",
            f"Output directory: {resolved.output_dir}",
            f"Search path: {resolved.module_dir}",
        ]
        artifacts = self.locator.locate(resolved.module_dir)
        lines.append(f"Found {len(artifacts)} artifacts")

        staged: list[Path] = []
        if artifacts:
            lines.extend(f"  - {artifact}" for artifact in artifacts)
            report = self.stager.stage(resolved.output_dir, artifacts)
            lines.extend(report.lines)
            staged = report.staged
        else:
            lines.append("No artifacts found, check that the build produced output")

        return log + "\n".join(lines) + "\n", staged

    async def build_async(
        self,
        project_name: str,
        module: str | None = None,
        variant: str | None = None,
        build_type: str | None = None,
        output_dir: Path | None = None,
        extra_args: Sequence[str] = (),
    ) -> BuildResult:
        """Run ``build`` on a worker thread."""
        return await asyncio.to_thread(
            self.build,
            project_name,
            module,
            variant,
            build_type,
            output_dir,
            extra_args,
        )

    def find_publishable_artifacts(self, output_dir: Path) -> list[Path]:
        """Top-level ``.apk``/``.aab`` files of a staged output directory."""
        if not self.file_adapter.is_dir(output_dir):
            return []
        return sorted(
            entry
            for entry in self.file_adapter.list_directory(output_dir)
            if entry.suffix in PUBLISHABLE_SUFFIXES and self.file_adapter.is_file(entry)
        )


def create_build_service(
    projects: ProjectRegistry | None = None,
    file_adapter: FileAdapterProtocol | None = None,
) -> BuildService:
    """Create a BuildService over the configured project registry."""
    adapter = file_adapter or create_file_adapter()
    registry = projects or create_project_registry(file_adapter=adapter)
    return BuildService(registry, file_adapter=adapter)
