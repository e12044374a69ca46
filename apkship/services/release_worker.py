"""Background execution of builds and publishes."""

from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from types import TracebackType

from apkship.build.models import BuildResult
from apkship.build.service import BuildService
from apkship.core.structlog_logger import StructlogMixin
from apkship.publish.models import PublishResult
from apkship.publish.service import PublishService
from apkship.registry.models import PublishProfile


class ReleaseWorker(StructlogMixin):
    """Thread pool that runs builds and publishes off the caller's thread.

    Submitted work is not cancellable once a worker has picked it up; the
    returned futures can only be waited on or dropped.
    """

    def __init__(
        self,
        build_service: BuildService,
        publish_service: PublishService,
        max_workers: int = 2,
    ) -> None:
        super().__init__()
        self.build_service = build_service
        self.publish_service = publish_service
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="apkship-release"
        )

    def submit_build(
        self,
        project_name: str,
        module: str | None = None,
        variant: str | None = None,
        build_type: str | None = None,
        output_dir: Path | None = None,
        extra_args: Sequence[str] = (),
    ) -> "Future[BuildResult]":
        self.logger.debug("build_submitted", project=project_name)
        return self._executor.submit(
            self.build_service.build,
            project_name,
            module,
            variant,
            build_type,
            output_dir,
            extra_args,
        )

    def submit_publish(
        self,
        file: Path,
        profile: PublishProfile,
        changelog: str | None = None,
    ) -> "Future[PublishResult]":
        self.logger.debug("publish_submitted", file=str(file), profile=profile.name)
        return self._executor.submit(
            self.publish_service.publish, file, profile, changelog
        )

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ReleaseWorker":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.shutdown(wait=True)
