"""Publish dispatch: pre-checks, strategy selection and failure folding."""

import asyncio
from collections.abc import Iterable
from pathlib import Path
from typing import TypeAlias

from apkship.config import UserConfig
from apkship.config.models import PublishSettings
from apkship.core.errors import ApkshipError, ConfigError, NotFoundError
from apkship.core.structlog_logger import StructlogMixin
from apkship.publish.fir_cli import FirCliPublisher, create_fir_publisher
from apkship.publish.models import (
    PUBLISHABLE_SUFFIXES,
    PublishOptions,
    PublishPlatform,
    PublishResult,
)
from apkship.publish.pgyer import PgyerPublisher, create_pgyer_publisher
from apkship.registry.models import PublishProfile


Publisher: TypeAlias = PgyerPublisher | FirCliPublisher


class PublishService(StructlogMixin):
    """Publish artifacts with the strategy named by a profile's platform tag.

    ``publish`` always returns a PublishResult. Every error raised along the
    way is converted into a failed result carrying the error message.
    """

    def __init__(self, publishers: dict[PublishPlatform, Publisher]) -> None:
        super().__init__()
        self.publishers = publishers

    def publish(
        self,
        file: Path,
        profile: PublishProfile,
        changelog: str | None = None,
    ) -> PublishResult:
        """Publish one artifact.

        Args:
            file: ``.apk`` or ``.aab`` file to upload
            profile: Publish profile with platform tag and credentials
            changelog: Release notes, defaults to the profile's description

        Returns:
            PublishResult, failed when any step went wrong
        """
        self.logger.info(
            "publish_started",
            file=str(file),
            platform=profile.platform,
            profile=profile.name,
        )
        try:
            result = self._publish(file, profile, changelog)
        except ApkshipError as e:
            self.logger.error(
                "publish_failed", error_type=type(e).__name__, error=e.message
            )
            return PublishResult.failure(e.message)
        except Exception as e:
            self.logger.exception("publish_crashed", error=str(e))
            return PublishResult.failure(f"Unexpected error while publishing: {e}")

        self.logger.info("publish_finished", download_url=result.download_url)
        return result

    def _publish(
        self, file: Path, profile: PublishProfile, changelog: str | None
    ) -> PublishResult:
        if not file.exists():
            raise NotFoundError(f"File not found: {file}")
        if not file.name.endswith(PUBLISHABLE_SUFFIXES):
            raise ConfigError("Unsupported file type, only .apk and .aab are accepted")

        try:
            platform = PublishPlatform(profile.platform)
        except ValueError as e:
            raise ConfigError(
                f"Unsupported publish platform: {profile.platform}"
            ) from e

        if platform is PublishPlatform.PGYER and not profile.api_key:
            raise ConfigError("pgyer API key is not configured")
        if platform is PublishPlatform.FIR and not profile.api_token:
            raise ConfigError("fir.im API token is not configured")

        publisher = self.publishers.get(platform)
        if publisher is None:
            raise ConfigError(f"No publisher available for {platform.value}")

        options = PublishOptions(
            api_key=profile.api_key,
            api_token=profile.api_token,
            password=profile.password or None,
            changelog=resolve_changelog(changelog, profile),
            go_fir_cli_path=profile.go_fir_cli_path,
        )
        return publisher.publish(file, options)

    def publish_many(
        self,
        files: Iterable[Path],
        profile: PublishProfile,
        changelog: str | None = None,
    ) -> list[PublishResult]:
        """Publish files in order, stopping after the first failure."""
        results: list[PublishResult] = []
        for file in files:
            result = self.publish(file, profile, changelog)
            results.append(result)
            if not result.success:
                break
        return results

    async def publish_async(
        self,
        file: Path,
        profile: PublishProfile,
        changelog: str | None = None,
    ) -> PublishResult:
        """Run ``publish`` on a worker thread."""
        return await asyncio.to_thread(self.publish, file, profile, changelog)


def resolve_changelog(changelog: str | None, profile: PublishProfile) -> str | None:
    """Explicit changelog first, then the profile default. Blank text is unset."""
    for text in (changelog, profile.default_description):
        if text and text.strip():
            return text.strip()
    return None


def create_publish_service(
    user_config: UserConfig | None = None,
    settings: PublishSettings | None = None,
) -> PublishService:
    """Create a PublishService with both platform strategies."""
    if settings is None:
        settings = user_config.publish if user_config else PublishSettings()
    return PublishService(
        {
            PublishPlatform.PGYER: create_pgyer_publisher(settings=settings),
            PublishPlatform.FIR: create_fir_publisher(settings=settings),
        }
    )
