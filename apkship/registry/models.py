"""Registry record models."""

import sys
from pathlib import Path

from pydantic import Field, field_validator

from apkship.models.base import ApkshipBaseModel


def launcher_name(platform: str | None = None) -> str:
    """Name of the build-tool launcher script for a platform."""
    platform = platform or sys.platform
    return "gradlew.bat" if platform.startswith("win") else "gradlew"


class Project(ApkshipBaseModel):
    """A registered Android project.

    ``modules`` and ``variants`` are the list forms; ``default_module`` and
    ``default_variant`` are kept for records written before lists existed.
    """

    name: str
    path: str
    default_module: str | None = Field(default=None, alias="defaultModule")
    modules: list[str] | None = None
    default_variant: str | None = Field(default=None, alias="defaultVariant")
    variants: list[str] | None = None
    build_type: str | None = Field(default=None, alias="buildType")

    @field_validator("name", "path")
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v

    @property
    def root(self) -> Path:
        return Path(self.path)

    def launcher_path(self, platform: str | None = None) -> Path:
        """Expected location of the build-tool launcher inside the project."""
        return self.root / launcher_name(platform)

    def has_launcher(self, platform: str | None = None) -> bool:
        return self.launcher_path(platform).is_file()


class PublishProfile(ApkshipBaseModel):
    """Named credentials and defaults for one distribution platform.

    ``platform`` is kept as free text so that a registry entry with an
    unknown tag still loads; publishing rejects it.
    """

    name: str
    platform: str
    api_key: str | None = None
    api_token: str | None = None
    password: str | None = None
    default_description: str | None = None
    go_fir_cli_path: str | None = None

    @field_validator("name", "platform")
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v
