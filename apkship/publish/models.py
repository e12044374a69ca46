"""Publish request and result models."""

from enum import Enum

from pydantic import ConfigDict

from apkship.models.base import ApkshipBaseModel


class PublishPlatform(str, Enum):
    """Supported distribution platforms."""

    PGYER = "pgyer"
    FIR = "fir"


PUBLISHABLE_SUFFIXES = (".apk", ".aab")


class PublishOptions(ApkshipBaseModel):
    """Resolved per-call publish inputs handed to a publisher."""

    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    api_token: str | None = None
    password: str | None = None
    changelog: str | None = None
    go_fir_cli_path: str | None = None


class PublishResult(ApkshipBaseModel):
    """Normalized outcome of a publish call, success or not."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=False)

    success: bool
    message: str
    download_url: str | None = None
    qr_code_url: str | None = None
    build_key: str | None = None
    build_shortcut_url: str | None = None

    @classmethod
    def failure(cls, message: str) -> "PublishResult":
        return cls(success=False, message=message)
