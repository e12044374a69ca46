"""Signed-upload publisher for pgyer.com.

The upload runs in three steps:

1. ``getCOSToken`` exchanges the API key for an upload endpoint, an object
   key and a set of signing parameters.
2. The artifact is POSTed to that endpoint as a single multipart ``file``
   field. ``x-cos-security-token`` travels as a header, every other signing
   parameter as a URL query parameter.
3. ``buildInfo`` is polled with the object key until the service reports the
   build ready (code 0), fails, or the attempt cap is reached.
"""

import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import requests

from apkship.config.models import PublishSettings
from apkship.core.errors import (
    ExternalServiceError,
    PublishTimeoutError,
    create_file_error,
)
from apkship.core.structlog_logger import StructlogMixin, mask_secret
from apkship.publish.models import PublishOptions, PublishResult


TOKEN_URL = "https://api.pgyer.com/apiv2/app/getCOSToken"
BUILD_INFO_URL = "https://api.pgyer.com/apiv2/app/buildInfo"
DOWNLOAD_BASE_URL = "https://www.pgyer.com/"

BUILD_KIND = "android"
PROCESSING_CODE = 1247
PASSWORD_INSTALL_TYPE = "2"
ARTIFACT_MIME_TYPE = "application/vnd.android.package-archive"

# Signing parameters the storage service expects as headers, not query params
SIGNING_HEADER_PARAMS = frozenset({"x-cos-security-token"})


class UploadTicket:
    """Upload endpoint, object key and signing parameters from step 1."""

    def __init__(self, endpoint: str, key: str, params: dict[str, str]) -> None:
        self.endpoint = endpoint
        self.key = key
        self.params = params

    def split_params(self) -> tuple[dict[str, str], dict[str, str]]:
        """Split signing parameters into (headers, query)."""
        headers: dict[str, str] = {}
        query: dict[str, str] = {}
        for name, value in self.params.items():
            if name in SIGNING_HEADER_PARAMS:
                headers[name] = value
            else:
                query[name] = value
        return headers, query


def multipart_fields(fields: dict[str, str]) -> dict[str, tuple[None, str]]:
    """Encode plain text fields so requests sends them as multipart/form-data."""
    return {name: (None, value) for name, value in fields.items()}


class PgyerPublisher(StructlogMixin):
    """Publish artifacts through the pgyer signed-upload flow.

    Each ``publish`` call opens its own HTTP session, so one publisher can
    serve concurrent uploads.
    """

    def __init__(
        self,
        settings: PublishSettings | None = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__()
        self.settings = settings or PublishSettings()
        self.session_factory = session_factory
        self.sleep = sleep

    @property
    def _timeout(self) -> tuple[float, float]:
        return (self.settings.connect_timeout, self.settings.http_timeout)

    def publish(self, artifact: Path, options: PublishOptions) -> PublishResult:
        """Upload ``artifact`` and wait until the service has processed it.

        Raises:
            ExternalServiceError: Failure code or non-2xx status from the service
            PublishTimeoutError: Still processing after the attempt cap
            FileSystemError: The artifact cannot be read
        """
        api_key = options.api_key or ""
        self.logger.info(
            "pgyer_upload_started", file=str(artifact), api_key=mask_secret(api_key)
        )

        session = self.session_factory()
        try:
            ticket = self.request_ticket(session, api_key, options)
            self.upload(session, artifact, ticket)
            data = self.wait_for_build(session, api_key, ticket.key)
        finally:
            session.close()

        shortcut = data.get("buildShortcutUrl")
        result = PublishResult(
            success=True,
            message="Upload succeeded",
            download_url=f"{DOWNLOAD_BASE_URL}{shortcut}" if shortcut else None,
            qr_code_url=data.get("buildQRCodeURL"),
            build_key=data.get("buildKey"),
            build_shortcut_url=shortcut,
        )
        self.logger.info("pgyer_upload_finished", download_url=result.download_url)
        return result

    def request_ticket(
        self, session: requests.Session, api_key: str, options: PublishOptions
    ) -> UploadTicket:
        """Step 1: exchange the API key for upload credentials."""
        fields = {"_api_key": api_key, "buildType": BUILD_KIND}
        changelog = (options.changelog or "").strip()
        if changelog:
            fields["buildUpdateDescription"] = changelog
        if options.password:
            fields["buildInstallType"] = PASSWORD_INSTALL_TYPE
            fields["buildPassword"] = options.password

        envelope = self._post_form(
            session, TOKEN_URL, fields, "Requesting upload credentials"
        )
        if envelope.get("code") != 0:
            raise ExternalServiceError(
                "Requesting upload credentials failed: "
                f"{envelope.get('message') or 'unknown error'}",
                response_data=envelope,
            )

        data = envelope.get("data") or {}
        endpoint = data.get("endpoint")
        key = data.get("key")
        params = data.get("params")
        if not isinstance(endpoint, str) or not isinstance(key, str):
            raise ExternalServiceError(
                "Upload credentials response lacks endpoint or key",
                response_data=envelope,
            )
        if not isinstance(params, dict):
            raise ExternalServiceError(
                "Upload credentials response lacks signing parameters",
                response_data=envelope,
            )

        signing = {k: v for k, v in params.items() if isinstance(v, str)}
        self.logger.debug(
            "pgyer_ticket_received", endpoint=endpoint, params=len(signing)
        )
        return UploadTicket(endpoint, key, signing)

    def upload(
        self, session: requests.Session, artifact: Path, ticket: UploadTicket
    ) -> None:
        """Step 2: POST the artifact to the signed storage endpoint."""
        try:
            content = artifact.read_bytes()
        except OSError as e:
            raise create_file_error(artifact, "read_bytes", e) from e

        headers, query = ticket.split_params()
        started = time.monotonic()
        try:
            response = session.post(
                ticket.endpoint,
                params=query,
                headers=headers,
                files={"file": (artifact.name, content, ARTIFACT_MIME_TYPE)},
                timeout=self._timeout,
            )
        except requests.exceptions.RequestException as e:
            raise ExternalServiceError(f"Uploading file failed: {e}") from e

        elapsed = time.monotonic() - started
        if not 200 <= response.status_code < 300:
            self.logger.error(
                "pgyer_upload_rejected",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise ExternalServiceError(
                f"Uploading file failed, HTTP status {response.status_code}",
                status_code=response.status_code,
            )
        self.logger.info(
            "pgyer_upload_stored", size=len(content), seconds=round(elapsed, 2)
        )

    def wait_for_build(
        self, session: requests.Session, api_key: str, build_key: str
    ) -> dict[str, Any]:
        """Step 3: poll the build status until it leaves the processing state."""
        fields = {"_api_key": api_key, "buildKey": build_key}
        intervals = self.settings.poll_intervals
        max_attempts = self.settings.poll_max_attempts
        retries = 0

        while True:
            envelope = self._post_form(
                session, BUILD_INFO_URL, fields, "Checking upload status"
            )
            code = envelope.get("code")

            if code == 0:
                data = envelope.get("data")
                return data if isinstance(data, dict) else {}

            if code != PROCESSING_CODE:
                raise ExternalServiceError(
                    "Checking upload status failed: "
                    f"{envelope.get('message') or 'unknown error'}",
                    response_data=envelope,
                )

            retries += 1
            if retries >= max_attempts:
                raise PublishTimeoutError(
                    f"Timed out waiting for upload processing after {max_attempts} "
                    "status checks",
                    context={"build_key": build_key},
                )

            wait = intervals[retries % len(intervals)]
            self.logger.info("pgyer_build_processing", retry=retries, wait=wait)
            self.sleep(wait)

    def _post_form(
        self,
        session: requests.Session,
        url: str,
        fields: dict[str, str],
        action: str,
    ) -> dict[str, Any]:
        try:
            response = session.post(
                url, files=multipart_fields(fields), timeout=self._timeout
            )
        except requests.exceptions.RequestException as e:
            raise ExternalServiceError(f"{action} failed: {e}") from e

        try:
            envelope = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                f"{action} failed: invalid JSON response "
                f"(HTTP {response.status_code})",
                status_code=response.status_code,
            ) from e

        if not isinstance(envelope, dict):
            raise ExternalServiceError(
                f"{action} failed: unexpected response shape",
                status_code=response.status_code,
                response_data=envelope,
            )
        return envelope


def create_pgyer_publisher(
    settings: PublishSettings | None = None,
    session_factory: Callable[[], requests.Session] = requests.Session,
    sleep: Callable[[float], None] = time.sleep,
) -> PgyerPublisher:
    """Create a PgyerPublisher instance."""
    return PgyerPublisher(
        settings=settings, session_factory=session_factory, sleep=sleep
    )
