"""Artifact publishing to distribution platforms."""

from .fir_cli import FirCliPublisher, create_fir_publisher, parse_download_page
from .models import PublishOptions, PublishPlatform, PublishResult
from .pgyer import PgyerPublisher, create_pgyer_publisher
from .service import PublishService, create_publish_service, resolve_changelog


__all__ = [
    "FirCliPublisher",
    "PgyerPublisher",
    "PublishOptions",
    "PublishPlatform",
    "PublishResult",
    "PublishService",
    "create_fir_publisher",
    "create_pgyer_publisher",
    "create_publish_service",
    "parse_download_page",
    "resolve_changelog",
]
