"""Build orchestration for registered projects."""

from .locator import ARTIFACT_SOURCES, ArtifactLocator, create_artifact_locator
from .models import BuildRequest, BuildResult, ResolvedBuild, compose_task
from .service import BuildService, create_build_service
from .stager import OutputStager, StagingReport, create_output_stager


__all__ = [
    "ARTIFACT_SOURCES",
    "ArtifactLocator",
    "BuildRequest",
    "BuildResult",
    "BuildService",
    "OutputStager",
    "ResolvedBuild",
    "StagingReport",
    "compose_task",
    "create_artifact_locator",
    "create_build_service",
    "create_output_stager",
]
