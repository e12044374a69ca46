"""Project and publish profile registries."""

from .models import Project, PublishProfile, launcher_name
from .repository import (
    ProjectRegistry,
    PublishProfileRegistry,
    create_profile_registry,
    create_project_registry,
)
from .store import JsonFileStore, MemoryStore


__all__ = [
    "JsonFileStore",
    "MemoryStore",
    "Project",
    "ProjectRegistry",
    "PublishProfile",
    "PublishProfileRegistry",
    "create_profile_registry",
    "create_project_registry",
    "launcher_name",
]
