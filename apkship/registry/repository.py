"""Keyed CRUD over the project and publish profile registries."""

import logging
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from apkship.config import UserConfig, create_user_config
from apkship.core.errors import ConfigError, NotFoundError, RegistryError
from apkship.models.base import ApkshipBaseModel
from apkship.protocols import FileAdapterProtocol, RegistryStoreProtocol
from apkship.registry.models import Project, PublishProfile
from apkship.registry.store import JsonFileStore


logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=ApkshipBaseModel)


class RecordRegistry(Generic[RecordT]):
    """Ordered list of named records stored under one key of a document.

    Every mutation re-reads the document and writes it back inside the
    store's transaction.
    """

    collection: str = ""
    record_type: type[RecordT]
    kind: str = "record"

    def __init__(self, store: RegistryStoreProtocol) -> None:
        self.store = store

    def _load_records(self) -> tuple[dict[str, Any], list[RecordT]]:
        document = self.store.load()
        raw = document.get(self.collection)
        if raw is None:
            raw = []
        if not isinstance(raw, list):
            raise RegistryError(f"Registry key '{self.collection}' must hold a list")
        try:
            records = [self.record_type.model_validate(item) for item in raw]
        except ValidationError as e:
            raise RegistryError(f"Invalid {self.kind} entry in registry: {e}") from e
        return document, records

    def _save_records(self, document: dict[str, Any], records: list[RecordT]) -> None:
        document[self.collection] = [record.to_dict_full() for record in records]
        self.store.save(document)

    @staticmethod
    def _index_of(records: list[RecordT], name: str) -> int | None:
        for index, record in enumerate(records):
            if getattr(record, "name", None) == name:
                return index
        return None

    def list(self) -> list[RecordT]:
        return self._load_records()[1]

    def get(self, name: str) -> RecordT:
        records = self.list()
        index = self._index_of(records, name)
        if index is None:
            raise NotFoundError(f"{self.kind.capitalize()} not found: {name}")
        return records[index]

    def find(self, name: str) -> RecordT | None:
        records = self.list()
        index = self._index_of(records, name)
        return None if index is None else records[index]

    def validate_new(self, record: RecordT) -> None:
        """Hook for record-specific checks before add."""

    def validate_update(self, existing: RecordT, record: RecordT) -> None:
        """Hook for record-specific checks before update."""

    def add(self, record: RecordT) -> None:
        with self.store.transaction():
            document, records = self._load_records()
            name = getattr(record, "name")
            if self._index_of(records, name) is not None:
                raise RegistryError(f"{self.kind.capitalize()} already exists: {name}")
            self.validate_new(record)
            records.append(record)
            self._save_records(document, records)
        logger.info("Added %s %s", self.kind, name)

    def update(self, name: str, record: RecordT) -> None:
        with self.store.transaction():
            document, records = self._load_records()
            index = self._index_of(records, name)
            if index is None:
                raise NotFoundError(f"{self.kind.capitalize()} not found: {name}")
            new_name = getattr(record, "name")
            if new_name != name and self._index_of(records, new_name) is not None:
                raise RegistryError(
                    f"{self.kind.capitalize()} already exists: {new_name}"
                )
            self.validate_update(records[index], record)
            records[index] = record
            self._save_records(document, records)
        logger.info("Updated %s %s", self.kind, name)

    def delete(self, name: str) -> None:
        with self.store.transaction():
            document, records = self._load_records()
            index = self._index_of(records, name)
            if index is None:
                raise NotFoundError(f"{self.kind.capitalize()} not found: {name}")
            del records[index]
            self._save_records(document, records)
        logger.info("Deleted %s %s", self.kind, name)


class ProjectRegistry(RecordRegistry[Project]):
    """Registered projects. A project must contain a build-tool launcher."""

    collection = "projects"
    record_type = Project
    kind = "project"

    def _check_launcher(self, project: Project) -> None:
        if not project.has_launcher():
            raise ConfigError(
                f"Build tool launcher not found at {project.launcher_path()}, "
                "check the project path",
                context={"project": project.name, "path": project.path},
            )

    def validate_new(self, record: Project) -> None:
        self._check_launcher(record)

    def validate_update(self, existing: Project, record: Project) -> None:
        if record.path != existing.path:
            self._check_launcher(record)

    def list_projects(self) -> list[Project]:
        return self.list()

    def get_project(self, name: str) -> Project:
        return self.get(name)

    def add_project(self, project: Project) -> None:
        self.add(project)

    def update_project(self, name: str, project: Project) -> None:
        self.update(name, project)

    def delete_project(self, name: str) -> None:
        self.delete(name)


class PublishProfileRegistry(RecordRegistry[PublishProfile]):
    """Named publish profiles."""

    collection = "platforms"
    record_type = PublishProfile
    kind = "publish profile"

    def list_profiles(self) -> list[PublishProfile]:
        return self.list()

    def get_profile(self, name: str) -> PublishProfile:
        return self.get(name)

    def add_profile(self, profile: PublishProfile) -> None:
        self.add(profile)

    def update_profile(self, name: str, profile: PublishProfile) -> None:
        self.update(name, profile)

    def delete_profile(self, name: str) -> None:
        self.delete(name)


def create_project_registry(
    user_config: UserConfig | None = None,
    file_adapter: FileAdapterProtocol | None = None,
) -> ProjectRegistry:
    """Create the project registry backed by the configured JSON file."""
    config = user_config or create_user_config()
    store = JsonFileStore(
        config.projects_file, {"projects": []}, file_adapter=file_adapter
    )
    return ProjectRegistry(store)


def create_profile_registry(
    user_config: UserConfig | None = None,
    file_adapter: FileAdapterProtocol | None = None,
) -> PublishProfileRegistry:
    """Create the publish profile registry backed by the configured JSON file."""
    config = user_config or create_user_config()
    store = JsonFileStore(
        config.profiles_file, {"platforms": []}, file_adapter=file_adapter
    )
    return PublishProfileRegistry(store)
