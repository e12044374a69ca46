"""Locate build artifacts in a module's build-output tree."""

import logging
from pathlib import Path

from apkship.adapters import create_file_adapter
from apkship.core.errors import FileSystemError
from apkship.protocols import FileAdapterProtocol


logger = logging.getLogger(__name__)

# (subtree relative to the module directory, artifact extension)
ARTIFACT_SOURCES: tuple[tuple[str, str], ...] = (
    ("build/outputs/apk", ".apk"),
    ("build/outputs/bundle", ".aab"),
)


class ArtifactLocator:
    """Scan build output directories for installable packages.

    Symlinked directories are not followed. Directories that cannot be listed
    are skipped, so a locate call returns whatever the readable part of the
    tree holds and never raises.
    """

    def __init__(self, file_adapter: FileAdapterProtocol | None = None) -> None:
        """Initialize artifact locator.

        Args:
            file_adapter: File operations adapter
        """
        self.file_adapter = file_adapter or create_file_adapter()

    def locate(self, module_dir: Path) -> list[Path]:
        """Find every artifact below the known output subtrees of a module.

        Args:
            module_dir: Module directory (the project root when no module is used)

        Returns:
            list[Path]: Artifact files, APKs first, then bundles
        """
        artifacts: list[Path] = []
        for subtree, extension in ARTIFACT_SOURCES:
            root = module_dir / subtree
            if not self.file_adapter.is_dir(root):
                logger.debug("No output directory at %s", root)
                continue
            self._scan(root, extension, artifacts)

        logger.debug("Found %d artifacts under %s", len(artifacts), module_dir)
        return artifacts

    def _scan(self, directory: Path, extension: str, found: list[Path]) -> None:
        try:
            entries = self.file_adapter.list_directory(directory)
        except FileSystemError as e:
            logger.debug("Skipping unreadable directory %s: %s", directory, e)
            return

        for entry in sorted(entries):
            if self.file_adapter.is_dir(entry):
                if self.file_adapter.is_symlink(entry):
                    logger.debug("Not following symlinked directory %s", entry)
                    continue
                self._scan(entry, extension, found)
            elif entry.suffix == extension:
                found.append(entry)


def create_artifact_locator(
    file_adapter: FileAdapterProtocol | None = None,
) -> ArtifactLocator:
    """Create an ArtifactLocator instance."""
    return ArtifactLocator(file_adapter)
