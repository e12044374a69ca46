"""Stage build artifacts into an output directory."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from apkship.adapters import create_file_adapter
from apkship.core.errors import FileSystemError
from apkship.protocols import FileAdapterProtocol


logger = logging.getLogger(__name__)


@dataclass
class StagingReport:
    """Narration lines and the files that reached the destination."""

    lines: list[str] = field(default_factory=list)
    staged: list[Path] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)


class OutputStager:
    """Clear a destination directory and copy artifacts into it.

    Nothing here raises on filesystem failures: every problem becomes a line
    in the report and the remaining copies still run.
    """

    def __init__(self, file_adapter: FileAdapterProtocol | None = None) -> None:
        self.file_adapter = file_adapter or create_file_adapter()

    def stage(self, destination: Path, artifacts: list[Path]) -> StagingReport:
        """Replace the contents of ``destination`` with ``artifacts``.

        Args:
            destination: Output directory, created when missing
            artifacts: Files to copy, stored under their base names

        Returns:
            StagingReport: Log lines plus the destination paths written
        """
        report = StagingReport()

        if self.file_adapter.exists(destination):
            report.lines.append(f"Cleaning output directory: {destination}")
            self._clear(destination, report)

        try:
            self.file_adapter.mkdir(destination)
        except FileSystemError as e:
            report.lines.append(f"Failed to create output directory: {e}")
            logger.warning("Cannot create output directory %s: %s", destination, e)
            return report

        for artifact in artifacts:
            target = destination / artifact.name
            if not self.file_adapter.exists(artifact):
                report.lines.append(f"❌ Source file missing: {artifact}")
                continue
            try:
                self.file_adapter.copy_file(artifact, target)
            except FileSystemError as e:
                report.lines.append(f"❌ Copy failed {artifact.name}: {e}")
                continue
            report.lines.append(f"✅ Copied: {artifact.name} -> {target}")
            report.staged.append(target)

        logger.debug(
            "Staged %d of %d artifacts into %s",
            len(report.staged),
            len(artifacts),
            destination,
        )
        return report

    def _clear(self, directory: Path, report: StagingReport) -> None:
        try:
            entries = self.file_adapter.list_directory(directory)
        except FileSystemError as e:
            report.lines.append(f"⚠️ Failed to list {directory}: {e}")
            return

        for entry in entries:
            try:
                if self.file_adapter.is_dir(entry):
                    self.file_adapter.remove_dir(entry)
                else:
                    self.file_adapter.remove_file(entry)
            except FileSystemError as e:
                report.lines.append(f"⚠️ Failed to remove {entry}: {e}")


def create_output_stager(
    file_adapter: FileAdapterProtocol | None = None,
) -> OutputStager:
    """Create an OutputStager instance."""
    return OutputStager(file_adapter)
