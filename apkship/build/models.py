"""Build request and result models."""

from pathlib import Path

from pydantic import ConfigDict, Field

from apkship.models.base import ApkshipBaseModel
from apkship.registry.models import Project


DEFAULT_BUILD_TYPE = "Debug"


class BuildRequest(ApkshipBaseModel):
    """Per-call overrides for a build. Unset fields fall back to project defaults."""

    project: str
    module: str | None = None
    variant: str | None = None
    build_type: str | None = None
    output_dir: Path | None = None
    extra_args: list[str] = Field(default_factory=list)


class ResolvedBuild(ApkshipBaseModel):
    """Effective build parameters after applying project defaults."""

    model_config = ConfigDict(frozen=True)

    project_root: Path
    module: str | None = None
    variant: str | None = None
    build_type: str = DEFAULT_BUILD_TYPE
    output_dir: Path

    @classmethod
    def resolve(
        cls,
        project: Project,
        module: str | None = None,
        variant: str | None = None,
        build_type: str | None = None,
        output_dir: Path | None = None,
    ) -> "ResolvedBuild":
        """Apply the argument > list head > singular default precedence.

        Args:
            project: Registered project supplying defaults
            module: Module override
            variant: Variant override
            build_type: Build type override
            output_dir: Output directory override

        Returns:
            ResolvedBuild with every field decided
        """
        module = module or _first(project.modules) or project.default_module or None
        variant = (
            variant or _first(project.variants) or project.default_variant or None
        )
        build_type = build_type or project.build_type or DEFAULT_BUILD_TYPE

        root = project.root
        if output_dir is None:
            output_dir = root
            if module:
                output_dir = output_dir / module
            if variant:
                output_dir = output_dir / variant
            output_dir = output_dir / build_type

        return cls(
            project_root=root,
            module=module,
            variant=variant,
            build_type=build_type,
            output_dir=output_dir,
        )

    @property
    def task(self) -> str:
        return compose_task(self.module, self.variant, self.build_type)

    @property
    def module_dir(self) -> Path:
        """Directory whose build tree holds the artifacts."""
        if self.module:
            return self.project_root / self.module
        return self.project_root


class BuildResult(ApkshipBaseModel):
    """Outcome of one build call. ``output`` is the annotated build log."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=False)

    exit_code: int
    output: str
    task: str | None = None
    module: str | None = None
    variant: str | None = None
    build_type: str | None = None
    output_dir: Path | None = None
    staged_files: list[Path] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def compose_task(module: str | None, variant: str | None, build_type: str) -> str:
    """Build-tool task name. Variant and build type are spliced in as given."""
    task = f"assemble{variant or ''}{build_type}"
    if module:
        return f":{module}:{task}"
    return task


def _first(values: list[str] | None) -> str | None:
    if values:
        return values[0]
    return None
