"""Immutable models flowing through the creation pipeline.

ProjectSpec is built once by the CLI layer. TemplateDescriptor is produced
by the specifier resolver, PackageMetadata by the metadata fetcher. None of
them change after construction.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from tplctl.domain.types import Language, ResolutionKind


class ProjectSpec(BaseModel):
    """A single project-creation request.

    Attributes:
        name: Project name (final segment of ``target_path``).
        target_path: Absolute directory the project is materialized into.
        template_specifier: Raw ``--template`` value, or None for the default.
        language: Requested language mode. None infers it from the template.
        is_private: Value of ``private`` in the skeleton manifest.
        overwrite: Delete an existing ``target_path`` instead of failing.
        verbose: Extra installer and log output.
        log_level: Package-manager ``--loglevel`` value.
        install_after: Re-run the installer once the manifest is merged.
        origin_dir: Directory ``file:`` specifiers are resolved against.
    """

    model_config = {"frozen": True}

    name: str
    target_path: Path
    template_specifier: str | None = None
    language: Language | None = None
    is_private: bool = True
    overwrite: bool = False
    verbose: bool = False
    log_level: str = "error"
    install_after: bool = False
    origin_dir: Path = Field(default_factory=Path.cwd)

    @classmethod
    def for_directory(cls, directory: str | Path, **kwargs: object) -> ProjectSpec:
        """Build a spec whose name is the basename of the resolved *directory*."""
        target = Path(directory).resolve()
        return cls(name=target.name, target_path=target, **kwargs)  # type: ignore[arg-type]


class TemplateDescriptor(BaseModel):
    """Classified template specifier."""

    model_config = {"frozen": True}

    canonical_name: str
    resolution_kind: ResolutionKind
    raw_value: str

    @property
    def install_spec(self) -> str:
        """Identifier handed to the package manager."""
        if self.resolution_kind is ResolutionKind.LOCAL_FILE:
            return f"file:{self.raw_value}"
        if self.resolution_kind is ResolutionKind.REGISTRY_NAME:
            return self.canonical_name
        return self.raw_value


class PackageMetadata(BaseModel):
    """Name and optional version of an installable package."""

    model_config = {"frozen": True}

    name: str
    version: str | None = None
