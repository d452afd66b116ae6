"""SpecifierResolver — classify a ``--template`` value into a descriptor.

No network access happens here. ``file:`` specifiers read the template's
manifest directly; every other kind is named from the string alone and
refined later by the metadata fetcher.
"""

from __future__ import annotations

from pathlib import Path

from tplctl.domain.errors import TemplateNotFound
from tplctl.domain.project import TemplateDescriptor
from tplctl.domain.scaffold import MANIFEST_FILENAME
from tplctl.domain.specifiers import (
    URI_SEPARATOR,
    classify,
    default_template_name,
    local_file_path,
    prefixed_template_name,
)
from tplctl.domain.types import ResolutionKind
from tplctl.infrastructure.manifests import read_optional_manifest
from tplctl.services.base import BaseService


class SpecifierResolver(BaseService):
    """Turns raw specifiers into :class:`TemplateDescriptor` values."""

    def resolve(self, specifier: str | None, *, origin_dir: Path) -> TemplateDescriptor:
        """Classify *specifier*; None selects the configured default template.

        Relative ``file:`` paths and archive paths on disk are resolved
        against *origin_dir*.

        Raises:
            TemplateNotFound: A ``file:`` path has no readable, named manifest.
        """
        template_cfg = self._settings.template
        if not specifier:
            canonical = default_template_name(template_cfg.prefix, template_cfg.default)
            descriptor = TemplateDescriptor(
                canonical_name=canonical,
                resolution_kind=ResolutionKind.REGISTRY_NAME,
                raw_value=canonical,
            )
        else:
            kind = classify(specifier)
            if kind is ResolutionKind.LOCAL_FILE:
                descriptor = self._resolve_local(specifier, origin_dir)
            elif kind is ResolutionKind.REGISTRY_NAME:
                descriptor = TemplateDescriptor(
                    canonical_name=prefixed_template_name(specifier, template_cfg.prefix),
                    resolution_kind=kind,
                    raw_value=specifier,
                )
            elif kind is ResolutionKind.REMOTE_ARCHIVE and URI_SEPARATOR not in specifier:
                # Archive on disk; the installer runs inside the target directory.
                descriptor = TemplateDescriptor(
                    canonical_name=specifier,
                    resolution_kind=kind,
                    raw_value=str((origin_dir / specifier).resolve()),
                )
            else:
                descriptor = TemplateDescriptor(
                    canonical_name=specifier,
                    resolution_kind=kind,
                    raw_value=specifier,
                )

        self._log.debug(
            "template.resolved",
            canonical=descriptor.canonical_name,
            kind=str(descriptor.resolution_kind),
        )
        return descriptor

    @staticmethod
    def _resolve_local(specifier: str, origin_dir: Path) -> TemplateDescriptor:
        path = (origin_dir / local_file_path(specifier)).resolve()
        manifest_path = path / MANIFEST_FILENAME
        try:
            manifest = read_optional_manifest(manifest_path)
        except (OSError, ValueError) as exc:
            raise TemplateNotFound(
                f"Could not read template manifest {manifest_path}: {exc}",
                path=str(manifest_path),
            ) from exc
        if manifest is None:
            raise TemplateNotFound(
                f"Could not locate supplied template: {path}",
                path=str(manifest_path),
            )
        name = manifest.get("name")
        if not isinstance(name, str) or not name:
            raise TemplateNotFound(
                f"Template manifest has no name: {manifest_path}",
                path=str(manifest_path),
            )
        return TemplateDescriptor(
            canonical_name=name,
            resolution_kind=ResolutionKind.LOCAL_FILE,
            raw_value=str(path),
        )
