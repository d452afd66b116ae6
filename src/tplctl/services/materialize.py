"""Materializer — merge manifests and copy the installed template.

Pipeline: LOAD LAYERS → MERGE → PERSIST → COPY → README → IGNORE FILES → CLEAN

The installed template package is located through an injected
:class:`~tplctl.infrastructure.packages.PackageLocator`, so tests can point
it at any directory instead of a real ``node_modules`` tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from tplctl.domain.errors import TemplateNotFound
from tplctl.domain.manifest import (
    compute_final_manifest,
    deprecated_descriptor_keys,
    override_layer_from_descriptor,
)
from tplctl.domain.scaffold import (
    APP_NAME_TOKEN,
    DEFAULT_GITIGNORE,
    DESCRIPTOR_FILENAME,
    IGNORE_FILES,
    MANIFEST_FILENAME,
    README_FILENAME,
    TEMPLATE_DIRNAME,
    TEMPLATE_MANIFEST_PATHS,
)
from tplctl.infrastructure.filesystem import (
    append_file,
    copy_tree,
    move_file,
    remove_all,
    remove_path,
)
from tplctl.infrastructure.manifests import read_manifest, read_optional_manifest, write_manifest
from tplctl.services.base import BaseService

if TYPE_CHECKING:
    import structlog

    from tplctl.config.settings import TplSettings
    from tplctl.domain.manifest import Manifest
    from tplctl.infrastructure.packages import PackageLocator


@dataclass
class MaterializeReport:
    """What the materializer did to the target directory."""

    manifest: Manifest
    files_copied: list[str] = field(default_factory=list)
    readme: bool = False
    ignore_files: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    template_version: str | None = None

    @property
    def files_written(self) -> list[str]:
        extra = [README_FILENAME] if self.readme else []
        return sorted({*self.files_copied, *self.ignore_files, *extra})


def is_reserved(relative: Path) -> bool:
    """Files handled outside the raw copy: every ``package.json`` and
    ``README.md``, at any depth.
    """
    return relative.name in (MANIFEST_FILENAME, README_FILENAME)


class Materializer(BaseService):
    """Stage 5: final manifest plus the template's file tree."""

    def __init__(
        self,
        settings: TplSettings,
        locator: PackageLocator,
        *,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        super().__init__(settings, log=log)
        self._locator = locator

    def materialize(
        self,
        target: Path,
        template_name: str,
        *,
        warnings: list[str] | None = None,
    ) -> MaterializeReport:
        """Apply the installed template *template_name* to *target*.

        Raises:
            TemplateNotFound: The package or its ``template/`` directory is
                missing after install.
        """
        if warnings is None:
            warnings = []

        package_root = self._locator.package_root(template_name)
        template_dir = package_root / TEMPLATE_DIRNAME
        if not template_dir.is_dir():
            raise TemplateNotFound(
                f"Could not locate supplied template: {template_dir}",
                path=str(template_dir),
                template=template_name,
            )

        # LOAD LAYERS
        app_layer = read_manifest(target / MANIFEST_FILENAME)
        template_layer = _template_manifest(template_dir)
        descriptor = read_optional_manifest(package_root / DESCRIPTOR_FILENAME)
        deprecated = deprecated_descriptor_keys(descriptor)
        if deprecated:
            keys = ", ".join(f"`{k}`" for k in deprecated)
            warnings.append(
                f"Root-level {keys} in {DESCRIPTOR_FILENAME} are deprecated; "
                "this template needs to be updated to use the `package` key."
            )
            self._log.warning("template.deprecated_keys", keys=deprecated)
        override_layer = override_layer_from_descriptor(descriptor)

        # MERGE + PERSIST
        final = compute_final_manifest(app_layer, template_layer, override_layer)
        write_manifest(target / MANIFEST_FILENAME, final)

        report = MaterializeReport(manifest=final, template_version=_package_version(package_root))

        # COPY
        report.files_copied = copy_tree(template_dir, target, skip=is_reserved)
        self._log.debug("template.copied", count=len(report.files_copied))

        report.readme = self._write_readme(template_dir, target, str(final.get("name", "")))
        report.ignore_files = self._restore_ignore_files(target)
        report.files_copied = [f for f in report.files_copied if f not in IGNORE_FILES]

        # CLEAN
        installer_cfg = self._settings.installer
        report.removed = remove_all(target, [installer_cfg.modules_dir, *installer_cfg.lockfiles])
        return report

    @staticmethod
    def _write_readme(template_dir: Path, target: Path, app_name: str) -> bool:
        source = template_dir / README_FILENAME
        if not source.is_file():
            return False
        content = source.read_text(encoding="utf-8")
        destination = target / README_FILENAME
        remove_path(destination)
        destination.write_text(content.replace(APP_NAME_TOKEN, app_name), encoding="utf-8")
        return True

    def _restore_ignore_files(self, target: Path) -> list[str]:
        """Rename undotted ignore files; synthesize ``.gitignore`` if absent."""
        written: list[str] = []
        for plain, dotted in IGNORE_FILES.items():
            source = target / plain
            if not source.is_file():
                continue
            destination = target / dotted
            if destination.exists():
                append_file(source, destination)
            else:
                move_file(source, destination)
            written.append(dotted)

        gitignore = target / IGNORE_FILES["gitignore"]
        if not gitignore.exists():
            gitignore.write_text(DEFAULT_GITIGNORE, encoding="utf-8")
            self._log.debug("gitignore.synthesized", path=str(gitignore))
            written.append(gitignore.name)
        return written


def _package_version(package_root: Path) -> str | None:
    try:
        manifest = read_optional_manifest(package_root / MANIFEST_FILENAME)
    except (OSError, ValueError):
        return None
    version = (manifest or {}).get("version")
    return version if isinstance(version, str) else None


def _template_manifest(template_dir: Path) -> Manifest | None:
    for relative in TEMPLATE_MANIFEST_PATHS:
        manifest = read_optional_manifest(template_dir / relative)
        if manifest is not None:
            return manifest
    return None
