"""CreateService — the project creation pipeline.

Pipeline: VALIDATE → PREPARE TARGET → RESOLVE → SCAFFOLD → METADATA →
INSTALL → MATERIALIZE → (INSTALL AGAIN) → RESPOND

Stages run strictly in sequence; the first fatal error aborts the run and
comes back as a failed ServiceResult. Nothing is retried.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from tplctl.config.logging import get_logger
from tplctl.domain.errors import InvalidProjectName, PathAlreadyExists, TplError
from tplctl.domain.names import validate_project_name
from tplctl.domain.scaffold import MANIFEST_FILENAME
from tplctl.domain.specifiers import infer_language
from tplctl.infrastructure.filesystem import remove_path
from tplctl.infrastructure.manifests import read_manifest
from tplctl.infrastructure.packages import NodeModulesLocator, PackageLocator
from tplctl.services.install import InstallService
from tplctl.services.materialize import Materializer
from tplctl.services.metadata import MetadataFetcher
from tplctl.services.resolver import SpecifierResolver
from tplctl.services.result import ServiceError, ServiceResult
from tplctl.services.scaffold import ScaffoldService
from tplctl.services.telemetry import StageTimer

if TYPE_CHECKING:
    from tplctl.config.settings import TplSettings
    from tplctl.domain.project import ProjectSpec
    from tplctl.infrastructure.registry import RegistryClient

LocatorFactory = Callable[[Path], PackageLocator]


class CreateService:
    """Materialize one project from a template.

    *locator_factory* builds the package locator for a target directory and
    *registry* overrides the registry client; both exist for tests.
    """

    op = "create_project"

    def __init__(
        self,
        settings: TplSettings,
        *,
        locator_factory: LocatorFactory | None = None,
        registry: RegistryClient | None = None,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._locator_factory = locator_factory or self._node_modules_locator

    def _node_modules_locator(self, root: Path) -> PackageLocator:
        return NodeModulesLocator(root, modules_dir=self._settings.installer.modules_dir)

    def create(self, spec: ProjectSpec) -> ServiceResult:
        """Run the whole pipeline for *spec*."""
        log = get_logger(__name__, project=spec.name)
        timer = StageTimer(log=log, verbose=spec.verbose or self._settings.verbose)
        warnings: list[str] = []
        target = spec.target_path

        try:
            # VALIDATE
            validation = validate_project_name(spec.name)
            if not validation.valid_for_new_packages:
                raise InvalidProjectName(spec.name, validation.problems)

            # PREPARE TARGET
            if target.exists():
                if not spec.overwrite:
                    raise PathAlreadyExists(str(target))
                log.info("target.overwrite", path=str(target))
                remove_path(target)

            with timer.stage("resolve"):
                descriptor = SpecifierResolver(self._settings, log=log).resolve(
                    spec.template_specifier, origin_dir=spec.origin_dir
                )
            language = spec.language or infer_language(descriptor.canonical_name)

            with timer.stage("scaffold"):
                files_created = ScaffoldService(self._settings, log=log).initialize(
                    target, language=language, private=spec.is_private
                )

            with timer.stage("metadata"):
                metadata = MetadataFetcher(self._settings, log=log, registry=self._registry).fetch(
                    descriptor.install_spec, warnings=warnings
                )

            installer = InstallService(self._settings, log=log)
            app_manifest = read_manifest(target / MANIFEST_FILENAME)
            app_dependencies = list(app_manifest.get("dependencies") or {})
            with timer.stage("install"):
                installer.install(
                    target,
                    [*app_dependencies, descriptor.install_spec],
                    verbose=spec.verbose,
                    log_level=spec.log_level,
                )

            with timer.stage("materialize"):
                report = Materializer(
                    self._settings, self._locator_factory(target), log=log
                ).materialize(target, metadata.name, warnings=warnings)

            if spec.install_after:
                with timer.stage("install_after"):
                    installer.install(target, [], verbose=spec.verbose, log_level=spec.log_level)

        except TplError as exc:
            log.debug("create.failed", code=exc.code, error=exc.message)
            return ServiceResult.failure(self.op, exc, warnings=warnings, meta=timer.meta())
        except (OSError, ValueError) as exc:
            log.debug("create.failed", code="IO_ERROR", error=str(exc))
            return ServiceResult(
                ok=False,
                op=self.op,
                error=ServiceError(
                    code="IO_ERROR",
                    message=f"Project creation failed: {exc}",
                    detail={"path": str(target)},
                ),
                warnings=warnings,
                meta=timer.meta(),
            )

        scripts = report.manifest.get("scripts") or {}
        return ServiceResult(
            ok=True,
            op=self.op,
            data={
                "name": spec.name,
                "path": str(target),
                "template": metadata.name,
                "template_version": metadata.version or report.template_version,
                "resolution": str(descriptor.resolution_kind),
                "language": str(language),
                "scripts": list(scripts),
                "files_created": sorted({*files_created, *report.files_written}),
                "readme": report.readme,
                "removed": report.removed,
            },
            warnings=warnings,
            meta=timer.meta(),
        )
