"""InspectService — resolve a template specifier without installing it."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tplctl.domain.errors import TplError
from tplctl.domain.specifiers import infer_language
from tplctl.services.base import BaseService
from tplctl.services.metadata import MetadataFetcher
from tplctl.services.resolver import SpecifierResolver
from tplctl.services.result import ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

    from tplctl.infrastructure.registry import RegistryClient


class InspectService(BaseService):
    """Runs the resolve and metadata stages only."""

    def inspect(
        self,
        specifier: str | None,
        *,
        origin_dir: Path,
        registry: RegistryClient | None = None,
    ) -> ServiceResult:
        op = "resolve_template"
        warnings: list[str] = []
        try:
            descriptor = SpecifierResolver(self._settings, log=self._log).resolve(
                specifier, origin_dir=origin_dir
            )
            metadata = MetadataFetcher(self._settings, log=self._log, registry=registry).fetch(
                descriptor.install_spec, warnings=warnings
            )
        except TplError as exc:
            return ServiceResult.failure(op, exc, warnings=warnings)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "specifier": specifier,
                "canonical_name": descriptor.canonical_name,
                "resolution": str(descriptor.resolution_kind),
                "install_spec": descriptor.install_spec,
                "name": metadata.name,
                "version": metadata.version,
                "language": str(infer_language(descriptor.canonical_name)),
            },
            warnings=warnings,
        )
