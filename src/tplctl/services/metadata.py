"""MetadataFetcher — name and version of an installable specifier.

The installable form is re-detected from the string itself:

1. ``.tgz`` / ``.tar.gz`` -> extract and read the packed manifest
2. ``git+`` URL           -> repository name from the URL path
3. ``file:`` path         -> read the manifest on disk
4. ``name@version``       -> split at the last ``@``
5. bare name              -> ask the registry for the ``latest`` tag

Archive and registry failures degrade to a best-effort name with no
version and add a warning; they never abort the pipeline.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from tplctl.domain.errors import ArchiveExtractionError, RegistryFetchError, TemplateNotFound
from tplctl.domain.project import PackageMetadata
from tplctl.domain.scaffold import MANIFEST_FILENAME
from tplctl.domain.specifiers import (
    assumed_archive_name,
    git_repository_name,
    has_version_separator,
    is_archive,
    is_git_url,
    is_local_file,
    local_file_path,
    split_name_version,
)
from tplctl.infrastructure.archive import read_archive_manifest
from tplctl.infrastructure.manifests import read_manifest
from tplctl.infrastructure.registry import RegistryClient
from tplctl.services.base import BaseService

if TYPE_CHECKING:
    import requests
    import structlog

    from tplctl.config.settings import TplSettings
    from tplctl.domain.manifest import Manifest


def _metadata_from_manifest(manifest: Manifest, fallback_name: str) -> PackageMetadata:
    name = manifest.get("name")
    version = manifest.get("version")
    return PackageMetadata(
        name=name if isinstance(name, str) and name else fallback_name,
        version=version if isinstance(version, str) and version else None,
    )


class MetadataFetcher(BaseService):
    """Resolve :class:`PackageMetadata` for one specifier at a time."""

    def __init__(
        self,
        settings: TplSettings,
        *,
        log: structlog.stdlib.BoundLogger | None = None,
        registry: RegistryClient | None = None,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(settings, log=log)
        self._session = session
        self._registry = registry or RegistryClient(
            settings.registry.url,
            timeout=settings.registry.timeout,
            session=session,
        )

    def fetch(self, specifier: str, *, warnings: list[str] | None = None) -> PackageMetadata:
        """Return the package name (and version when known) for *specifier*.

        Non-fatal problems are appended to *warnings*.

        Raises:
            TemplateNotFound: A ``file:`` directory has no readable manifest.
        """
        if warnings is None:
            warnings = []

        if is_archive(specifier):
            metadata = self._from_archive(specifier, warnings)
        elif is_git_url(specifier):
            metadata = PackageMetadata(name=git_repository_name(specifier))
        elif is_local_file(specifier):
            metadata = self._from_local(specifier)
        elif has_version_separator(specifier):
            name, version = split_name_version(specifier)
            metadata = PackageMetadata(name=name, version=version)
        else:
            metadata = self._from_registry(specifier, warnings)

        self._log.debug("template.metadata", name=metadata.name, version=metadata.version)
        return metadata

    def _from_archive(self, specifier: str, warnings: list[str]) -> PackageMetadata:
        try:
            manifest = read_archive_manifest(
                specifier,
                session=self._session,
                timeout=self._settings.registry.timeout,
            )
        except ArchiveExtractionError as exc:
            assumed = assumed_archive_name(specifier)
            self._log.warning("archive.fallback", source=specifier, assumed=assumed, error=str(exc))
            warnings.append(f"{exc.message}. Based on the filename, assuming it is {assumed!r}")
            return PackageMetadata(name=assumed)
        return _metadata_from_manifest(manifest, assumed_archive_name(specifier))

    @staticmethod
    def _from_local(specifier: str) -> PackageMetadata:
        path = Path(local_file_path(specifier))
        manifest_path = path / MANIFEST_FILENAME
        try:
            manifest = read_manifest(manifest_path)
        except (OSError, ValueError) as exc:
            raise TemplateNotFound(
                f"Could not read template manifest {manifest_path}: {exc}",
                path=str(manifest_path),
            ) from exc
        return _metadata_from_manifest(manifest, path.name)

    def _from_registry(self, specifier: str, warnings: list[str]) -> PackageMetadata:
        try:
            latest = self._registry.latest_version(specifier)
        except RegistryFetchError as exc:
            self._log.warning("registry.unavailable", name=specifier, error=exc.message)
            warnings.append(f"Could not fetch registry metadata for {specifier}: {exc.message}")
            return PackageMetadata(name=specifier)
        return PackageMetadata(name=specifier, version=latest)
