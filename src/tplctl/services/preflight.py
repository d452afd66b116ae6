"""PreflightService — runtime version gate and environment report."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from packaging.version import InvalidVersion, Version

from tplctl import __version__
from tplctl.domain.errors import RegistryFetchError, UnsupportedRuntimeVersion
from tplctl.infrastructure.environment import probe_version, system_info
from tplctl.infrastructure.registry import RegistryClient
from tplctl.services.base import BaseService
from tplctl.services.result import ServiceResult

if TYPE_CHECKING:
    import structlog

    from tplctl.config.settings import TplSettings

PUBLISHED_NAME = "tplctl"

_VERSION_CORE = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def coerce_version(raw: str | None) -> Version | None:
    """Pull ``major.minor.patch`` out of strings like ``v18.17.0-nightly``."""
    if not raw:
        return None
    match = _VERSION_CORE.search(raw)
    if match is None:
        return None
    major, minor, patch = (part or "0" for part in match.groups())
    try:
        return Version(f"{major}.{minor}.{patch}")
    except InvalidVersion:
        return None


class PreflightService(BaseService):
    """Checks performed before any filesystem mutation."""

    def __init__(
        self,
        settings: TplSettings,
        *,
        log: structlog.stdlib.BoundLogger | None = None,
        registry: RegistryClient | None = None,
    ) -> None:
        super().__init__(settings, log=log)
        self._registry = registry

    def check_runtime(self) -> ServiceResult:
        """Fail unless the JavaScript runtime meets ``runtime.min_major``."""
        op = "preflight"
        runtime = self._settings.runtime
        raw = probe_version(runtime.command)
        version = coerce_version(raw)
        minimum = Version(f"{runtime.min_major}")

        if version is None or version < minimum:
            found = raw or "not found"
            exc = UnsupportedRuntimeVersion(
                f"You are running {runtime.command} {found}. "
                f"Version {runtime.min_major} or higher is required.",
                runtime=runtime.command,
                found=raw,
                required=f">={runtime.min_major}",
            )
            self._log.debug("preflight.failed", runtime=runtime.command, found=raw)
            return ServiceResult.failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={"runtime": runtime.command, "version": str(version)},
        )

    def info(self) -> ServiceResult:
        """Environment debug info: host, runtime, package manager, and the
        latest published tplctl release.

        A failed release lookup only adds a warning.
        """
        runtime_cmd = self._settings.runtime.command
        manager_cmd = self._settings.installer.command
        warnings: list[str] = []
        data: dict[str, str | None] = {
            "tplctl": __version__,
            "tplctl_latest": self._latest_release(warnings),
            **system_info(),
            runtime_cmd: probe_version(runtime_cmd),
            manager_cmd: probe_version(manager_cmd),
            "registry": self._settings.registry.url,
        }
        warnings.extend(
            f"{cmd} not found on PATH" for cmd in (runtime_cmd, manager_cmd) if not data[cmd]
        )
        return ServiceResult(ok=True, op="info", data=data, warnings=warnings)

    def _latest_release(self, warnings: list[str]) -> str | None:
        registry = self._registry or RegistryClient(
            self._settings.registry.url,
            timeout=self._settings.registry.timeout,
        )
        try:
            return registry.latest_version(PUBLISHED_NAME)
        except RegistryFetchError as exc:
            self._log.warning("registry.unavailable", name=PUBLISHED_NAME, error=exc.message)
            warnings.append(f"Could not check the latest {PUBLISHED_NAME} release: {exc.message}")
            return None
