"""InstallService — run the package manager for the pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tplctl.infrastructure import installer
from tplctl.services.base import BaseService

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class InstallService(BaseService):
    """Blocking, single-shot dependency installation."""

    def command(self, *, verbose: bool, log_level: str | None = None) -> installer.InstallCommand:
        return installer.InstallCommand(
            executable=self._settings.installer.command,
            log_level=log_level or self._settings.install_log_level,
            verbose=verbose,
        )

    def install(
        self,
        root: Path,
        dependencies: Sequence[str],
        *,
        verbose: bool = False,
        log_level: str | None = None,
    ) -> None:
        """Install *dependencies* into *root*.

        Raises:
            InstallFailure: The package manager exited non-zero.
        """
        wanted = [dep for dep in dependencies if dep]
        self._log.info(
            "install.start",
            manager=self._settings.installer.command,
            dependencies=wanted,
        )
        installer.install(root, wanted, self.command(verbose=verbose, log_level=log_level))
