"""Package-manager subprocess invocation.

The installer blocks until the child exits and inherits stdio so the
user sees the package manager's own progress. There is no timeout.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from tplctl.domain.errors import InstallFailure

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

# Exit status reported when the executable itself can't be started.
_NOT_FOUND_STATUS = 127


@dataclass(frozen=True)
class InstallCommand:
    """Builds the ``install --save --save-exact`` command line."""

    executable: str = "npm"
    log_level: str = "error"
    verbose: bool = False

    def argv(self, dependencies: Sequence[str]) -> list[str]:
        args = [
            self.executable,
            "install",
            "--no-audit",
            "--save",
            "--save-exact",
            "--loglevel",
            self.log_level,
            *[dep for dep in dependencies if dep],
        ]
        if self.verbose:
            args.append("--verbose")
        return args


def install(root: Path, dependencies: Sequence[str], command: InstallCommand) -> None:
    """Install *dependencies* into *root*, persisting exact versions.

    An empty *dependencies* list installs whatever the manifest declares.

    Raises:
        InstallFailure: The package manager exited non-zero or can't run.
    """
    argv = command.argv(dependencies)
    printable = " ".join(argv)
    executable = shutil.which(command.executable) or command.executable
    logger.debug("Running %s in %s", printable, root)
    try:
        completed = subprocess.run([executable, *argv[1:]], cwd=root, check=False)
    except OSError as exc:
        logger.debug("Could not start %s: %s", command.executable, exc)
        raise InstallFailure(printable, _NOT_FOUND_STATUS) from exc
    if completed.returncode != 0:
        raise InstallFailure(printable, completed.returncode)
