"""Locating installed packages on disk.

The materializer never resolves packages itself; it receives a
:class:`PackageLocator`. Production code uses :class:`NodeModulesLocator`,
which follows the Node resolution walk-up. Tests substitute a fake that
points at a directory in ``tmp_path``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from tplctl.domain.errors import TemplateNotFound
from tplctl.domain.scaffold import MANIFEST_FILENAME


class PackageLocator(Protocol):
    """Maps a package name to the root directory of its installed copy."""

    def package_root(self, name: str) -> Path:
        """Return the directory holding the package's manifest.

        Raises:
            TemplateNotFound: The package is not installed.
        """
        ...


class NodeModulesLocator:
    """Resolve ``<dir>/node_modules/<name>`` walking up from *start*."""

    def __init__(self, start: Path, *, modules_dir: str = "node_modules") -> None:
        self._start = start.resolve()
        self._modules_dir = modules_dir

    def candidates(self, name: str) -> list[Path]:
        current = self._start
        found: list[Path] = []
        while True:
            found.append(current / self._modules_dir / name)
            if current.parent == current:
                return found
            current = current.parent

    def package_root(self, name: str) -> Path:
        searched = self.candidates(name)
        for candidate in searched:
            if (candidate / MANIFEST_FILENAME).is_file():
                return candidate
        raise TemplateNotFound(
            f"Could not locate installed package {name!r} from {self._start}",
            name=name,
            searched=[str(p) for p in searched],
        )
