"""Filesystem operations used while materializing a project.

Pure decisions (what to skip, which names are reserved) live in
:mod:`tplctl.domain.scaffold`; this module only moves bytes around.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)


def remove_path(path: Path) -> bool:
    """Delete a file or directory tree. Returns False if nothing was there."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False


def copy_tree(
    src: Path,
    dest: Path,
    *,
    skip: Callable[[Path], bool],
) -> list[str]:
    """Copy *src* into *dest*, merging with existing content.

    *skip* receives each source-relative file path; returning True leaves
    that file out. Returns the copied paths relative to *dest*, sorted.
    """
    copied: list[str] = []

    def _ignore(directory: str, names: list[str]) -> set[str]:
        base = Path(directory)
        ignored: set[str] = set()
        for name in names:
            full = base / name
            if full.is_file() and skip(full.relative_to(src)):
                ignored.add(name)
        return ignored

    def _copy(source: str, target: str) -> str:
        result = shutil.copy2(source, target)
        copied.append(Path(target).relative_to(dest).as_posix())
        return result

    shutil.copytree(src, dest, ignore=_ignore, copy_function=_copy, dirs_exist_ok=True)
    return sorted(copied)


def append_file(src: Path, dest: Path) -> None:
    """Append the content of *src* to *dest*, then delete *src*."""
    content = src.read_text(encoding="utf-8")
    existing = dest.read_text(encoding="utf-8")
    separator = "" if not existing or existing.endswith("\n") else "\n"
    dest.write_text(existing + separator + content, encoding="utf-8")
    src.unlink()


def move_file(src: Path, dest: Path) -> None:
    shutil.move(str(src), str(dest))


def remove_all(root: Path, names: Iterable[str]) -> list[str]:
    """Remove each of *names* under *root*; return the ones that existed."""
    removed: list[str] = []
    for name in names:
        if remove_path(root / name):
            logger.debug("Removed %s", root / name)
            removed.append(name)
    return removed
