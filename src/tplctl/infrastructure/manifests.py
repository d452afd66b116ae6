"""JSON manifest file I/O."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from tplctl.domain.manifest import Manifest, render_manifest


def read_manifest(path: Path) -> Manifest:
    """Read a JSON object from *path*.

    Raises:
        OSError: The file can't be read.
        ValueError: The content is not a JSON object.
    """
    data: Any = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        msg = f"Expected a JSON object in {path}"
        raise ValueError(msg)
    return data


def read_optional_manifest(path: Path) -> Manifest | None:
    """Like :func:`read_manifest`, but None when *path* doesn't exist."""
    if not path.is_file():
        return None
    return read_manifest(path)


def write_manifest(path: Path, manifest: Manifest) -> None:
    """Write *manifest* as 2-space indented JSON with a trailing newline."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_manifest(manifest), encoding="utf-8")
