"""Template archive inspection with a scoped temporary directory.

INVARIANT: the extraction directory never outlives the call that created
it. :func:`temporary_directory` removes it on every exit path; a failed
removal is logged and left to the OS temp cleaner.
"""

from __future__ import annotations

import logging
import shutil
import tarfile
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import requests

from tplctl.domain.errors import ArchiveExtractionError
from tplctl.domain.scaffold import MANIFEST_FILENAME
from tplctl.domain.specifiers import URI_SEPARATOR, is_local_file, local_file_path
from tplctl.infrastructure.manifests import read_manifest

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tplctl.domain.manifest import Manifest

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


def release_directory(path: Path) -> None:
    """Delete *path* recursively (best-effort)."""
    try:
        shutil.rmtree(path)
    except OSError:
        logger.debug("Could not remove temporary directory %s", path, exc_info=True)


@contextmanager
def temporary_directory(prefix: str = "tplctl-") -> Iterator[Path]:
    """Yield a fresh temporary directory, removed when the block exits."""
    path = Path(tempfile.mkdtemp(prefix=prefix))
    try:
        yield path
    finally:
        release_directory(path)


def download(url: str, dest: Path, *, session: requests.Session, timeout: float) -> Path:
    """Stream *url* into the file *dest*."""
    with session.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        with dest.open("wb") as fh:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                fh.write(chunk)
    return dest


def extract_archive(archive: Path, dest: Path) -> Path:
    """Extract a gzipped tarball into *dest* with the ``data`` safety filter."""
    dest.mkdir(parents=True, exist_ok=True)
    with tarfile.open(archive, "r:*") as tar:
        tar.extractall(dest, filter="data")
    return dest


def find_package_manifest(root: Path) -> Path:
    """Locate ``package.json`` at *root* or inside its single top-level directory.

    Packed tarballs usually nest everything under ``package/``.
    """
    direct = root / MANIFEST_FILENAME
    if direct.is_file():
        return direct
    children = [p for p in root.iterdir() if p.is_dir()]
    if len(children) == 1 and (children[0] / MANIFEST_FILENAME).is_file():
        return children[0] / MANIFEST_FILENAME
    msg = f"No {MANIFEST_FILENAME} found in archive"
    raise FileNotFoundError(msg)


def read_archive_manifest(
    source: str,
    *,
    session: requests.Session | None = None,
    timeout: float = 10.0,
) -> Manifest:
    """Read the manifest packed inside a ``.tgz`` / ``.tar.gz`` archive.

    *source* is a URL, a filesystem path, or a ``file:`` specifier.

    Raises:
        ArchiveExtractionError: Download, extraction, or manifest read failed.
    """
    with temporary_directory() as tmpdir:
        try:
            if URI_SEPARATOR in source:
                archive = download(
                    source,
                    tmpdir / "archive.tgz",
                    session=session or requests.Session(),
                    timeout=timeout,
                )
            else:
                archive = Path(local_file_path(source) if is_local_file(source) else source)
            extracted = extract_archive(archive, tmpdir / "extracted")
            return read_manifest(find_package_manifest(extracted))
        except (OSError, ValueError, tarfile.TarError, requests.RequestException) as exc:
            raise ArchiveExtractionError(
                f"Could not extract the package name from the archive: {exc}",
                source=source,
            ) from exc
