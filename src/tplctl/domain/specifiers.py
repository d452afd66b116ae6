"""Template specifier parsing — pure string rules, no I/O.

A specifier is what the user passes to ``--template``: a registry name,
``file:`` path, archive (local or remote), or git URL. Classification is
total and exclusive; rule order matters:

1. ``file:`` prefix          -> localFile
2. ``git+`` prefix           -> gitUrl
3. ``://`` or archive suffix -> remoteArchive
4. anything else             -> registryName
"""

from __future__ import annotations

import re

from tplctl.domain.types import Language, ResolutionKind

LOCAL_FILE_PREFIX = "file:"
GIT_PREFIX = "git+"
URI_SEPARATOR = "://"

_ARCHIVE = re.compile(r"^.+\.(?:tgz|tar\.gz)$")
_GIT_NAME = re.compile(r"([^/]+)\.git(?:#.*)?$")
_ARCHIVE_NAME = re.compile(r"(?:^|[/\\])([^/\\]+?)(?:-\d+.+)?\.(?:tgz|tar\.gz)$")
_SCOPED_SPEC = re.compile(r"^(@[^/]+/)?([^@]+)?(@.+)?$")


def is_local_file(specifier: str) -> bool:
    return specifier.startswith(LOCAL_FILE_PREFIX)


def is_git_url(specifier: str) -> bool:
    return specifier.startswith(GIT_PREFIX)


def is_archive(specifier: str) -> bool:
    """True for ``.tgz`` / ``.tar.gz`` specifiers, local or remote."""
    return _ARCHIVE.match(specifier) is not None


def local_file_path(specifier: str) -> str:
    """Path portion of a ``file:`` specifier."""
    return specifier[len(LOCAL_FILE_PREFIX) :]


def classify(specifier: str) -> ResolutionKind:
    """Map *specifier* to exactly one :class:`ResolutionKind`."""
    if is_local_file(specifier):
        return ResolutionKind.LOCAL_FILE
    if is_git_url(specifier):
        return ResolutionKind.GIT_URL
    if URI_SEPARATOR in specifier or is_archive(specifier):
        return ResolutionKind.REMOTE_ARCHIVE
    return ResolutionKind.REGISTRY_NAME


def default_template_name(prefix: str, default: str) -> str:
    return f"{prefix}-{default}"


def prefixed_template_name(specifier: str, prefix: str) -> str:
    """Apply the ``<prefix>-`` naming convention to a registry specifier.

    Scope and version are preserved; names already carrying the prefix are
    left alone.

    Examples:
        >>> prefixed_template_name("typescript", "cra-template")
        'cra-template-typescript'
        >>> prefixed_template_name("@acme/web@1.2.0", "cra-template")
        '@acme/cra-template-web@1.2.0'
        >>> prefixed_template_name("@acme", "cra-template")
        '@acme/cra-template'
    """
    if "@" not in specifier:
        if f"{prefix}-" in specifier:
            return specifier
        return f"{prefix}-{specifier}"

    match = _SCOPED_SPEC.match(specifier)
    if match is None:
        return specifier
    scope = match.group(1) or ""
    name = match.group(2) or ""
    version = match.group(3) or ""

    if name == prefix or name.startswith(f"{prefix}-"):
        return f"{scope}{name}{version}"
    if version and not scope and not name:
        # A bare "@scope" parses as a version suffix.
        return f"{version}/{prefix}"
    return f"{scope}{prefix}-{name}{version}"


def split_name_version(specifier: str) -> tuple[str, str | None]:
    """Split ``name@version`` at the last ``@`` past the first character.

    A leading ``@`` belongs to the scope, never to the version.
    """
    at = specifier.rfind("@")
    if at <= 0:
        return specifier, None
    return specifier[:at], specifier[at + 1 :] or None


def has_version_separator(specifier: str) -> bool:
    return "@" in specifier[1:]


def git_repository_name(url: str) -> str:
    """Repository name from a git URL, ignoring any ``#ref`` suffix.

    Falls back to the last path segment when the URL has no ``.git`` suffix.
    """
    match = _GIT_NAME.search(url)
    if match is not None:
        return match.group(1)
    path = url.split("#", 1)[0].rstrip("/")
    return path.rsplit("/", 1)[-1]


def assumed_archive_name(specifier: str) -> str:
    """Best-effort package name from an archive filename.

    Strips the extension and a trailing ``-<digit>...`` version suffix, e.g.
    ``https://host/my-template-0.8.2.tgz`` -> ``my-template``.
    """
    match = _ARCHIVE_NAME.search(specifier)
    if match is None:
        return specifier
    return match.group(1)


def infer_language(template_name: str) -> Language:
    """Templates named ``*-ts`` produce TypeScript projects."""
    name, _version = split_name_version(template_name)
    return Language.TS if name.endswith("-ts") else Language.JS
