"""Error taxonomy for project creation.

Every pipeline failure is a :class:`TplError` with a stable ``code``.
Services convert these into ``ServiceError`` payloads; only the CLI layer
turns a failed result into a process exit.

Fatal: InvalidProjectName, PathAlreadyExists, UnsupportedRuntimeVersion,
TemplateNotFound, InstallFailure.
Recoverable (degrade to a warning): RegistryFetchError, ArchiveExtractionError.
"""

from __future__ import annotations

from typing import Any


class TplError(Exception):
    """Base class for all tplctl pipeline errors."""

    code = "TPL_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail


class InvalidProjectName(TplError):
    """Project name violates package naming restrictions."""

    code = "INVALID_PROJECT_NAME"

    def __init__(self, name: str, problems: list[str]) -> None:
        listing = "\n".join(f"  * {p}" for p in problems)
        super().__init__(
            f'Cannot create a project named "{name}" because of naming restrictions:\n{listing}',
            name=name,
            problems=problems,
        )
        self.problems = problems


class PathAlreadyExists(TplError):
    """Target directory exists and overwrite was not requested."""

    code = "PATH_EXISTS"

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Target path already exists: {path}. Choose a different name or pass --overwrite.",
            path=path,
        )


class UnsupportedRuntimeVersion(TplError):
    """The JavaScript runtime is missing or older than the supported minimum."""

    code = "UNSUPPORTED_RUNTIME"


class RegistryFetchError(TplError):
    """Registry metadata could not be fetched."""

    code = "REGISTRY_FETCH_FAILED"


class ArchiveExtractionError(TplError):
    """A template archive could not be extracted or carries no manifest."""

    code = "ARCHIVE_EXTRACTION_FAILED"


class TemplateNotFound(TplError):
    """A template package or its ``template/`` directory is missing."""

    code = "TEMPLATE_NOT_FOUND"


class InstallFailure(TplError):
    """The package-manager subprocess exited non-zero."""

    code = "INSTALL_FAILED"

    def __init__(self, command: str, returncode: int) -> None:
        super().__init__(
            f"Install command failed with exit code {returncode}: {command}",
            command=command,
            returncode=returncode,
        )
        self.command = command
        self.returncode = returncode
