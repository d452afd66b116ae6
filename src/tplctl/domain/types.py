"""Classification enums shared across the creation pipeline."""

from __future__ import annotations

from enum import StrEnum


class ResolutionKind(StrEnum):
    """How a template specifier is installed and identified."""

    REGISTRY_NAME = "registryName"
    LOCAL_FILE = "localFile"
    REMOTE_ARCHIVE = "remoteArchive"
    GIT_URL = "gitUrl"


class Language(StrEnum):
    """Language mode of the generated project."""

    TS = "ts"
    JS = "js"
