"""ScaffoldService — create the target directory and the app-layer manifest."""

from __future__ import annotations

import json
from pathlib import Path

from tplctl.domain.scaffold import MANIFEST_FILENAME, TSCONFIG, TSCONFIG_FILENAME, app_skeleton
from tplctl.domain.types import Language
from tplctl.infrastructure.manifests import write_manifest
from tplctl.services.base import BaseService


class ScaffoldService(BaseService):
    """Writes the skeleton project before any template is installed."""

    def initialize(self, target: Path, *, language: Language, private: bool) -> list[str]:
        """Create *target* with a skeleton ``package.json``.

        TypeScript projects also get the baseline ``tsconfig.json``. The
        caller has already enforced the overwrite policy. Returns the files
        written, relative to *target*.
        """
        target.mkdir(parents=True, exist_ok=True)
        self._log.info("scaffold.start", path=str(target), language=str(language))

        created: list[str] = []
        if language is Language.TS:
            (target / TSCONFIG_FILENAME).write_text(
                json.dumps(TSCONFIG, indent=2) + "\n", encoding="utf-8"
            )
            created.append(TSCONFIG_FILENAME)

        write_manifest(target / MANIFEST_FILENAME, app_skeleton(target.name, private=private))
        created.append(MANIFEST_FILENAME)
        return created
