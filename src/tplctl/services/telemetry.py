"""Per-stage timing for the creation pipeline.

Stages are timed with :meth:`StageTimer.stage`. Timings are always logged
at DEBUG (visible with ``--verbose``) and, when verbose, attached to
``ServiceResult.meta["stages"]``.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

    import structlog


@dataclass
class StageTimer:
    """Records one entry per completed (or failed) stage."""

    log: structlog.stdlib.BoundLogger
    verbose: bool = False
    stages: list[dict[str, Any]] = field(default_factory=list)

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        start = time.perf_counter()
        ok = False
        try:
            yield
            ok = True
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            self.stages.append({"name": name, "duration_ms": duration_ms, "ok": ok})
            self.log.debug("stage.complete", stage=name, duration_ms=duration_ms, ok=ok)

    def meta(self) -> dict[str, Any] | None:
        if not self.verbose or not self.stages:
            return None
        return {"stages": list(self.stages)}
