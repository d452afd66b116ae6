"""BaseService — shared construction for pipeline stages.

Every stage receives the frozen :class:`TplSettings` and a structlog logger
at construction time. The orchestrator binds the logger to the project
being created and hands the same instance to each stage, so log context
flows through the pipeline without any process-wide state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tplctl.config.logging import get_logger

if TYPE_CHECKING:
    import structlog

    from tplctl.config.settings import TplSettings


class BaseService:
    """Abstract base for service-layer classes.

    Usage::

        class ScaffoldService(BaseService):
            def initialize(self, target: Path, ...) -> list[str]:
                self._log.info("scaffold.start", path=str(target))
                ...
    """

    def __init__(
        self,
        settings: TplSettings,
        *,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._settings = settings
        self._log = log or get_logger(type(self).__module__)
