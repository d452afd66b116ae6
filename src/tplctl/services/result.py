"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All public service operations return ServiceResult.
Pipeline stages raise :class:`~tplctl.domain.errors.TplError`; the
orchestrating service converts them here. Only the CLI layer exits.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from tplctl.domain.errors import TplError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: TplError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=exc.detail)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"create_project"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (stage timings, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        exc: TplError,
        *,
        warnings: list[str] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> ServiceResult:
        """Build a failed result from a pipeline error."""
        return cls(
            ok=False,
            op=op,
            error=ServiceError.from_exception(exc),
            warnings=warnings or [],
            meta=meta,
        )
