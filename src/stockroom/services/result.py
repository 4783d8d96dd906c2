"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
Domain errors become a ServiceError; persistence errors are raised, never
folded into a result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from stockroom.domain.errors import DomainError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult.

    ``kind`` tells callers which family the failure belongs to:
    ``"validation"`` (fix the input) or ``"business_rule"`` (the request
    conflicts with stored state).
    """

    model_config = {"frozen": True}

    code: str
    message: str
    kind: Literal["validation", "business_rule"]
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, error: DomainError) -> ServiceError:
        kind = "validation" if error.kind == "validation" else "business_rule"
        return cls(code=error.code, message=error.message, kind=kind, detail=error.detail)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"register_new_product"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry spans, counts).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, error: DomainError) -> ServiceResult:
        """Build a failed result from a domain error."""
        return cls(ok=False, op=op, error=ServiceError.from_domain(error))
