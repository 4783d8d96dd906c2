"""Domain error taxonomy.

Two families of domain errors, plus one opaque persistence error:

- ValidationError: a local invariant of an entity or value object failed.
  Fixable by correcting the input; never a system fault.
- BusinessRuleError: a cross-entity rule failed (duplicate name, missing
  entity, insufficient stock for a transfer). Needs state beyond the given
  field values to detect.
- PersistenceError: raised by repository implementations. Deliberately NOT
  a DomainError so the service layer lets it propagate untouched.

Domain errors are exceptions so they can be raised by constructors, but
validating operations hand them back inside ``Err`` rather than raising.
"""

from __future__ import annotations

from typing import Any, ClassVar


class DomainError(Exception):
    """Base class for business-rule signals raised by the domain layer."""

    code: ClassVar[str] = "DOMAIN_ERROR"
    kind: ClassVar[str] = "domain"

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail or {}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DomainError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.message == other.message
            and self.detail == other.detail
        )

    def __hash__(self) -> int:
        return hash((type(self), self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ValidationError(DomainError):
    """A local invariant was violated at construction or mutation time."""

    code = "VALIDATION_FAILED"
    kind = "validation"


class BusinessRuleError(DomainError):
    """A rule spanning entities or global state was violated."""

    code = "BUSINESS_RULE"
    kind = "business_rule"


class NotFoundError(BusinessRuleError):
    """The requested entity does not exist."""

    code = "NOT_FOUND"


class DuplicateError(BusinessRuleError):
    """An entity with the same natural key is already registered."""

    code = "ALREADY_REGISTERED"


class InsufficientStockError(BusinessRuleError):
    """A transfer asked for more stock than its source holds."""

    code = "INSUFFICIENT_STOCK"


class PersistenceError(Exception):
    """Opaque failure from a persistence collaborator.

    The original driver exception is kept as ``__cause__``.
    """
