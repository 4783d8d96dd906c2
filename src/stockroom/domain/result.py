"""Ok / Err result values for validating domain operations.

Every validating operation (value object parsing, entity construction,
entity mutation) returns ``Ok(value)`` or ``Err(error)``. Callers branch on
``result.ok`` instead of catching exceptions.

``unwrap()`` exists for code that prefers exceptions (tests, scripts):
it returns the value or raises the carried DomainError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, NoReturn

if TYPE_CHECKING:
    from stockroom.domain.errors import DomainError


@dataclass(frozen=True)
class Ok[T]:
    """Successful outcome carrying *value*."""

    value: T

    @property
    def ok(self) -> Literal[True]:
        return True

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying the violated rule."""

    error: DomainError

    @property
    def ok(self) -> Literal[False]:
        return False

    @property
    def value(self) -> None:
        return None

    def unwrap(self) -> NoReturn:
        raise self.error


type Result[T] = Ok[T] | Err


def first_error(*checks: DomainError | None) -> Err | None:
    """Return an ``Err`` for the first non-None check, or None if all passed."""
    for check in checks:
        if check is not None:
            return Err(check)
    return None
