"""Value objects — immutable, identity-free, compared by held value.

Construction either yields a fully valid instance or fails:

- ``Email(raw)`` raises :class:`ValidationError`.
- ``Email.parse(raw)`` returns ``Ok(email)`` or ``Err(ValidationError)``.

There are no setters; "changing" a value object means building a new one.
"""

from __future__ import annotations

from typing import Any

from stockroom.domain.errors import ValidationError
from stockroom.domain.result import Err, Ok, Result

EMAIL_RULE = "address must contain exactly one '@' separator and a non-empty domain part"


def check_email(raw: object) -> ValidationError | None:
    """Return the violated rule for *raw*, or None if it is a valid address."""
    if not isinstance(raw, str):
        return ValidationError(f"email must be a string, got {type(raw).__name__}")
    address = raw.strip()
    if not address:
        return ValidationError("email must not be empty")
    if any(ch.isspace() for ch in address):
        return ValidationError(f"email must not contain whitespace: {raw!r}")
    if address.count("@") != 1:
        return ValidationError(f"{EMAIL_RULE}: {raw!r}", detail={"value": raw})
    local, domain = address.split("@")
    if not domain:
        return ValidationError(f"{EMAIL_RULE}: {raw!r}", detail={"value": raw})
    if not local:
        return ValidationError(f"email local part must not be empty: {raw!r}")
    return None


def _normalize_email(raw: str) -> str:
    local, domain = raw.strip().split("@")
    return f"{local}@{domain.lower()}"


class Email:
    """An e-mail address. The domain part is stored lower-cased."""

    __slots__ = ("_value",)

    def __init__(self, raw: str) -> None:
        error = check_email(raw)
        if error is not None:
            raise error
        object.__setattr__(self, "_value", _normalize_email(raw))

    @classmethod
    def parse(cls, raw: object) -> Result[Email]:
        error = check_email(raw)
        if error is not None:
            return Err(error)
        return Ok(cls(raw))  # type: ignore[arg-type]

    @property
    def value(self) -> str:
        return self._value

    @property
    def local_part(self) -> str:
        return self._value.split("@")[0]

    @property
    def domain(self) -> str:
        return self._value.split("@")[1]

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Email):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash((Email, self._value))

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Email({self._value!r})"
