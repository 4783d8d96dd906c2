"""Entity identity — identifier and creation timestamp as one embedded value.

Entities hold an ``Identity`` instead of inheriting id/timestamp fields from
a base class. The identity is frozen: neither part ever changes after the
entity is first created.

INVARIANT: ``created_at`` is timezone-aware UTC.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from stockroom.domain.errors import ValidationError
from stockroom.domain.result import Err, Ok, Result


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class Identity:
    """System-generated identifier plus the instant the entity was created."""

    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not isinstance(self.id, uuid.UUID):
            raise ValidationError(f"identifier must be a UUID, got {type(self.id).__name__}")
        if self.created_at.tzinfo is None:
            raise ValidationError("creation timestamp must be timezone-aware")
        if self.created_at.utcoffset() != UTC.utcoffset(None):
            object.__setattr__(self, "created_at", self.created_at.astimezone(UTC))

    @classmethod
    def new(cls) -> Identity:
        """Generate a fresh identity for a newly constructed entity."""
        return cls()

    @classmethod
    def parse(cls, raw_id: str | uuid.UUID, created_at: str | datetime) -> Result[Identity]:
        """Rehydrate a persisted identity from its stored representation."""
        try:
            parsed_id = raw_id if isinstance(raw_id, uuid.UUID) else uuid.UUID(str(raw_id))
        except ValueError:
            return Err(ValidationError(f"invalid identifier: {raw_id!r}"))
        try:
            when = (
                created_at
                if isinstance(created_at, datetime)
                else datetime.fromisoformat(created_at)
            )
        except ValueError:
            return Err(ValidationError(f"invalid creation timestamp: {created_at!r}"))
        if when.tzinfo is None:
            return Err(ValidationError("creation timestamp must be timezone-aware"))
        return Ok(cls(id=parsed_id, created_at=when))


def parse_entity_id(raw: str | uuid.UUID) -> uuid.UUID | None:
    """Coerce caller input to a UUID; None when it cannot name any entity."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None
