"""Product — the always-valid catalog entity.

A Product can only come into existence through a path that runs every
field check first:

- ``Product.create(...)`` returns ``Ok(product)`` / ``Err(ValidationError)``.
- ``Product(...)`` runs the same checks and raises ``ValidationError``.
- ``Product.restore(record)`` rehydrates a persisted snapshot, again
  through the same checks.

State changes go through named operations only. Each re-checks the
invariant it touches and either applies the whole change or none of it.

INVARIANT: name is non-empty, price > 0, stock >= 0 for every instance.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel

from stockroom.domain.errors import ValidationError
from stockroom.domain.identity import Identity
from stockroom.domain.result import Err, Ok, Result, first_error
from stockroom.domain.values import Email

MAX_NAME_LENGTH = 200


# ---------------------------------------------------------------------------
# Persistence snapshot
# ---------------------------------------------------------------------------


class ProductRecord(BaseModel):
    """Plain snapshot of a Product, as handed to and from repositories."""

    model_config = {"frozen": True}

    id: uuid.UUID
    name: str
    price: Decimal
    stock: int
    active: bool
    supplier_email: str | None = None
    created_at: datetime


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------


def check_name(name: object) -> ValidationError | None:
    """Names are non-empty strings of at most MAX_NAME_LENGTH characters."""
    if not isinstance(name, str):
        return ValidationError(f"name must be a string, got {type(name).__name__}")
    stripped = name.strip()
    if not stripped:
        return ValidationError("name must not be empty")
    if len(stripped) > MAX_NAME_LENGTH:
        return ValidationError(
            f"name must be at most {MAX_NAME_LENGTH} characters",
            detail={"length": len(stripped)},
        )
    return None


def parse_price(raw: object) -> Result[Decimal]:
    """Convert *raw* to a Decimal price, rejecting zero, negatives, and non-numbers.

    Floats go through ``str`` so ``9.99`` becomes ``Decimal("9.99")``.
    """
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str, Decimal)):
        return Err(ValidationError(f"price must be a number, got {type(raw).__name__}"))
    try:
        price = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
    except InvalidOperation:
        return Err(ValidationError(f"price must be a number: {raw!r}"))
    if not price.is_finite():
        return Err(ValidationError(f"price must be finite: {raw!r}"))
    if price <= 0:
        return Err(ValidationError("price must be greater than zero", detail={"price": str(raw)}))
    return Ok(price)


def check_stock(stock: object) -> ValidationError | None:
    if isinstance(stock, bool) or not isinstance(stock, int):
        return ValidationError(f"stock must be an integer, got {type(stock).__name__}")
    if stock < 0:
        return ValidationError("stock must not be negative", detail={"stock": stock})
    return None


def check_quantity(quantity: object) -> ValidationError | None:
    """Quantities moved in or out of stock are positive integers."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        return ValidationError(f"quantity must be an integer, got {type(quantity).__name__}")
    if quantity <= 0:
        return ValidationError(
            "quantity must be greater than zero", detail={"quantity": quantity}
        )
    return None


def _parse_supplier_email(raw: Email | str | None) -> Result[Email | None]:
    if raw is None or isinstance(raw, Email):
        return Ok(raw)
    return Email.parse(raw)


# ---------------------------------------------------------------------------
# Entity
# ---------------------------------------------------------------------------


class Product:
    """An identity-bearing catalog item with stock on hand.

    Attributes are read-only properties. Use the named operations
    (``debit_stock``, ``credit_stock``, ``update_price``, ``rename``,
    ``deactivate``, ``reactivate``) to change state.
    """

    __slots__ = ("_active", "_identity", "_name", "_price", "_stock", "_supplier_email")

    def __init__(
        self,
        name: str,
        price: Decimal | float | int | str,
        stock: int = 0,
        *,
        active: bool = True,
        supplier_email: Email | str | None = None,
        identity: Identity | None = None,
    ) -> None:
        failure = self._check_fields(name, price, stock, supplier_email)
        if failure is not None:
            raise failure.error
        if not isinstance(active, bool):
            raise ValidationError(f"active must be a boolean, got {type(active).__name__}")

        self._identity = identity or Identity.new()
        self._name = name.strip()
        self._price: Decimal = parse_price(price).unwrap()
        self._stock = stock
        self._active = active
        self._supplier_email: Email | None = _parse_supplier_email(supplier_email).unwrap()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        name: str,
        price: Decimal | float | int | str,
        stock: int = 0,
        *,
        supplier_email: Email | str | None = None,
    ) -> Result[Product]:
        """Validate every field, then build a new active product."""
        failure = cls._check_fields(name, price, stock, supplier_email)
        if failure is not None:
            return failure
        return Ok(cls(name, price, stock, supplier_email=supplier_email))

    @classmethod
    def restore(cls, record: ProductRecord) -> Product:
        """Rehydrate a persisted snapshot. Raises ValidationError on corrupt data."""
        return cls(
            record.name,
            record.price,
            record.stock,
            active=record.active,
            supplier_email=record.supplier_email,
            identity=Identity.parse(record.id, record.created_at).unwrap(),
        )

    @staticmethod
    def _check_fields(
        name: object,
        price: object,
        stock: object,
        supplier_email: Email | str | None,
    ) -> Err | None:
        """All field rules, in declaration order. Nothing is assigned here."""
        return first_error(
            check_name(name),
            parse_price(price).error,
            check_stock(stock),
            _parse_supplier_email(supplier_email).error,
        )

    def snapshot(self) -> ProductRecord:
        """Plain record of the current state, for persistence."""
        return ProductRecord(
            id=self.id,
            name=self._name,
            price=self._price,
            stock=self._stock,
            active=self._active,
            supplier_email=str(self._supplier_email) if self._supplier_email else None,
            created_at=self.created_at,
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def identity(self) -> Identity:
        return self._identity

    @property
    def id(self) -> uuid.UUID:
        return self._identity.id

    @property
    def created_at(self) -> datetime:
        return self._identity.created_at

    @property
    def name(self) -> str:
        return self._name

    @property
    def price(self) -> Decimal:
        return self._price

    @property
    def stock(self) -> int:
        return self._stock

    @property
    def active(self) -> bool:
        return self._active

    @property
    def supplier_email(self) -> Email | None:
        return self._supplier_email

    # ------------------------------------------------------------------
    # Named operations
    # ------------------------------------------------------------------

    def debit_stock(self, quantity: int) -> Result[Product]:
        """Remove *quantity* units. Requires 0 < quantity <= stock."""
        error = check_quantity(quantity)
        if error is not None:
            return Err(error)
        if quantity > self._stock:
            return Err(
                ValidationError(
                    f"cannot debit {quantity} units, only {self._stock} in stock",
                    detail={"requested": quantity, "available": self._stock},
                )
            )
        self._stock -= quantity
        return Ok(self)

    def credit_stock(self, quantity: int) -> Result[Product]:
        """Add *quantity* units. Requires quantity > 0."""
        error = check_quantity(quantity)
        if error is not None:
            return Err(error)
        self._stock += quantity
        return Ok(self)

    def update_price(self, new_price: Decimal | float | int | str) -> Result[Product]:
        """Replace the price. Requires new_price > 0."""
        parsed = parse_price(new_price)
        if not parsed.ok:
            return parsed
        self._price = parsed.value
        return Ok(self)

    def rename(self, new_name: str) -> Result[Product]:
        error = check_name(new_name)
        if error is not None:
            return Err(error)
        self._name = new_name.strip()
        return Ok(self)

    def deactivate(self) -> Result[Product]:
        """Withdraw the product from the active catalog."""
        if not self._active:
            return Err(ValidationError(f"product {self.id} is already inactive"))
        self._active = False
        return Ok(self)

    def reactivate(self) -> Result[Product]:
        if self._active:
            return Err(ValidationError(f"product {self.id} is already active"))
        self._active = True
        return Ok(self)

    # ------------------------------------------------------------------
    # Entity semantics: equal when the identity is equal
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Product):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return (
            f"Product(id={str(self.id)!r}, name={self._name!r}, price={self._price}, "
            f"stock={self._stock}, active={self._active})"
        )
