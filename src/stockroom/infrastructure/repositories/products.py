"""SQL-backed ProductRepository over SQLAlchemy Core.

Each method runs in its own ``engine.begin()`` transaction, so every
single-product write is atomic. Driver failures (connectivity, UNIQUE or
CHECK constraint violations) are re-raised as PersistenceError with the
SQLAlchemy exception kept as ``__cause__``.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import pydantic
from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from stockroom.domain.errors import DomainError, PersistenceError
from stockroom.domain.identity import Identity
from stockroom.domain.product import Product, ProductRecord
from stockroom.domain.repositories import ProductRepository
from stockroom.infrastructure.database.schema import products

if TYPE_CHECKING:
    from sqlalchemy import Connection, RowMapping
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


def _to_row(product: Product) -> dict[str, Any]:
    record = product.snapshot()
    return {
        "id": str(record.id),
        "name": record.name,
        "price": str(record.price),
        "stock": record.stock,
        "active": 1 if record.active else 0,
        "supplier_email": record.supplier_email,
        "created_at": record.created_at.isoformat(),
    }


def _from_row(row: RowMapping) -> Product:
    identity = Identity.parse(row["id"], row["created_at"])
    if not identity.ok:
        msg = f"corrupt product row {row['id']!r}: {identity.error.message}"
        raise PersistenceError(msg) from identity.error
    try:
        record = ProductRecord(
            id=identity.value.id,
            name=row["name"],
            price=Decimal(row["price"]),
            stock=row["stock"],
            active=bool(row["active"]),
            supplier_email=row["supplier_email"],
            created_at=identity.value.created_at,
        )
        return Product.restore(record)
    except (ValueError, ArithmeticError, pydantic.ValidationError, DomainError) as exc:
        msg = f"corrupt product row {row['id']!r}: {exc}"
        raise PersistenceError(msg) from exc


class SqlProductRepository(ProductRepository):
    """Product persistence in the ``products`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def _begin(self, action: str) -> Iterator[Connection]:
        try:
            with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as exc:
            logger.warning("Product store %s failed: %s", action, exc)
            raise PersistenceError(f"product store {action} failed: {exc}") from exc

    def get_by_id(self, product_id: uuid.UUID) -> Product | None:
        with self._begin("read") as conn:
            row = (
                conn.execute(select(products).where(products.c.id == str(product_id)))
                .mappings()
                .first()
            )
        return _from_row(row) if row is not None else None

    def get_all(self) -> list[Product]:
        with self._begin("read") as conn:
            rows = (
                conn.execute(select(products).order_by(products.c.created_at, products.c.id))
                .mappings()
                .all()
            )
        return [_from_row(row) for row in rows]

    def add(self, product: Product) -> None:
        with self._begin("insert") as conn:
            conn.execute(insert(products).values(**_to_row(product)))
        logger.debug("Inserted product row %s", product.id)

    def update(self, product: Product) -> None:
        row = _to_row(product)
        product_id = row.pop("id")
        with self._begin("update") as conn:
            matched = conn.execute(
                update(products).where(products.c.id == product_id).values(**row)
            ).rowcount
        if matched == 0:
            raise PersistenceError(f"cannot update unknown product {product_id}")

    def remove(self, product_id: uuid.UUID) -> None:
        with self._begin("delete") as conn:
            matched = conn.execute(
                delete(products).where(products.c.id == str(product_id))
            ).rowcount
        if matched == 0:
            raise PersistenceError(f"cannot remove unknown product {product_id}")

    def exists_by_name(self, name: str) -> bool:
        with self._begin("read") as conn:
            row = conn.execute(select(products.c.id).where(products.c.name == name)).first()
        return row is not None
