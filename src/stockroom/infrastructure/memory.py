"""In-memory ProductRepository backed by a dict of snapshots.

Stores ``ProductRecord`` snapshots rather than live entities, so a product
handed out by ``get_by_id`` can be mutated freely without touching stored
state until ``update`` is called. Useful for tests and for embedding the
domain without a database.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stockroom.domain.errors import PersistenceError
from stockroom.domain.product import Product, ProductRecord
from stockroom.domain.repositories import ProductRepository

if TYPE_CHECKING:
    import uuid

logger = logging.getLogger(__name__)


class InMemoryProductRepository(ProductRepository):
    """Dict-backed store keyed by product id.

    Mirrors the SQL store's constraints: ids and names are unique, and
    updating or removing an unknown id is an error.
    """

    def __init__(self, products: list[Product] | None = None) -> None:
        self._records: dict[uuid.UUID, ProductRecord] = {}
        for product in products or []:
            self.add(product)

    def get_by_id(self, product_id: uuid.UUID) -> Product | None:
        record = self._records.get(product_id)
        if record is None:
            return None
        return Product.restore(record)

    def get_all(self) -> list[Product]:
        records = sorted(self._records.values(), key=lambda r: r.created_at)
        return [Product.restore(r) for r in records]

    def add(self, product: Product) -> None:
        if product.id in self._records:
            raise PersistenceError(f"product {product.id} already stored")
        self._ensure_name_free(product)
        self._records[product.id] = product.snapshot()
        logger.debug("Stored product %s", product.id)

    def update(self, product: Product) -> None:
        if product.id not in self._records:
            raise PersistenceError(f"cannot update unknown product {product.id}")
        self._ensure_name_free(product)
        self._records[product.id] = product.snapshot()

    def remove(self, product_id: uuid.UUID) -> None:
        if self._records.pop(product_id, None) is None:
            raise PersistenceError(f"cannot remove unknown product {product_id}")

    def exists_by_name(self, name: str) -> bool:
        return any(r.name == name for r in self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def _ensure_name_free(self, product: Product) -> None:
        for record in self._records.values():
            if record.name == product.name and record.id != product.id:
                raise PersistenceError(f"unique constraint failed: name {product.name!r}")
