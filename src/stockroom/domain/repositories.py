"""Repository contract — the persistence capabilities the domain consumes.

The domain never depends on a concrete store. Implementations live in
``stockroom.infrastructure`` (or in the embedding application) and must
honour these rules:

- ``get_by_id`` returns None as the "not found" signal, never raises for it.
- Returned entities are independent of the store: mutating one does not
  change persisted state until ``update`` is called with it.
- Store failures raise :class:`~stockroom.domain.errors.PersistenceError`.
- Each single-entity write is atomic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import uuid

    from stockroom.domain.product import Product


class ProductRepository(ABC):
    """Abstract persistence port for Product aggregates."""

    @abstractmethod
    def get_by_id(self, product_id: uuid.UUID) -> Product | None:
        """Fetch one product, or None when no product has *product_id*."""
        ...

    @abstractmethod
    def get_all(self) -> list[Product]:
        """Fetch every product, oldest first."""
        ...

    @abstractmethod
    def add(self, product: Product) -> None:
        """Insert a new product."""
        ...

    @abstractmethod
    def update(self, product: Product) -> None:
        """Persist the current state of an existing product."""
        ...

    @abstractmethod
    def remove(self, product_id: uuid.UUID) -> None:
        """Delete a product by identifier."""
        ...

    @abstractmethod
    def exists_by_name(self, name: str) -> bool:
        """Whether a product with exactly *name* is already stored."""
        ...
