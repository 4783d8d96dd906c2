"""Repository implementations for infrastructure-backed data access."""

from stockroom.infrastructure.repositories.products import SqlProductRepository

__all__ = ["SqlProductRepository"]
