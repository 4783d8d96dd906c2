"""Shared pytest fixtures and test helpers for stockroom tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy.engine import Engine

from stockroom.domain.identity import Identity
from stockroom.domain.product import Product
from stockroom.infrastructure.database.engine import init_database
from stockroom.infrastructure.memory import InMemoryProductRepository
from stockroom.infrastructure.repositories.products import SqlProductRepository
from stockroom.services.products import ProductService
from stockroom.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _telemetry_off() -> Generator[None]:
    """Telemetry is a ContextVar; keep it from leaking between tests."""
    disable_telemetry()
    yield
    disable_telemetry()


@pytest.fixture
def restore_logging() -> Generator[None]:
    """Restore root and stockroom logger state after a test reconfigures logging."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("stockroom")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)


@pytest.fixture
def memory_repo() -> InMemoryProductRepository:
    return InMemoryProductRepository()


@pytest.fixture
def service(memory_repo: InMemoryProductRepository) -> ProductService:
    return ProductService(memory_repo)


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with the products table created."""
    engine = init_database(tmp_path / "stockroom.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sql_repo(db_engine: Engine) -> SqlProductRepository:
    return SqlProductRepository(db_engine)


# ---------------------------------------------------------------------------
# Shared test helpers (used across test modules)
# ---------------------------------------------------------------------------


def make_product(
    name: str = "Widget",
    price: Decimal | float | int | str = "9.99",
    stock: int = 10,
    **kwargs: Any,
) -> Product:
    """Build a valid Product, asserting construction succeeded."""
    identity = kwargs.pop("identity", None)
    if identity is not None:
        return Product(name, price, stock, identity=identity, **kwargs)
    result = Product.create(name, price, stock, **kwargs)
    assert result.ok, result.error
    return result.value


def older() -> Identity:
    """An identity created well before any product built during the test."""
    return Identity(created_at=datetime(2020, 1, 1, tzinfo=UTC))


def register(service: ProductService, name: str, **kwargs: Any) -> dict[str, Any]:
    """Register a product via ProductService, asserting success."""
    kwargs.setdefault("price", "9.99")
    kwargs.setdefault("stock", 10)
    result = service.register_new_product(name, **kwargs)
    assert result.ok, result.error
    return result.data
