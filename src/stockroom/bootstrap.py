"""Composition root — builds a ready ProductService from settings.

Wiring is explicit: the repository named by ``[storage] backend`` is
constructed here and passed to the service constructor. Nothing else
resolves dependencies.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stockroom.config.logging import configure_logging
from stockroom.infrastructure.database.engine import init_database
from stockroom.infrastructure.memory import InMemoryProductRepository
from stockroom.infrastructure.repositories.products import SqlProductRepository
from stockroom.services.products import ProductService
from stockroom.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from stockroom.config.settings import StockroomSettings
    from stockroom.domain.repositories import ProductRepository

logger = logging.getLogger(__name__)


def build_repository(settings: StockroomSettings) -> ProductRepository:
    """Construct the repository selected by ``settings.storage.backend``."""
    backend = settings.storage.backend
    if backend == "sqlite":
        engine = init_database(settings.database_path)
        logger.debug("Using SQLite product store at %s", settings.database_path)
        return SqlProductRepository(engine)
    logger.debug("Using in-memory product store")
    return InMemoryProductRepository()


def build_product_service(
    settings: StockroomSettings,
    *,
    repository: ProductRepository | None = None,
) -> ProductService:
    """Configure logging and telemetry, then wire a ProductService.

    Pass *repository* to use a store the caller already owns.
    """
    configure_logging(verbose=settings.logging.verbose, log_json=settings.logging.log_json)
    if settings.telemetry.enabled:
        enable_telemetry()
    if repository is None:
        repository = build_repository(settings)
    return ProductService(repository)
