"""BaseService — foundation for repository-backed services.

Every service receives its repository explicitly at construction time;
there is no container or ambient lookup. Services hold no other state,
so one instance can serve any number of sequential calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stockroom.domain.repositories import ProductRepository


class BaseService:
    """Base for service-layer classes.

    Usage::

        class ProductService(BaseService):
            def deactivate_product(self, product_id: str) -> ServiceResult:
                product = self._repository.get_by_id(...)
                ...
    """

    def __init__(self, repository: ProductRepository) -> None:
        self._repository = repository

    @property
    def repository(self) -> ProductRepository:
        return self._repository
