"""ProductService — catalog use cases spanning entities and stored state.

Entities enforce their own field invariants. This service adds the rules a
single entity cannot check alone: name uniqueness across the catalog,
existence of the products named by the caller, and stock transfers between
two products.

Pipeline per operation: VALIDATE → FETCH → CHECK → APPLY → PERSIST → RESPOND

INVARIANT: when any stage before PERSIST fails, no repository write is made.
Domain failures come back as ``ServiceResult(ok=False)``; PersistenceError
from the repository propagates unchanged.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from stockroom.domain.errors import (
    BusinessRuleError,
    DomainError,
    DuplicateError,
    InsufficientStockError,
    NotFoundError,
)
from stockroom.domain.identity import parse_entity_id
from stockroom.domain.product import Product, check_name, check_quantity, parse_price
from stockroom.domain.result import Err, Ok, Result, first_error
from stockroom.services.base import BaseService
from stockroom.services.contracts import (
    ProductData,
    ProductListData,
    TransferData,
    dump_validated,
    product_payload,
)
from stockroom.services.result import ServiceResult
from stockroom.services.telemetry import get_current_span, trace_span, traced

if TYPE_CHECKING:
    from collections.abc import Callable

    from stockroom.domain.values import Email

logger = logging.getLogger(__name__)

ProductId = str | uuid.UUID
Amount = Decimal | float | int | str


class ProductService(BaseService):
    """Registers, prices, deactivates, and moves stock between products."""

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    @traced
    def register_new_product(
        self,
        name: str,
        price: Amount,
        stock: int = 0,
        *,
        supplier_email: Email | str | None = None,
    ) -> ServiceResult:
        """Create a product unless another product already uses *name*.

        The uniqueness check here is a fast path only; two concurrent
        registrations can both pass it. Stores must also enforce it.
        """
        op = "register_new_product"

        with trace_span("validate"):
            boundary = first_error(check_name(name), parse_price(price).error)
            if boundary is not None:
                return self._reject(op, boundary.error)
            created = Product.create(name, price, stock, supplier_email=supplier_email)
            if not created.ok:
                return self._reject(op, created.error)
            product = created.value

        with trace_span("check_unique"):
            if self._repository.exists_by_name(product.name):
                return self._reject(
                    op,
                    DuplicateError(
                        f"product {product.name!r} is already registered",
                        detail={"name": product.name},
                    ),
                )

        with trace_span("persist"):
            self._repository.add(product)

        self._annotate(product)
        logger.debug(
            "Registered product %s (%s)",
            product.id,
            product.name,
            extra={"op": op, "product_id": str(product.id)},
        )
        return self._respond(op, product)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @traced
    def get_product(self, product_id: ProductId) -> ServiceResult:
        op = "get_product"
        fetched = self._fetch(product_id)
        if not fetched.ok:
            return self._reject(op, fetched.error)
        return self._respond(op, fetched.value)

    @traced
    def list_products(self, *, include_inactive: bool = True) -> ServiceResult:
        """List the catalog, oldest first."""
        products = self._repository.get_all()
        if not include_inactive:
            products = [p for p in products if p.active]
        data = dump_validated(
            ProductListData,
            {"count": len(products), "items": [product_payload(p) for p in products]},
        )
        return ServiceResult(ok=True, op="list_products", data=data)

    # ------------------------------------------------------------------
    # Single-product mutations
    # ------------------------------------------------------------------

    @traced
    def deactivate_product(self, product_id: ProductId) -> ServiceResult:
        return self._mutate("deactivate_product", product_id, lambda p: p.deactivate())

    @traced
    def reactivate_product(self, product_id: ProductId) -> ServiceResult:
        return self._mutate("reactivate_product", product_id, lambda p: p.reactivate())

    @traced
    def update_product_price(self, product_id: ProductId, new_price: Amount) -> ServiceResult:
        return self._mutate(
            "update_product_price", product_id, lambda p: p.update_price(new_price)
        )

    @traced
    def restock_product(self, product_id: ProductId, quantity: int) -> ServiceResult:
        """Add *quantity* units to a product's stock."""
        return self._mutate("restock_product", product_id, lambda p: p.credit_stock(quantity))

    @traced
    def rename_product(self, product_id: ProductId, new_name: str) -> ServiceResult:
        """Rename a product, keeping names unique across the catalog."""
        op = "rename_product"

        with trace_span("validate"):
            name_error = check_name(new_name)
            if name_error is not None:
                return self._reject(op, name_error)

        with trace_span("fetch"):
            fetched = self._fetch(product_id)
            if not fetched.ok:
                return self._reject(op, fetched.error)
            product = fetched.value

        if product.name == new_name.strip():
            return ServiceResult(
                ok=True,
                op=op,
                data=dump_validated(ProductData, product_payload(product)),
                warnings=["Name unchanged"],
            )

        with trace_span("check_unique"):
            if self._repository.exists_by_name(new_name.strip()):
                return self._reject(
                    op,
                    DuplicateError(
                        f"product {new_name.strip()!r} is already registered",
                        detail={"name": new_name.strip()},
                    ),
                )

        with trace_span("apply"):
            renamed = product.rename(new_name)
            if not renamed.ok:
                return self._reject(op, renamed.error)

        with trace_span("persist"):
            self._repository.update(product)

        return self._respond(op, product)

    @traced
    def remove_product(self, product_id: ProductId) -> ServiceResult:
        op = "remove_product"
        fetched = self._fetch(product_id)
        if not fetched.ok:
            return self._reject(op, fetched.error)
        product = fetched.value

        with trace_span("persist"):
            self._repository.remove(product.id)

        logger.debug(
            "Removed product %s",
            product.id,
            extra={"op": op, "product_id": str(product.id)},
        )
        return ServiceResult(ok=True, op=op, data={"id": str(product.id), "name": product.name})

    # ------------------------------------------------------------------
    # Multi-product use case
    # ------------------------------------------------------------------

    @traced
    def transfer_stock(
        self,
        source_id: ProductId,
        destination_id: ProductId,
        quantity: int,
    ) -> ServiceResult:
        """Move *quantity* units from one product to another.

        Both products are fetched and changed in memory first; the two
        updates are only issued once every check has passed.
        """
        op = "transfer_stock"

        with trace_span("validate"):
            quantity_error = check_quantity(quantity)
            if quantity_error is not None:
                return self._reject(op, quantity_error)
            source_key = parse_entity_id(source_id)
            if source_key is not None and source_key == parse_entity_id(destination_id):
                return self._reject(
                    op,
                    BusinessRuleError(
                        "source and destination must be different products",
                        detail={"id": str(source_key)},
                    ),
                )

        with trace_span("fetch"):
            fetched_source = self._fetch(source_id)
            if not fetched_source.ok:
                return self._reject(op, fetched_source.error)
            fetched_destination = self._fetch(destination_id)
            if not fetched_destination.ok:
                return self._reject(op, fetched_destination.error)
            source = fetched_source.value
            destination = fetched_destination.value

        with trace_span("check"):
            for product in (source, destination):
                if not product.active:
                    return self._reject(
                        op,
                        BusinessRuleError(
                            f"product {product.id} is inactive",
                            detail={"id": str(product.id)},
                        ),
                    )
            if quantity > source.stock:
                return self._reject(
                    op,
                    InsufficientStockError(
                        f"cannot transfer {quantity} units, source holds {source.stock}",
                        detail={
                            "source_id": str(source.id),
                            "requested": quantity,
                            "available": source.stock,
                        },
                    ),
                )

        with trace_span("apply"):
            debited = source.debit_stock(quantity)
            if not debited.ok:
                return self._reject(op, debited.error)
            credited = destination.credit_stock(quantity)
            if not credited.ok:
                return self._reject(op, credited.error)

        with trace_span("persist"):
            self._repository.update(source)
            self._repository.update(destination)

        logger.debug(
            "Transferred %d units from %s to %s", quantity, source.id, destination.id
        )
        data = dump_validated(
            TransferData,
            {
                "quantity": quantity,
                "source": product_payload(source),
                "destination": product_payload(destination),
            },
        )
        return ServiceResult(ok=True, op=op, data=data)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fetch(self, product_id: ProductId) -> Result[Product]:
        """Load a product, mapping an unknown or malformed id to NotFoundError."""
        key = parse_entity_id(product_id)
        product = self._repository.get_by_id(key) if key is not None else None
        if product is None:
            return Err(
                NotFoundError(
                    f"no product found with id {product_id}",
                    detail={"id": str(product_id)},
                )
            )
        return Ok(product)

    def _mutate(
        self,
        op: str,
        product_id: ProductId,
        change: Callable[[Product], Result[Product]],
    ) -> ServiceResult:
        """FETCH → APPLY → PERSIST for operations touching one product."""
        with trace_span("fetch"):
            fetched = self._fetch(product_id)
            if not fetched.ok:
                return self._reject(op, fetched.error)
            product = fetched.value

        with trace_span("apply"):
            changed = change(product)
            if not changed.ok:
                return self._reject(op, changed.error)

        with trace_span("persist"):
            self._repository.update(product)

        self._annotate(product)
        logger.debug(
            "%s applied to %s",
            op,
            product.id,
            extra={"op": op, "product_id": str(product.id)},
        )
        return self._respond(op, product)

    @staticmethod
    def _respond(op: str, product: Product) -> ServiceResult:
        return ServiceResult(
            ok=True, op=op, data=dump_validated(ProductData, product_payload(product))
        )

    @staticmethod
    def _reject(op: str, error: DomainError) -> ServiceResult:
        logger.info(
            "%s rejected [%s]: %s",
            op,
            error.code,
            error.message,
            extra={"op": op, "code": error.code},
        )
        return ServiceResult.failure(op, error)

    @staticmethod
    def _annotate(product: Product) -> None:
        span = get_current_span()
        if span is not None:
            span.annotate("product_id", str(product.id))
