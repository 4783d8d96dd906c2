"""Typed payload contracts for service boundaries.

These models validate operation payload shapes before they leave the
service layer so key regressions (for example ``items`` vs ``products``)
fail fast in tests and during development.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from stockroom.domain.product import Product


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="json")


class ProductData(BaseModel):
    """One product as returned to callers.

    ``price`` is a decimal string so no precision is lost in transit.
    """

    id: str
    name: str
    price: str
    stock: int
    active: bool
    supplier_email: str | None = None
    created_at: str


class ProductListData(BaseModel):
    """Payload contract for ``ProductService.list_products``."""

    count: int
    items: list[ProductData]


class TransferData(BaseModel):
    """Payload contract for ``ProductService.transfer_stock``."""

    quantity: int
    source: ProductData
    destination: ProductData


def product_payload(product: Product) -> dict[str, Any]:
    """Serialize a Product into the ProductData shape."""
    return {
        "id": str(product.id),
        "name": product.name,
        "price": str(product.price),
        "stock": product.stock,
        "active": product.active,
        "supplier_email": str(product.supplier_email) if product.supplier_email else None,
        "created_at": product.created_at.isoformat(),
    }
