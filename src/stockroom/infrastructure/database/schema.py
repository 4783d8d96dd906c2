"""SQLAlchemy Core table definitions for the stockroom database.

Prices are stored as TEXT decimal strings so no precision is lost to
floating point. Timestamps are ISO 8601 strings with a UTC offset.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

products = Table(
    "products",
    metadata,
    Column("id", Text, primary_key=True),
    # Store-level uniqueness closes the check-then-insert race in the service.
    Column("name", Text, nullable=False, unique=True),
    Column("price", Text, nullable=False),
    Column("stock", Integer, nullable=False, default=0, server_default="0"),
    Column("active", Integer, nullable=False, default=1, server_default="1"),
    Column("supplier_email", Text),
    Column("created_at", Text, nullable=False),
    CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
)

Index("ix_products_active", products.c.active)
Index("ix_products_created_at", products.c.created_at)
