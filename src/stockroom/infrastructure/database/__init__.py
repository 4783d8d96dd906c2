"""SQLite database engine and schema via SQLAlchemy Core."""

from stockroom.infrastructure.database.engine import create_db_engine, init_database
from stockroom.infrastructure.database.schema import metadata, products

__all__ = [
    "create_db_engine",
    "init_database",
    "metadata",
    "products",
]
