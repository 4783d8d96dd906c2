"""stockroom — always-valid product catalog domain layer."""

__version__ = "0.1.0"
