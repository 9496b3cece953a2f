"""ORM models for the normalized transaction store."""

from .statement import Base, StatementTransaction

__all__ = [
    "Base",
    "StatementTransaction",
]
