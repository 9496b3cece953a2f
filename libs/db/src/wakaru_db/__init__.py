"""wakaru_db: storage library for normalized statement transactions.

Public exports
--------------
- ``Base`` and ``metadata`` for schema creation
- ORM models in ``wakaru_db.models.statement`` (re-exported for convenience)
- Engine/session helpers in ``wakaru_db.client``
"""

from __future__ import annotations

from .models.statement import Base, StatementTransaction

metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "StatementTransaction",
]
