"""Protocol definitions for the BigQuery driver core.

This module contains protocol definitions for the collaborators the core
depends on but does not implement: the warehouse client and schema
reflection.

Protocols provide type-safe interfaces without requiring inheritance,
following Python's structural subtyping (duck typing with type hints).
"""

from .warehouse import QueryResult, SchemaReflection, WarehouseClient

__all__ = [
    "QueryResult",
    "SchemaReflection",
    "WarehouseClient",
]
