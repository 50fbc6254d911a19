"""Query specification types and the compiled query they produce.

These models describe a table query independent of the SQL dialect. They
check only the shape of the input; semantic validation against the table
schema happens in the query builder so that every failure surfaces as a
``DriverError``.
"""

from typing import Any, List, Optional, Sequence, Tuple

from pydantic import ConfigDict, Field, field_validator

from bqcore.constants.sql import DataType, FilterOperator, OrderDirection
from bqcore.types.base import DriverBaseModel


class FilterCondition(DriverBaseModel):
    """A single column/operator/values predicate of the WHERE clause.

    Attributes:
        column: Column the predicate compares.
        operator: Comparison operator.
        values: Ordered scalar values. ``eq``/``neq`` with several values
            compile to ``IN``/``NOT IN``.
        data_type: Optional comparison type. INTEGER and REAL compare the
            column through ``SAFE_CAST``.
    """
    model_config = ConfigDict(frozen=True)

    column: str
    operator: FilterOperator = FilterOperator.EQ
    values: Tuple[Any, ...] = ()
    data_type: Optional[DataType] = None

    @field_validator("column")
    @classmethod
    def strip_column(cls, value: str) -> str:
        return value.strip()

    @field_validator("values", mode="before")
    @classmethod
    def wrap_scalar(cls, value: Any) -> Any:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            return (value,)
        return value


class FilterSpec(DriverBaseModel):
    """Filters, fulltext search, change tracking window and row limit.

    Empty ``change_since``/``change_until``/``fulltext_search`` strings are
    treated as not set. ``limit`` 0 means "use the default limit".
    """
    model_config = ConfigDict(frozen=True)

    conditions: Tuple[FilterCondition, ...] = ()
    fulltext_search: Optional[str] = None
    change_since: Optional[str] = None
    change_until: Optional[str] = None
    limit: int = 0

    @field_validator("fulltext_search", "change_since", "change_until", mode="before")
    @classmethod
    def empty_as_unset(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str) and value.strip() == "":
            return None
        return value


class OrderBy(DriverBaseModel):
    """One ORDER BY entry."""
    model_config = ConfigDict(frozen=True)

    column: str
    direction: OrderDirection = OrderDirection.ASC
    data_type: Optional[DataType] = None

    @field_validator("column")
    @classmethod
    def strip_column(cls, value: str) -> str:
        return value.strip()


class CompiledQuery(DriverBaseModel):
    """Parameterized SQL ready for the warehouse client.

    Attributes:
        sql: Statement using positional ``?`` placeholders.
        bindings: Values in the order their placeholders appear in ``sql``.
        types: BigQuery parameter type of each binding, parallel to
            ``bindings``.
        columns: Effective output column order.
    """
    model_config = ConfigDict(frozen=True)

    sql: str
    bindings: Tuple[Any, ...] = ()
    types: Tuple[str, ...] = ()
    columns: Tuple[str, ...] = Field(default_factory=tuple)

    def to_query_parameters(self) -> List[Tuple[str, Any]]:
        """Return ``(type, value)`` pairs for positional query parameters."""
        return list(zip(self.types, self.bindings))
