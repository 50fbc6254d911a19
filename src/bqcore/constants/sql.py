"""SQL and query-related constants.

This module contains the enums that describe a table query request
independent of how it is compiled: the execution mode, the filter
operators, the order direction and the optional comparison data type.

These constants sit at the bottom of the dependency graph so that the
types, the query builders and the request path can share them without
circular imports.
"""

from enum import Enum


class QueryMode(str, Enum):
    """Execution mode of a compiled table query.

    Values:
        SELECT: Full export query. Values pass through untouched and an
            empty projection selects every column of the table.
        PREVIEW: Bounded preview query. Requires an explicit projection and
            results are stringified and truncated for display.
    """

    SELECT = "select"
    PREVIEW = "preview"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class FilterOperator(str, Enum):
    """Comparison operators accepted in a filter condition."""

    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"

    @property
    def is_ordering(self) -> bool:
        """Whether the operator compares by order rather than by equality."""
        return self in (FilterOperator.GT, FilterOperator.GTE, FilterOperator.LT, FilterOperator.LTE)


class OrderDirection(str, Enum):
    """Sort direction for an ORDER BY entry."""

    ASC = "asc"
    DESC = "desc"


class DataType(str, Enum):
    """Comparison data type a filter or order entry may request.

    A non-STRING data type makes the compiler compare the column through
    ``SAFE_CAST`` so that numbers stored as text sort and compare
    numerically.
    """

    STRING = "STRING"
    INTEGER = "INTEGER"
    REAL = "REAL"


# Single-value operator rendering
OPERATOR_SQL = {
    FilterOperator.EQ: "=",
    FilterOperator.NEQ: "<>",
    FilterOperator.GT: ">",
    FilterOperator.GTE: ">=",
    FilterOperator.LT: "<",
    FilterOperator.LTE: "<=",
}

# Multi-value operator rendering
OPERATOR_MULTI_VALUE_SQL = {
    FilterOperator.EQ: "IN",
    FilterOperator.IN: "IN",
    FilterOperator.NEQ: "NOT IN",
}
