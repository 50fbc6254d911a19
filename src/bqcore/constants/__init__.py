"""Constants module for the BigQuery driver core.

This module contains all constant values and enumerations used throughout
the package. It sits at the bottom of the dependency graph and has no
dependencies on other package modules.

Organization:
    - sql: Query modes, filter operators, order directions, data types
    - bigquery: BigQuery column types and type groups
    - errors: Retry classification tables
"""

# SQL/Query constants
from bqcore.constants.sql import (
    DataType,
    FilterOperator,
    OrderDirection,
    QueryMode,
)

# BigQuery type constants
from bqcore.constants.bigquery import (
    BigqueryType,
    DATA_TYPE_CASTS,
    STRING_COMPATIBLE_TYPES,
    TYPES_NOT_ORDERABLE,
    TYPES_UNSUPPORTED_IN_FILTERS,
    TYPES_UNSUPPORTED_IN_ORDERING_FILTERS,
)

# Error classification constants
from bqcore.constants.errors import (
    RETRYABLE_REASONS,
    RETRYABLE_STATUS_CODES,
)

__all__ = [
    # SQL
    "DataType",
    "FilterOperator",
    "OrderDirection",
    "QueryMode",
    # BigQuery
    "BigqueryType",
    "DATA_TYPE_CASTS",
    "STRING_COMPATIBLE_TYPES",
    "TYPES_NOT_ORDERABLE",
    "TYPES_UNSUPPORTED_IN_FILTERS",
    "TYPES_UNSUPPORTED_IN_ORDERING_FILTERS",
    # Errors
    "RETRYABLE_REASONS",
    "RETRYABLE_STATUS_CODES",
]
