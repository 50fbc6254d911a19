"""BigQuery type system constants.

Defines the scalar and composite column types the schema reflection
collaborator reports, the query parameter type each of them binds as, and
the type groups the compiler consults when validating filters.
"""

from enum import Enum

from bqcore.constants.sql import DataType


class BigqueryType(str, Enum):
    """Column types reported by BigQuery table reflection.

    Parametrized declarations such as ``NUMERIC(10,2)``, ``STRING(50)`` or
    ``ARRAY<INT64>`` normalize to their base type via :meth:`parse`.
    """

    STRING = "STRING"
    BYTES = "BYTES"
    INT64 = "INT64"
    NUMERIC = "NUMERIC"
    BIGNUMERIC = "BIGNUMERIC"
    FLOAT64 = "FLOAT64"
    BOOL = "BOOL"
    DATE = "DATE"
    DATETIME = "DATETIME"
    TIME = "TIME"
    TIMESTAMP = "TIMESTAMP"
    INTERVAL = "INTERVAL"
    GEOGRAPHY = "GEOGRAPHY"
    JSON = "JSON"
    ARRAY = "ARRAY"
    STRUCT = "STRUCT"

    @classmethod
    def parse(cls, declared: str) -> "BigqueryType":
        """Normalize a declared column type to its base type.

        Args:
            declared: Type as reported by reflection, e.g. ``"NUMERIC(38,9)"``,
                ``"int64"`` or ``"ARRAY<STRING>"``

        Returns:
            The matching base type

        Raises:
            ValueError: If the type is not a known BigQuery type
        """
        base = declared.strip().upper()
        for separator in ("(", "<"):
            base = base.split(separator, 1)[0]
        base = base.strip()
        return cls(TYPE_ALIASES.get(base, base))


# Legacy and standard-SQL aliases reflection may report
TYPE_ALIASES = {
    "INTEGER": "INT64",
    "INT": "INT64",
    "SMALLINT": "INT64",
    "BIGINT": "INT64",
    "TINYINT": "INT64",
    "BYTEINT": "INT64",
    "DECIMAL": "NUMERIC",
    "BIGDECIMAL": "BIGNUMERIC",
    "FLOAT": "FLOAT64",
    "BOOLEAN": "BOOL",
    "RECORD": "STRUCT",
}

# Types filters may never reference
TYPES_UNSUPPORTED_IN_FILTERS = frozenset({
    BigqueryType.ARRAY,
    BigqueryType.STRUCT,
    BigqueryType.BYTES,
    BigqueryType.GEOGRAPHY,
    BigqueryType.INTERVAL,
    BigqueryType.JSON,
})

# Types that have no defined sort order
TYPES_NOT_ORDERABLE = frozenset({
    BigqueryType.ARRAY,
    BigqueryType.STRUCT,
    BigqueryType.GEOGRAPHY,
    BigqueryType.JSON,
})

# Types ordering operators (gt, gte, lt, lte) may not compare
TYPES_UNSUPPORTED_IN_ORDERING_FILTERS = frozenset({BigqueryType.BOOL})

# Types the fulltext search scans
STRING_COMPATIBLE_TYPES = frozenset({BigqueryType.STRING})


# Query parameter type a comparison cast binds as
DATA_TYPE_CASTS = {
    DataType.INTEGER: BigqueryType.INT64,
    DataType.REAL: BigqueryType.NUMERIC,
}
