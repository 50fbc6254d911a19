import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from sqlglot import exp

from bqcore.common.exceptions import column_not_found_error, validation_error
from bqcore.constants.sql import QueryMode
from bqcore.settings.query import QuerySettings
from bqcore.types.query import CompiledQuery, FilterSpec, OrderBy
from bqcore.types.schema import ColumnDefinition


class QueryParameters:
    """Positional parameter collector.

    Every call to :meth:`add` returns a ``?`` placeholder and records the
    value and its type, so bindings always follow placeholder order.
    """

    def __init__(self):
        self.bindings: List[Any] = []
        self.types: List[str] = []

    def add(self, value: Any, parameter_type: str) -> str:
        self.bindings.append(value)
        self.types.append(parameter_type)
        return "?"

    def __len__(self) -> int:
        return len(self.bindings)


class BaseQueryBuilder(ABC):
    """Base interface for table query compilers with SQL injection protection.

    Query builders turn a dialect-independent query specification into
    parameterized SQL. They do NOT execute queries; that responsibility
    belongs to the warehouse client supplied by the host.

    Security Principles:
        1. **Input Validation**: Dataset and table names are validated before use
        2. **No Inline Values**: Filter values are always bound as parameters
        3. **Whitelist Approach**: Only known-safe characters in dataset/table names
        4. **Length Limits**: Enforce maximum identifier lengths
        5. **Schema Check**: Column names must exist in the reflected schema
    """

    dialect: str = ""

    def __init__(self, settings: QuerySettings):
        """Initialize query builder.

        Args:
            settings: Query limits and conventions
        """
        self.settings = settings

    @abstractmethod
    def compile(
        self,
        mode: Union[QueryMode, str],
        filters: Optional[FilterSpec],
        order_by: Sequence[OrderBy],
        projection: Sequence[str],
        schema: Sequence[ColumnDefinition],
        dataset_name: str,
        table_name: str,
    ) -> CompiledQuery:
        """Compile a table query.

        Args:
            mode: SELECT for exports, PREVIEW for bounded previews
            filters: Filters, fulltext search, change window and limit
            order_by: ORDER BY entries in caller order
            projection: Requested columns, may be empty in SELECT mode
            schema: Columns of the table, in table order
            dataset_name: Dataset holding the table
            table_name: Table to query

        Returns:
            CompiledQuery with SQL and positional bindings

        Raises:
            DriverError: Validation family error for malformed input
        """
        pass

    def quote_identifier(self, identifier: str, identifier_type: str = "identifier") -> str:
        """Quote an identifier in the builder's dialect.

        Args:
            identifier: Identifier to quote
            identifier_type: Type of identifier for error messages

        Returns:
            Quoted identifier
        """
        if not identifier:
            raise validation_error(f"Empty {identifier_type} name", field=identifier_type)
        return exp.to_identifier(identifier, quoted=True).sql(dialect=self.dialect)

    def quote_object_identifier(self, identifier: str, identifier_type: str) -> str:
        """Validate and quote a dataset or table name."""
        self._validate_identifier(identifier, identifier_type)
        return self.quote_identifier(identifier, identifier_type)

    def fully_qualified_name(self, dataset_name: str, table_name: str) -> str:
        """Get fully qualified table name.

        Args:
            dataset_name: Dataset name
            table_name: Table name

        Returns:
            Quoted ``dataset.table`` reference
        """
        return (
            f"{self.quote_object_identifier(dataset_name, 'dataset')}."
            f"{self.quote_object_identifier(table_name, 'table')}"
        )

    def _validate_identifier(self, identifier: str, identifier_type: str = "identifier") -> None:
        """Validate a dataset or table name for SQL injection protection.

        Args:
            identifier: The identifier to validate
            identifier_type: Type of identifier for error messages

        Raises:
            DriverError: If identifier is invalid
        """
        if not identifier:
            raise validation_error(f"Empty {identifier_type} name", field=identifier_type)

        # BigQuery allows up to 1024 characters for dataset and table names
        if len(identifier) > 1024:
            raise validation_error(
                f"{identifier_type} name too long: {identifier}",
                field=identifier_type,
            )

        if not re.match(r'^[a-zA-Z0-9_][a-zA-Z0-9_\-]*$', identifier):
            raise validation_error(
                f"Invalid {identifier_type} name: {identifier}",
                field=identifier_type,
                value=identifier,
            )

        # Check for SQL injection patterns
        dangerous_patterns = [
            r'--',
            r'/\*',
            r'\*/',
        ]

        for pattern in dangerous_patterns:
            if re.search(pattern, identifier):
                raise validation_error(
                    f"Potentially dangerous {identifier_type} name: {identifier}",
                    field=identifier_type,
                    value=identifier,
                )

    @staticmethod
    def index_schema(schema: Sequence[ColumnDefinition]) -> Dict[str, ColumnDefinition]:
        """Map column names to their definitions."""
        return {column.name: column for column in schema}

    @staticmethod
    def require_column(
        columns: Dict[str, ColumnDefinition],
        name: str,
    ) -> ColumnDefinition:
        """Look up ``name`` in the schema or raise COLUMN_NOT_FOUND."""
        try:
            return columns[name]
        except KeyError:
            raise column_not_found_error(name) from None

    @staticmethod
    def normalize_projection(projection: Sequence[str]) -> Tuple[str, ...]:
        """Strip whitespace from requested column names."""
        return tuple(name.strip() for name in projection)
