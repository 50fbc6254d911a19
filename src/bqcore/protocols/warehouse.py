"""Warehouse collaborator protocol definitions.

The driver core never talks to the network itself. Query execution and
table reflection are supplied by the host through these interfaces.
"""

from typing import TYPE_CHECKING, Any, Iterator, Mapping, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from bqcore.types.schema import ColumnDefinition


@runtime_checkable
class QueryResult(Protocol):
    """Rows returned by a warehouse query.

    Iterating yields one mapping of column name to value per row. ``schema``
    describes the returned columns, which may be empty when the client does
    not report it.
    """

    @property
    def schema(self) -> Sequence["ColumnDefinition"]:
        ...

    def __iter__(self) -> Iterator[Mapping[str, Any]]:
        ...


@runtime_checkable
class WarehouseClient(Protocol):
    """Protocol for executing parameterized queries.

    Implementations raise :class:`bqcore.common.exceptions.WarehouseError`,
    or any exception exposing ``status_code`` and ``message``, when the
    warehouse rejects the call.
    """

    def run_query(
        self,
        sql: str,
        bindings: Sequence[Any],
        types: Sequence[str],
    ) -> QueryResult:
        """Execute ``sql`` with positional parameters.

        Args:
            sql: Statement using positional ``?`` placeholders
            bindings: Parameter values in placeholder order
            types: BigQuery parameter type of each binding

        Returns:
            The query's rows
        """
        ...


@runtime_checkable
class SchemaReflection(Protocol):
    """Protocol for reading a table's column definitions."""

    def columns(self, dataset: str, table: str) -> Sequence["ColumnDefinition"]:
        """Return the table's columns in table order."""
        ...
