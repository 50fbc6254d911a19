"""Materialized result rows returned to the host."""

from typing import Any, Dict, Iterator, Tuple

from pydantic import ConfigDict

from bqcore.types.base import DriverBaseModel


class MaterializedColumn(DriverBaseModel):
    """One cell of a materialized row.

    ``value`` is ``None`` for SQL NULL, never an empty string. In preview
    mode non-null values are strings and ``truncated`` tells whether the
    string was cut.
    """
    model_config = ConfigDict(frozen=True)

    column_name: str
    value: Any = None
    truncated: bool = False

    @property
    def is_null(self) -> bool:
        return self.value is None


class MaterializedRow(DriverBaseModel):
    """Ordered cells of one result row."""
    model_config = ConfigDict(frozen=True)

    columns: Tuple[MaterializedColumn, ...] = ()

    def __len__(self) -> int:
        return len(self.columns)

    def iter_columns(self) -> Iterator[MaterializedColumn]:
        return iter(self.columns)

    def get(self, column_name: str) -> MaterializedColumn:
        """Return the cell for ``column_name``.

        Raises:
            KeyError: If the row has no such column
        """
        for column in self.columns:
            if column.column_name == column_name:
                return column
        raise KeyError(column_name)

    def values(self) -> Dict[str, Any]:
        """Map column names to cell values, in row order."""
        return {column.column_name: column.value for column in self.columns}
