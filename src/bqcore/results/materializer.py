"""Conversion of warehouse rows into response rows.

Preview rows are stringified for display and truncated; export rows keep
the values the warehouse client returned.
"""

import base64
import json
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence, Tuple, Union

from bqcore.common.exceptions import validation_error
from bqcore.constants.sql import QueryMode
from bqcore.types.result import MaterializedColumn, MaterializedRow
from bqcore.types.schema import ColumnDefinition

PREVIEW_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


def _resolve_mode(mode: Union[QueryMode, str]) -> QueryMode:
    try:
        return QueryMode(mode)
    except ValueError:
        raise validation_error(f"Unknown query mode: {mode}", field="mode", value=mode) from None


def stringify_value(value: Any) -> str:
    """Render a non-null warehouse value as preview text."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.strftime(PREVIEW_DATETIME_FORMAT)
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)


def _column_order(
    raw_row: Mapping[str, Any],
    projection: Sequence[str],
    schema: Optional[Sequence[ColumnDefinition]],
) -> Tuple[str, ...]:
    if projection:
        return tuple(name.strip() for name in projection)
    if schema:
        return tuple(column.name for column in schema)
    return tuple(raw_row.keys())


def materialize(
    mode: Union[QueryMode, str],
    raw_row: Mapping[str, Any],
    projection: Sequence[str],
    schema: Optional[Sequence[ColumnDefinition]] = None,
    truncate_length: Optional[int] = None,
) -> MaterializedRow:
    """Materialize one warehouse row.

    Args:
        mode: PREVIEW stringifies and truncates, SELECT passes values through
        raw_row: Column name to value mapping from the warehouse client
        projection: Output column order; empty falls back to ``schema``, then
            to the row's own order
        schema: Table columns, used only for the fallback order
        truncate_length: Preview cell length; defaults to the query settings

    Returns:
        MaterializedRow with one cell per output column

    Raises:
        KeyError: If a projected column is missing from ``raw_row``
        DriverError: VALIDATION_ERROR for an unknown ``mode``
    """
    mode = _resolve_mode(mode)
    if mode is QueryMode.PREVIEW and truncate_length is None:
        from bqcore.settings import get_settings
        truncate_length = get_settings().query.preview_truncate_length

    cells = []
    for name in _column_order(raw_row, projection, schema):
        value = raw_row[name]
        truncated = False
        if value is not None and mode is QueryMode.PREVIEW:
            value = stringify_value(value)
            if len(value) > truncate_length:
                value = value[:truncate_length]
                truncated = True
        cells.append(MaterializedColumn(column_name=name, value=value, truncated=truncated))

    return MaterializedRow(columns=tuple(cells))


def materialize_rows(
    mode: Union[QueryMode, str],
    rows: Iterable[Mapping[str, Any]],
    projection: Sequence[str],
    schema: Optional[Sequence[ColumnDefinition]] = None,
    truncate_length: Optional[int] = None,
) -> Iterator[MaterializedRow]:
    """Lazily materialize ``rows``; see :func:`materialize`."""
    mode = _resolve_mode(mode)
    if mode is QueryMode.PREVIEW and truncate_length is None:
        from bqcore.settings import get_settings
        truncate_length = get_settings().query.preview_truncate_length

    for raw_row in rows:
        yield materialize(mode, raw_row, projection, schema, truncate_length)
