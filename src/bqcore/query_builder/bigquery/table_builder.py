"""BigQuery table query builder.

Compiles preview and export requests against a reflected table schema into
standard SQL with positional ``?`` parameters, e.g.::

    SELECT `t`.`id`, `t`.`name` FROM `ds`.`t`
    WHERE (`t`.`_timestamp` >= ?) AND (`t`.`id` IN (?, ?))
    ORDER BY `t`.`name` ASC LIMIT 100
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from bqcore.common.exceptions import (
    invalid_filter_value_error,
    unsupported_filter_type_error,
    validation_error,
)
from bqcore.constants.bigquery import (
    DATA_TYPE_CASTS,
    STRING_COMPATIBLE_TYPES,
    TYPES_NOT_ORDERABLE,
    TYPES_UNSUPPORTED_IN_FILTERS,
    TYPES_UNSUPPORTED_IN_ORDERING_FILTERS,
    BigqueryType,
)
from bqcore.constants.sql import (
    OPERATOR_MULTI_VALUE_SQL,
    OPERATOR_SQL,
    DataType,
    FilterOperator,
    QueryMode,
)
from bqcore.logging import get_logger
from bqcore.query_builder.base import BaseQueryBuilder, QueryParameters
from bqcore.types.query import CompiledQuery, FilterCondition, FilterSpec, OrderBy
from bqcore.types.schema import ColumnDefinition
from bqcore.utils.datetime import format_unix_timestamp, parse_numeric_timestamp
from bqcore.utils.decorators import traced

logger = get_logger(__name__)

_TRUE_LITERALS = frozenset({"true", "1"})
_FALSE_LITERALS = frozenset({"false", "0"})


def _compile_attributes(self, mode, filters=None, order_by=(), projection=(), schema=(),
                        dataset_name=None, table_name=None, **_):
    return {
        "bqcore.query.mode": str(getattr(mode, "value", mode)),
        "bqcore.query.dataset": dataset_name,
        "bqcore.query.table": table_name,
        "bqcore.query.projection_size": len(projection or ()),
    }


def _literal_type(value: Any) -> str:
    """BigQuery type name of a Python literal, for error messages."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return BigqueryType.BOOL.value
    if isinstance(value, int):
        return BigqueryType.INT64.value
    if isinstance(value, float):
        return BigqueryType.FLOAT64.value
    if isinstance(value, Decimal):
        return BigqueryType.NUMERIC.value
    if isinstance(value, str):
        return BigqueryType.STRING.value
    return type(value).__name__.upper()


def escape_like_pattern(text: str) -> str:
    """Escape LIKE wildcards so ``text`` matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BigqueryTableQueryBuilder(BaseQueryBuilder):
    """Query builder for BigQuery table preview and export.

    Every column reference is table-qualified and every filter value is
    bound as a positional parameter typed after the column it is compared
    with (or after the comparison cast). Compilation never performs I/O and
    is deterministic for identical inputs.
    """

    dialect = "bigquery"

    @traced(span_name="bqcore.query_builder.compile", attribute_getter=_compile_attributes)
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
        try:
            mode = QueryMode(mode)
        except ValueError:
            raise validation_error(f"Unknown query mode: {mode}", field="mode", value=mode) from None
        filters = filters or FilterSpec()
        order_by = tuple(order_by or ())

        columns = self._validate_projection(mode, projection)
        limit = self._normalize_limit(filters.limit)
        since = self._parse_change_bound(filters.change_since, "changeSince")
        until = self._parse_change_bound(filters.change_until, "changeUntil")

        schema_index = self.index_schema(schema)
        for name in columns:
            self.require_column(schema_index, name)
        for condition in filters.conditions:
            self.require_column(schema_index, condition.column)
        for index, entry in enumerate(order_by):
            if not entry.column:
                raise validation_error(
                    f"orderBy.{index}.columnName is required",
                    field=f"orderBy.{index}.columnName",
                )
            self.require_column(schema_index, entry.column)

        table_ref = self.fully_qualified_name(dataset_name, table_name)
        table_alias = self.quote_identifier(table_name, "table")
        output_columns = columns or tuple(column.name for column in schema)
        if not output_columns:
            raise validation_error("Table has no columns to select", field="columns")

        parameters = QueryParameters()
        predicates = self._build_predicates(
            filters, since, until, schema, schema_index, table_alias, parameters
        )
        order_clause = self._build_order_by(order_by, schema_index, table_alias)

        select_list = ", ".join(self._column_ref(table_alias, name) for name in output_columns)
        parts = [f"SELECT {select_list} FROM {table_ref}"]
        if predicates:
            if len(predicates) == 1:
                parts.append(f"WHERE {predicates[0]}")
            else:
                parts.append("WHERE " + " AND ".join(f"({predicate})" for predicate in predicates))
        if order_clause:
            parts.append(f"ORDER BY {order_clause}")
        parts.append(f"LIMIT {limit:d}")

        compiled = CompiledQuery(
            sql=" ".join(parts),
            bindings=tuple(parameters.bindings),
            types=tuple(parameters.types),
            columns=output_columns,
        )
        logger.debug(
            "Compiled %s query for %s",
            mode.value,
            table_ref,
            extra={"parameter_count": len(parameters), "limit": limit},
        )
        return compiled

    # ------------------------------------------------------------------
    # Validation steps
    # ------------------------------------------------------------------

    def _validate_projection(self, mode: QueryMode, projection: Sequence[str]) -> Tuple[str, ...]:
        columns = self.normalize_projection(projection or ())
        if len(set(columns)) != len(columns):
            duplicates = sorted({name for name in columns if columns.count(name) > 1})
            raise validation_error(
                "Query columns have non unique names",
                field="columns",
                value=", ".join(duplicates),
            )
        if mode is QueryMode.PREVIEW and not columns:
            raise validation_error("Preview requires at least one column", field="columns")
        return columns

    def _normalize_limit(self, limit: int) -> int:
        if limit < 0:
            raise validation_error("Limit cannot be negative", field="limit", value=limit)
        if limit > self.settings.max_limit:
            raise validation_error(
                f"Limit cannot be greater than {self.settings.max_limit}",
                field="limit",
                value=limit,
            )
        if limit == 0:
            return self.settings.default_limit
        return limit

    @staticmethod
    def _parse_change_bound(value: Optional[str], field: str) -> Optional[str]:
        """Validate a change tracking bound and format it as a TIMESTAMP literal."""
        if value is None:
            return None
        parsed = parse_numeric_timestamp(value)
        if parsed is not None:
            try:
                return format_unix_timestamp(parsed)
            except (ValueError, OverflowError, OSError):
                pass
        raise validation_error(f"{field} must be numeric timestamp", field=field, value=value)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _column_ref(self, table_alias: str, column_name: str) -> str:
        return f"{table_alias}.{self.quote_identifier(column_name, 'column')}"

    def _comparison_target(
        self,
        table_alias: str,
        column: ColumnDefinition,
        data_type: Optional[DataType],
    ) -> Tuple[str, BigqueryType]:
        """Column expression and the parameter type it compares against."""
        ref = self._column_ref(table_alias, column.name)
        cast_type = DATA_TYPE_CASTS.get(data_type) if data_type is not None else None
        if cast_type is None:
            return ref, column.type
        return f"SAFE_CAST({ref} AS {cast_type.value})", cast_type

    def _build_predicates(
        self,
        filters: FilterSpec,
        since: Optional[str],
        until: Optional[str],
        schema: Sequence[ColumnDefinition],
        schema_index: Dict[str, ColumnDefinition],
        table_alias: str,
        parameters: QueryParameters,
    ) -> List[str]:
        predicates: List[str] = []
        tracking = self._column_ref(table_alias, self.settings.change_tracking_column)

        if since is not None:
            placeholder = parameters.add(since, BigqueryType.TIMESTAMP.value)
            predicates.append(f"{tracking} >= {placeholder}")
        if until is not None:
            placeholder = parameters.add(until, BigqueryType.TIMESTAMP.value)
            predicates.append(f"{tracking} < {placeholder}")

        for condition in filters.conditions:
            column = schema_index[condition.column]
            predicates.append(self._build_condition(condition, column, table_alias, parameters))

        if filters.fulltext_search is not None:
            predicates.append(
                self._build_fulltext(filters.fulltext_search, schema, table_alias, parameters)
            )
        return predicates

    def _build_condition(
        self,
        condition: FilterCondition,
        column: ColumnDefinition,
        table_alias: str,
        parameters: QueryParameters,
    ) -> str:
        operator = condition.operator
        if column.type in TYPES_UNSUPPORTED_IN_FILTERS:
            raise unsupported_filter_type_error(column.name, column.type.value)

        target, parameter_type = self._comparison_target(table_alias, column, condition.data_type)
        if operator.is_ordering and parameter_type in TYPES_UNSUPPORTED_IN_ORDERING_FILTERS:
            raise unsupported_filter_type_error(
                column.name, parameter_type.value, operator=operator.value
            )

        values = condition.values
        if not values:
            raise validation_error(
                f'Filter on column "{column.name}" requires at least one value',
                field="values",
            )
        multi_value = len(values) > 1 or operator is FilterOperator.IN
        if multi_value and operator not in OPERATOR_MULTI_VALUE_SQL:
            raise validation_error(
                'whereFilter with multiple values can be used only with "eq", "ne" operators',
                field="operator",
                value=operator.value,
            )
        coerced = [self._coerce_value(value, parameter_type, column.name) for value in values]

        if multi_value:
            keyword = OPERATOR_MULTI_VALUE_SQL[operator]
            placeholders = ", ".join(parameters.add(value, parameter_type.value) for value in coerced)
            return f"{target} {keyword} ({placeholders})"

        placeholder = parameters.add(coerced[0], parameter_type.value)
        return f"{target} {OPERATOR_SQL[operator]} {placeholder}"

    def _build_fulltext(
        self,
        search: str,
        schema: Sequence[ColumnDefinition],
        table_alias: str,
        parameters: QueryParameters,
    ) -> str:
        searchable = [column for column in schema if column.type in STRING_COMPATIBLE_TYPES]
        if not searchable:
            raise validation_error(
                "Fulltext search requires at least one STRING column",
                field="fulltextSearch",
            )
        pattern = f"%{escape_like_pattern(search)}%"
        likes = [
            f"{self._column_ref(table_alias, column.name)} LIKE "
            f"{parameters.add(pattern, BigqueryType.STRING.value)}"
            for column in searchable
        ]
        return " OR ".join(likes)

    def _build_order_by(
        self,
        order_by: Sequence[OrderBy],
        schema_index: Dict[str, ColumnDefinition],
        table_alias: str,
    ) -> str:
        entries = []
        for entry in order_by:
            column = schema_index[entry.column]
            if column.type in TYPES_NOT_ORDERABLE:
                raise validation_error(
                    f'Ordering by column "{column.name}" of type "{column.type.value}" is not supported',
                    field="orderBy",
                    value=column.name,
                )
            target, _ = self._comparison_target(table_alias, column, entry.data_type)
            entries.append(f"{target} {entry.direction.value.upper()}")
        return ", ".join(entries)

    # ------------------------------------------------------------------
    # Literal coercion
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce_value(value: Any, parameter_type: BigqueryType, column_name: str) -> Any:
        """Convert a filter literal to the Python type its parameter binds as.

        Raises:
            DriverError: UNSUPPORTED_FILTER_TYPE if the literal does not fit
        """
        def mismatch():
            return invalid_filter_value_error(
                expected=parameter_type.value,
                actual=_literal_type(value),
                column=column_name,
            )

        if value is None or isinstance(value, (bytes, dict, list, tuple, set)):
            raise mismatch()

        if parameter_type is BigqueryType.INT64:
            if isinstance(value, bool):
                raise mismatch()
            if isinstance(value, int):
                return value
            if isinstance(value, (float, Decimal)):
                finite = value.is_finite() if isinstance(value, Decimal) else math.isfinite(value)
                if not finite or value != int(value):
                    raise mismatch()
                return int(value)
            try:
                return int(str(value).strip())
            except ValueError:
                raise mismatch() from None

        if parameter_type is BigqueryType.FLOAT64:
            if isinstance(value, bool):
                raise mismatch()
            try:
                return float(value)
            except (TypeError, ValueError):
                raise mismatch() from None

        if parameter_type in (BigqueryType.NUMERIC, BigqueryType.BIGNUMERIC):
            if isinstance(value, bool):
                raise mismatch()
            try:
                number = Decimal(str(value).strip())
            except InvalidOperation:
                raise mismatch() from None
            if not number.is_finite():
                raise mismatch()
            return number

        if parameter_type is BigqueryType.BOOL:
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in _TRUE_LITERALS:
                return True
            if text in _FALSE_LITERALS:
                return False
            raise mismatch()

        if isinstance(value, bool):
            return "true" if value else "false"
        if hasattr(value, "isoformat"):
            return value.isoformat()
        return str(value)
