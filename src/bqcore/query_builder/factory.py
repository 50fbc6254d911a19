"""Query Builder Factory.

This module provides a factory for creating query builders with automatic
configuration from environment settings.
"""

from typing import Optional, Sequence, Union

from bqcore.constants.sql import QueryMode
from bqcore.query_builder.base import BaseQueryBuilder
from bqcore.query_builder.bigquery.table_builder import BigqueryTableQueryBuilder
from bqcore.settings.query import QuerySettings
from bqcore.types.query import CompiledQuery, FilterSpec, OrderBy
from bqcore.types.schema import ColumnDefinition


class QueryBuilderFactory:
    """Factory for creating query builders.

    Example:
        >>> builder = QueryBuilderFactory.create()
        >>> builder.compile(QueryMode.PREVIEW, None, [], ["id"], schema, "ds", "t")
    """

    @staticmethod
    def create_bigquery_builder(settings: Optional[QuerySettings] = None) -> BigqueryTableQueryBuilder:
        """Create a BigQuery table query builder.

        Args:
            settings: Query settings. Falls back to the global settings.

        Returns:
            Configured BigqueryTableQueryBuilder instance.
        """
        if settings is None:
            from bqcore.settings import get_settings
            settings = get_settings().query
        return BigqueryTableQueryBuilder(settings)

    @staticmethod
    def create(settings: Optional[QuerySettings] = None) -> BaseQueryBuilder:
        """Create the query builder for the configured warehouse."""
        return QueryBuilderFactory.create_bigquery_builder(settings)


def get_query_builder(settings: Optional[QuerySettings] = None) -> BaseQueryBuilder:
    """Shortcut for :meth:`QueryBuilderFactory.create`."""
    return QueryBuilderFactory.create(settings)


def compile_query(
    mode: Union[QueryMode, str],
    filters: Optional[FilterSpec],
    order_by: Sequence[OrderBy],
    projection: Sequence[str],
    schema: Sequence[ColumnDefinition],
    dataset_name: str,
    table_name: str,
    settings: Optional[QuerySettings] = None,
) -> CompiledQuery:
    """Compile a table query with the default builder.

    See :meth:`BaseQueryBuilder.compile` for arguments and errors.
    """
    return get_query_builder(settings).compile(
        mode, filters, order_by, projection, schema, dataset_name, table_name
    )
