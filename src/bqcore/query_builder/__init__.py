"""Query builders for the BigQuery driver core.

Query builders compile a dialect-independent table query specification
into parameterized SQL. They validate input against the reflected schema
and never execute anything.
"""

from bqcore.query_builder.base import BaseQueryBuilder, QueryParameters
from bqcore.query_builder.bigquery import BigqueryTableQueryBuilder, escape_like_pattern
from bqcore.query_builder.factory import QueryBuilderFactory, compile_query, get_query_builder

__all__ = [
    "BaseQueryBuilder",
    "QueryParameters",
    "BigqueryTableQueryBuilder",
    "escape_like_pattern",
    "QueryBuilderFactory",
    "compile_query",
    "get_query_builder",
]
