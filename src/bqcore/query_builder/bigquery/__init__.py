"""BigQuery query builder."""

from .table_builder import BigqueryTableQueryBuilder, escape_like_pattern

__all__ = ["BigqueryTableQueryBuilder", "escape_like_pattern"]
