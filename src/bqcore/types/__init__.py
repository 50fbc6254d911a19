"""Type definitions for the BigQuery driver core.

This module provides the pydantic models shared across the package: the
table schema, the query specification, the compiled query and the
materialized result rows.
"""

from .base import DriverBaseModel
from .query import CompiledQuery, FilterCondition, FilterSpec, OrderBy
from .result import MaterializedColumn, MaterializedRow
from .schema import ColumnDefinition

__all__ = [
    # Base model
    'DriverBaseModel',
    # Schema
    'ColumnDefinition',
    # Query specification
    'FilterCondition',
    'FilterSpec',
    'OrderBy',
    'CompiledQuery',
    # Results
    'MaterializedColumn',
    'MaterializedRow',
]
