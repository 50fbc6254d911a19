"""Utility functions and helpers for the BigQuery driver core.

This module provides common utility functions used throughout the package.
"""

from bqcore.utils.datetime import (
    format_unix_timestamp,
    parse_numeric_timestamp,
)
from bqcore.utils.decorators import (
    retry_warehouse_call,
    retry_with_backoff,
    traced,
)

__all__ = [
    # DateTime utilities
    "format_unix_timestamp",
    "parse_numeric_timestamp",
    # Decorators
    "retry_warehouse_call",
    "retry_with_backoff",
    "traced",
]
