"""Logging infrastructure for the BigQuery driver core.

This module provides structured logging with JSON output, request/run
context tracking, and OpenTelemetry trace correlation.
"""

from bqcore.logging.filters import ContextFilter
from bqcore.logging.logger import CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
]
