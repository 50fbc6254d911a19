"""Settings module providing configuration management for the driver core.

Configuration is built on Pydantic Settings and split into domain-specific
groups:

    - base.py: DriverBaseSettings with the shared environment loading rules
    - query.py: QuerySettings (row limits, preview truncation, change
      tracking column)
    - retry.py: RetrySettings (backoff policy for warehouse calls)
    - main.py: _Settings aggregator plus the get_settings() singleton

Configuration Sources (precedence order):
    1. Environment Variables (highest priority)
    2. ``.env`` file in the working directory
    3. Default Values in code (lowest priority)

Environment Variable Naming:
    - Query settings: ``BQ_QUERY_<FIELD>`` (e.g. ``BQ_QUERY_MAX_LIMIT``)
    - Retry settings: ``BQ_RETRY_<FIELD>`` (e.g. ``BQ_RETRY_MAX_RETRIES``)
    - Top level: ``LOG_LEVEL``

Quick Start:
    >>> from bqcore.settings import get_settings
    >>> settings = get_settings()
    >>> settings.query.default_limit
    100
"""

from .main import _Settings, get_settings, _reload_settings
from .base import DriverBaseSettings
from .query import QuerySettings
from .retry import RetrySettings

__all__ = [
    "get_settings",
    "DriverBaseSettings",
    "QuerySettings",
    "RetrySettings",
]
