"""DateTime utilities for change tracking filters.

Change tracking bounds arrive as unix timestamps in string form and are
bound against the warehouse's row timestamp column as UTC datetimes.
"""

import math
from datetime import datetime, timezone
from typing import Optional

TIMESTAMP_PARAMETER_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_numeric_timestamp(value: Optional[str]) -> Optional[float]:
    """Parse a numeric timestamp string.

    Args:
        value: Unix timestamp such as ``"1667293200"`` or ``"1667293200.5"``

    Returns:
        The timestamp as float, or None when ``value`` is not a finite number
    """
    if value is None:
        return None
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def format_unix_timestamp(timestamp: float) -> str:
    """Format a unix timestamp as ``YYYY-MM-DD HH:MM:SS`` in UTC.

    Fractional seconds are dropped.

    Example:
        >>> format_unix_timestamp(1667293200)
        '2022-11-01 09:00:00'
    """
    moment = datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
    return moment.strftime(TIMESTAMP_PARAMETER_FORMAT)
