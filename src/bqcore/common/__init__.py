"""Common error handling for the BigQuery driver core.

Key Components:
    - **Exceptions**: One ``DriverError`` class categorized by ``ErrorCode``
    - **Messages**: Decoding of raw warehouse error bodies
    - **Retry**: Retry decision for failed warehouse calls
    - **Translation**: Mapping of warehouse failures onto ``ErrorCode``

Exception Design:
    The exception system uses error codes for categorization rather than
    numerous specific exception classes. Helper functions build the common
    cases with structured ``details``.
"""

from bqcore.common.exceptions import (
    DriverError,
    ErrorCode,
    WarehouseError,
    # Helper functions
    already_exists_error,
    column_not_found_error,
    invalid_filter_value_error,
    not_found_error,
    permission_denied_error,
    transient_backend_error,
    unknown_error,
    unsupported_filter_type_error,
    validation_error,
)
from bqcore.common.messages import (
    ObjectMessage,
    PlainTextMessage,
    StructuredMessage,
    decode_message,
    direct_error_message,
    extract_direct_message,
    parse_message,
)
from bqcore.common.retry import (
    ErrorClassification,
    classify,
    classify_exception,
    is_retryable_exception,
    should_retry,
)
from bqcore.common.translation import translate_warehouse_error

__all__ = [
    # Base Exception and Error Codes
    "DriverError",
    "ErrorCode",
    "WarehouseError",
    # Helper functions
    "validation_error",
    "column_not_found_error",
    "unsupported_filter_type_error",
    "invalid_filter_value_error",
    "not_found_error",
    "permission_denied_error",
    "already_exists_error",
    "transient_backend_error",
    "unknown_error",
    # Messages
    "StructuredMessage",
    "ObjectMessage",
    "PlainTextMessage",
    "parse_message",
    "decode_message",
    "extract_direct_message",
    "direct_error_message",
    # Retry
    "ErrorClassification",
    "should_retry",
    "classify",
    "classify_exception",
    "is_retryable_exception",
    "translate_warehouse_error",
]
