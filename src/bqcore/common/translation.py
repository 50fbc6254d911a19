"""Mapping of warehouse failures onto the driver error taxonomy."""

import re
from typing import Optional

from bqcore.common.exceptions import (
    DriverError,
    ErrorCode,
    already_exists_error,
    column_not_found_error,
    invalid_filter_value_error,
    not_found_error,
    permission_denied_error,
    transient_backend_error,
    unknown_error,
    validation_error,
)
from bqcore.common.messages import direct_error_message
from bqcore.common.retry import classify_exception
from bqcore.constants.errors import (
    ERROR_WHILE_READING_TABLE,
    NO_MATCHING_SIGNATURE,
    PARTITION_ELIMINATION,
)

__all__ = ["translate_warehouse_error"]

_SIGNATURE_TYPES_PATTERN = re.compile(r"types:\s(.*?)\.")
_NAME_NOT_FOUND_PATTERN = re.compile(r"Name(.*) not found inside ")

_BAD_REQUEST = 400


def _invalid_filter_value(raw: str, decoded: str, cause: Optional[Exception]) -> DriverError:
    match = _SIGNATURE_TYPES_PATTERN.search(raw)
    parts = [part.strip() for part in match.group(1).split(",")] if match else []
    if len(parts) < 2:
        return DriverError(
            message=decoded,
            error_code=ErrorCode.UNSUPPORTED_FILTER_TYPE,
            cause=cause,
        )
    return invalid_filter_value_error(
        expected=parts[0],
        actual=parts[1],
        cause=cause,
    )


def translate_warehouse_error(exc: BaseException) -> DriverError:
    """Translate a failure raised by a warehouse collaborator.

    ``DriverError`` instances pass through unchanged. Anything else is
    classified and mapped by status code and message content; the
    user-facing text is always the decoded warehouse message.

    Args:
        exc: Exception raised by the warehouse client or schema reflection

    Returns:
        DriverError carrying the matching ErrorCode, with ``exc`` as cause
    """
    if isinstance(exc, DriverError):
        return exc

    classification = classify_exception(exc)
    status_code = classification.status_code
    decoded = classification.decoded_message
    raw = getattr(exc, "message", None)
    raw = raw if isinstance(raw, str) else str(exc)
    cause = exc if isinstance(exc, Exception) else None
    details = {"status_code": status_code}

    if classification.retryable:
        return transient_backend_error(decoded, details=details, cause=cause)

    if status_code == _BAD_REQUEST:
        if NO_MATCHING_SIGNATURE in raw:
            return _invalid_filter_value(raw, decoded, cause)

        name_match = _NAME_NOT_FOUND_PATTERN.search(raw)
        if name_match is not None:
            return column_not_found_error(
                name_match.group(1).strip(),
                message=decoded,
                cause=cause,
            )

        if "Invalid" in raw or PARTITION_ELIMINATION in raw:
            return validation_error(decoded, details=details, cause=cause)

        if ERROR_WHILE_READING_TABLE in raw:
            return validation_error(direct_error_message(raw), details=details, cause=cause)

    if status_code == 404:
        return not_found_error(decoded, details=details, cause=cause)
    if status_code == 403:
        return permission_denied_error(decoded, details=details, cause=cause)
    if status_code == 409:
        return already_exists_error(decoded, details=details, cause=cause)

    return unknown_error(decoded, details=details, cause=cause)
