"""Retry decision for failed warehouse calls.

The decision is a pure function of the HTTP status code and the raw error
body. It never raises; the backoff loop itself lives in
:func:`bqcore.utils.decorators.retry_with_backoff`.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from bqcore.common.exceptions import DriverError, WarehouseError
from bqcore.common.messages import (
    ObjectMessage,
    PlainTextMessage,
    StructuredMessage,
    decode_message,
    parse_message,
    render_message,
)
from bqcore.constants.errors import (
    RETRY_MISSING_CREATE_JOB,
    RETRY_SERVICE_ACCOUNT_NOT_EXIST,
    RETRYABLE_REASONS,
    RETRYABLE_STATUS_CODES,
    TIMEOUT_STATUS_CODE,
)
from bqcore.logging import get_logger

__all__ = [
    "ErrorClassification",
    "should_retry",
    "classify",
    "classify_exception",
    "is_retryable_exception",
]

logger = get_logger(__name__)


@dataclass(frozen=True)
class ErrorClassification:
    """Outcome of classifying one warehouse failure."""

    status_code: int
    retryable: bool
    decoded_message: str


def _has_retryable_reason(message: StructuredMessage) -> bool:
    if isinstance(message, PlainTextMessage):
        return False

    error = message.payload.get("error")
    if not isinstance(error, dict):
        return False
    errors = error.get("errors")
    if not isinstance(errors, list):
        return False

    return any(
        isinstance(item, dict) and item.get("reason") in RETRYABLE_REASONS
        for item in errors
    )


def _decide(status_code: int, raw_message: str, message: StructuredMessage) -> bool:
    if status_code in RETRYABLE_STATUS_CODES:
        return True
    if 200 <= status_code < 300:
        return False
    if RETRY_SERVICE_ACCOUNT_NOT_EXIST in raw_message:
        return True
    if RETRY_MISSING_CREATE_JOB in raw_message:
        return True
    if not isinstance(message, ObjectMessage):
        return False
    return _has_retryable_reason(message)


def should_retry(status_code: int, raw_message: str) -> bool:
    """Decide whether a failed warehouse call is worth another attempt.

    Rules, first match wins:

    1. status 429, 500, 503 or 401: retry
    2. any 2xx status: no retry
    3. IAM policy of a new dataset not yet visible: retry
    4. new principal not yet allowed to create jobs: retry
    5. body is not a JSON object, or carries no ``error.errors`` array: no retry
    6. any ``error.errors[].reason`` is a rate-limit or backend reason: retry

    Every call logs exactly one INFO line with the decision.
    """
    raw_message = raw_message if isinstance(raw_message, str) else str(raw_message)
    message = parse_message(raw_message)
    retry = _decide(status_code, raw_message, message)

    prefix = "Retrying" if retry else "Not retrying"
    logger.info(
        "%s [%s] request with exception::%s",
        prefix,
        status_code,
        render_message(message),
        extra={"status_code": status_code, "retry": retry},
    )
    return retry


def classify(status_code: int, raw_message: str) -> ErrorClassification:
    """Combine the retry decision with the decoded user-facing message."""
    return ErrorClassification(
        status_code=status_code,
        retryable=should_retry(status_code, raw_message),
        decoded_message=decode_message(raw_message),
    )


def _status_and_body(exc: BaseException) -> Tuple[int, str]:
    if isinstance(exc, WarehouseError):
        return exc.status_code, exc.message

    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return TIMEOUT_STATUS_CODE, str(exc)

    status: Optional[Any] = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(exc, "code", None)
    try:
        status_code = int(status) if status is not None else 0
    except (TypeError, ValueError):
        status_code = 0

    body = getattr(exc, "message", None)
    if body is None:
        body = getattr(exc, "response", None)
    if body is None:
        body = str(exc)
    return status_code, body if isinstance(body, str) else str(body)


def classify_exception(exc: BaseException) -> ErrorClassification:
    """Classify an arbitrary exception raised by a warehouse collaborator.

    ``WarehouseError`` is read directly. Other exceptions are probed for
    ``status_code``/``code`` and ``message``/``response`` attributes. A
    caller-side timeout counts as a 503.
    """
    status_code, body = _status_and_body(exc)
    return classify(status_code, body)


def is_retryable_exception(exc: BaseException) -> bool:
    """Retry condition for :func:`retry_with_backoff`.

    Validation errors are never retried: they were raised before any call
    reached the warehouse and would fail identically again.
    """
    if isinstance(exc, DriverError):
        if exc.is_validation:
            return False
        return exc.is_retryable
    return classify_exception(exc).retryable
