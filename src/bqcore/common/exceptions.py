from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for driver core operations.

    One enumerated code per error condition replaces a hierarchy of
    exception subclasses. Each category has its own prefix for easy
    identification.

    Attributes:
        VALIDATION_*: Malformed request input, raised before any network call
        RESOURCE_*: Missing or conflicting warehouse objects
        ACCESS_*: Insufficient permissions
        RETRY_*: Transient warehouse conditions
        UNKNOWN_*: Anything the taxonomy does not recognize
    """
    # Validation errors
    VALIDATION_ERROR = "VALIDATION_001"
    COLUMN_NOT_FOUND = "VALIDATION_002"
    UNSUPPORTED_FILTER_TYPE = "VALIDATION_003"

    # Resource errors
    NOT_FOUND = "RESOURCE_001"
    ALREADY_EXISTS = "RESOURCE_002"

    # Access errors
    PERMISSION_DENIED = "ACCESS_001"

    # Retry/Transient errors
    TRANSIENT_BACKEND = "RETRY_001"

    # Unclassified errors
    UNKNOWN = "UNKNOWN_001"

    @property
    def is_validation(self) -> bool:
        """Whether the code belongs to the validation family."""
        return self.value.startswith("VALIDATION_")


class DriverError(Exception):
    """Base exception for all driver core errors.

    A single exception class categorized by :class:`ErrorCode`. Messages are
    always user-facing text: compiler errors are written by the compiler
    itself and warehouse errors arrive pre-decoded.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
        is_retryable: Whether the error is transient and can be retried
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        is_retryable: bool = False
    ):
        """Initialize driver error.

        Args:
            message: Error message
            error_code: Error code from ErrorCode enum
            details: Additional error details
            cause: Optional underlying exception
            is_retryable: Whether error is transient
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.is_retryable = is_retryable

        # Lazy import to avoid circular dependency
        from bqcore.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": error_code.value,
                "details": self.details,
                "is_retryable": is_retryable,
            },
            exc_info=cause is not None
        )

    def __str__(self) -> str:
        """String representation of the error."""
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    @property
    def is_validation(self) -> bool:
        """Whether the error was raised for malformed request input."""
        return self.error_code.is_validation

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
            "is_retryable": self.is_retryable
        }

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        message: str,
        **kwargs
    ) -> "DriverError":
        """Create exception from error code.

        Args:
            error_code: Error code
            message: Error message
            **kwargs: Additional arguments for DriverError

        Returns:
            DriverError instance
        """
        if error_code == ErrorCode.TRANSIENT_BACKEND:
            # Only set is_retryable if not explicitly provided by caller
            kwargs.setdefault('is_retryable', True)

        return cls(message=message, error_code=error_code, **kwargs)


class WarehouseError(Exception):
    """Failure reported by the warehouse client.

    Carries the HTTP status code and the raw message body exactly as the
    warehouse returned it. The body may be plain text or a JSON error
    envelope; use :func:`bqcore.common.messages.decode_message` to obtain
    readable text.
    """

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __repr__(self) -> str:
        return f"WarehouseError(status_code={self.status_code!r}, message={self.message!r})"


# Helper functions for common error scenarios
def validation_error(
    message: str,
    field: Optional[str] = None,
    value: Any = None,
    **kwargs
) -> DriverError:
    """Create a validation error.

    Args:
        message: Error message
        field: Field that failed validation
        value: Invalid value
        **kwargs: Additional error details

    Returns:
        DriverError with VALIDATION_ERROR code
    """
    details = kwargs.get('details', {})
    if field:
        details["field"] = field
    if value is not None:
        details["value"] = str(value)

    return DriverError(
        message=message,
        error_code=ErrorCode.VALIDATION_ERROR,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def column_not_found_error(column: str, **kwargs) -> DriverError:
    """Create an error for a column missing from the table definition.

    Args:
        column: Name of the missing column
        **kwargs: Additional arguments for DriverError

    Returns:
        DriverError with COLUMN_NOT_FOUND code
    """
    message = kwargs.pop('message', None) or f'Column "{column}" not found in table definition.'
    return DriverError(
        message=message,
        error_code=ErrorCode.COLUMN_NOT_FOUND,
        details={"column": column},
        **kwargs
    )


def unsupported_filter_type_error(
    column: str,
    column_type: str,
    operator: Optional[str] = None,
    **kwargs
) -> DriverError:
    """Create an error for a filter the column's type cannot satisfy.

    Args:
        column: Filtered column
        column_type: Declared type of the column
        operator: Operator that is not allowed, when the type itself is
            filterable but the operator is not

    Returns:
        DriverError with UNSUPPORTED_FILTER_TYPE code
    """
    if operator is None:
        message = (
            f'Filtering by column "{column}" of type "{column_type}" '
            f'is not supported by the backend "bigquery".'
        )
    else:
        message = (
            f'Operator "{operator}" is not supported for column "{column}" '
            f'of type "{column_type}".'
        )
    details = {"column": column, "actual": column_type}
    if operator is not None:
        details["operator"] = operator

    return DriverError(
        message=message,
        error_code=ErrorCode.UNSUPPORTED_FILTER_TYPE,
        details=details,
        **kwargs
    )


def invalid_filter_value_error(
    expected: str,
    actual: str,
    column: Optional[str] = None,
    **kwargs
) -> DriverError:
    """Create an error for a filter value of the wrong type.

    Args:
        expected: Type the comparison requires
        actual: Type of the value that was supplied
        column: Filtered column, when known

    Returns:
        DriverError with UNSUPPORTED_FILTER_TYPE code
    """
    details: Dict[str, Any] = {"expected": expected, "actual": actual}
    if column is not None:
        details["column"] = column

    return DriverError(
        message=f'Invalid filter value, expected:"{expected}", actual:"{actual}".',
        error_code=ErrorCode.UNSUPPORTED_FILTER_TYPE,
        details=details,
        **kwargs
    )


def not_found_error(message: str, **kwargs) -> DriverError:
    """Create an error for a warehouse object that does not exist."""
    return DriverError(message=message, error_code=ErrorCode.NOT_FOUND, **kwargs)


def permission_denied_error(message: str, **kwargs) -> DriverError:
    """Create an error for a call the principal is not allowed to make."""
    return DriverError(message=message, error_code=ErrorCode.PERMISSION_DENIED, **kwargs)


def already_exists_error(message: str, **kwargs) -> DriverError:
    """Create an error for a warehouse object that already exists."""
    return DriverError(message=message, error_code=ErrorCode.ALREADY_EXISTS, **kwargs)


def transient_backend_error(
    message: str,
    attempts: Optional[int] = None,
    **kwargs
) -> DriverError:
    """Create a transient backend error.

    Args:
        message: Decoded warehouse message
        attempts: Number of attempts made before giving up, if known

    Returns:
        DriverError with TRANSIENT_BACKEND code and is_retryable=True
    """
    details = kwargs.pop('details', {})
    if attempts is not None:
        details["attempts"] = attempts

    return DriverError(
        message=message,
        error_code=ErrorCode.TRANSIENT_BACKEND,
        details=details,
        is_retryable=True,
        **kwargs
    )


def unknown_error(message: str, **kwargs) -> DriverError:
    """Create an error the taxonomy could not classify."""
    return DriverError(message=message, error_code=ErrorCode.UNKNOWN, **kwargs)
