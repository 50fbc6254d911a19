

import asyncio
import functools
import random
import time
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Tuple, Type, TypeVar

from opentelemetry.trace import SpanKind, Status, StatusCode

from bqcore.telemetry import get_tracer

if TYPE_CHECKING:
    from bqcore.settings.retry import RetrySettings


F = TypeVar('F', bound=Callable[..., Any])
T = TypeVar('T')

logger = None


def _get_logger():
    """Get logger instance lazily."""
    global logger
    if logger is None:
        from bqcore.logging import get_logger
        logger = get_logger(__name__)
    return logger


def traced(
    span_name: Optional[str] = None,
    *,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: Optional[Dict[str, Any]] = None,
    attribute_getter: Optional[Callable[..., Optional[Dict[str, Any]]]] = None,
) -> Callable[[F], F]:
    """Instrument a function with an OpenTelemetry span.

    Args:
        span_name: Optional explicit span name. Defaults to module-qualified function name.
        kind: Span kind, defaults to INTERNAL.
        attributes: Static span attributes to attach.
        attribute_getter: Callable returning additional attributes at call time.
    """

    def decorator(func: F) -> F:
        is_coroutine = asyncio.iscoroutinefunction(func)

        def _collect_attributes(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Dict[str, Any]:
            collected: Dict[str, Any] = {}
            if attributes:
                collected.update({k: v for k, v in attributes.items() if v is not None})

            if attribute_getter:
                try:
                    dynamic_attrs = attribute_getter(*args, **kwargs)
                except Exception as exc:  # pragma: no cover
                    _get_logger().warning("trace attribute getter failed: %s", exc)
                    dynamic_attrs = None

                if dynamic_attrs:
                    collected.update({k: v for k, v in dynamic_attrs.items() if v is not None})

            return collected

        if is_coroutine:

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                tracer = get_tracer(func.__module__)
                name = span_name or f"{func.__module__}.{func.__qualname__}"

                with tracer.start_as_current_span(name, kind=kind) as span:
                    for key, value in _collect_attributes(args, kwargs).items():
                        span.set_attribute(key, value)

                    try:
                        result = await func(*args, **kwargs)
                    except Exception as exc:
                        span.record_exception(exc)
                        span.set_status(Status(StatusCode.ERROR, str(exc)))
                        raise

                    return result

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            tracer = get_tracer(func.__module__)
            name = span_name or f"{func.__module__}.{func.__qualname__}"

            with tracer.start_as_current_span(name, kind=kind) as span:
                for key, value in _collect_attributes(args, kwargs).items():
                    span.set_attribute(key, value)

                try:
                    return func(*args, **kwargs)
                except Exception as exc:
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, str(exc)))
                    raise

        return sync_wrapper  # type: ignore[return-value]

    return decorator


def retry_with_backoff(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    retry_on: Optional[Tuple[Type[Exception], ...]] = None,
    retry_condition: Optional[Callable[[Exception], bool]] = None,
    jitter: bool = False,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for retrying operations with exponential backoff.

    This decorator automatically retries failed operations with an exponentially
    increasing delay between attempts. It works with both synchronous and
    asynchronous functions. The delay between retries follows the formula:
    delay = min(initial_delay * (exponential_base ** attempt), max_delay)

    Args:
        max_retries: Maximum number of retry attempts. Default is 3.
        initial_delay: Initial delay in seconds between retries. Default is 1.0.
        max_delay: Maximum delay in seconds (caps exponential growth). Default is 60.0.
        exponential_base: Base for exponential backoff calculation. Default is 2.0.
        retry_on: Tuple of exception types to retry on. If None, retries on all
            exceptions.
        retry_condition: Optional function that takes an exception and returns True
            if the operation should be retried. Use
            :func:`bqcore.common.retry.is_retryable_exception` for warehouse calls.
        jitter: Sleep a random duration between half and the full computed delay.

    Returns:
        Decorator function that can be applied to both sync and async functions.

    Raises:
        The last exception encountered if all retry attempts fail.

    Example:
        >>> @retry_with_backoff(
        ...     max_retries=5,
        ...     retry_condition=is_retryable_exception,
        ... )
        >>> def fetch_columns():
        ...     return reflection.columns("dataset", "table")

    Notes:
        - Retry attempts are logged at WARNING level
        - Final failure is logged at ERROR level
        - Total attempts = max_retries + 1 (initial attempt + retries)
    """
    def _should_retry(exc: Exception) -> bool:
        if retry_on is not None and not isinstance(exc, retry_on):
            return False
        if retry_condition is not None:
            return retry_condition(exc)
        return True

    def _sleep_for(delay: float) -> float:
        if jitter:
            return random.uniform(delay / 2, delay)
        return delay

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = getattr(func, "__name__", repr(func))

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> T:
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not _should_retry(e) or attempt == max_retries:
                        if attempt == max_retries:
                            _get_logger().error(
                                f"All {max_retries + 1} attempts failed for {name}"
                            )
                        raise

                    pause = _sleep_for(delay)
                    _get_logger().warning(
                        f"Attempt {attempt + 1} failed for {name}: {e}. "
                        f"Retrying in {pause:.2f} seconds..."
                    )
                    await asyncio.sleep(pause)
                    delay = min(delay * exponential_base, max_delay)

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs) -> T:
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not _should_retry(e) or attempt == max_retries:
                        if attempt == max_retries:
                            _get_logger().error(
                                f"All {max_retries + 1} attempts failed for {name}"
                            )
                        raise

                    pause = _sleep_for(delay)
                    _get_logger().warning(
                        f"Attempt {attempt + 1} failed for {name}: {e}. "
                        f"Retrying in {pause:.2f} seconds..."
                    )
                    time.sleep(pause)
                    delay = min(delay * exponential_base, max_delay)

        # Return appropriate wrapper based on function type
        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        else:
            return sync_wrapper

    return decorator


def retry_warehouse_call(
    settings: Optional["RetrySettings"] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Backoff decorator configured for warehouse collaborator calls.

    Retries only what :func:`bqcore.common.retry.is_retryable_exception`
    accepts, with the policy from ``settings`` (or the global settings).
    """
    from bqcore.common.retry import is_retryable_exception

    if settings is None:
        from bqcore.settings import get_settings
        settings = get_settings().retry

    return retry_with_backoff(
        max_retries=settings.max_retries,
        initial_delay=settings.initial_delay,
        max_delay=settings.max_delay,
        exponential_base=settings.exponential_base,
        retry_condition=is_retryable_exception,
        jitter=settings.jitter,
    )

