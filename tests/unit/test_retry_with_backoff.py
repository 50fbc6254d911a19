"""Unit tests for the backoff decorators."""

import asyncio
from unittest.mock import Mock, patch

import pytest

from bqcore.common.exceptions import WarehouseError, validation_error
from bqcore.common.retry import is_retryable_exception
from bqcore.settings.retry import RetrySettings
from bqcore.utils.decorators import retry_warehouse_call, retry_with_backoff


class TestRetryWithBackoff:
    """Synchronous and asynchronous retry loops."""

    @patch("bqcore.utils.decorators.time.sleep")
    def test_retries_until_success(self, mock_sleep):
        func = Mock(side_effect=[WarehouseError(503, ""), WarehouseError(429, ""), "ok"])
        func.__name__ = "func"

        wrapped = retry_with_backoff(max_retries=3, initial_delay=1.0, retry_condition=is_retryable_exception)(func)

        assert wrapped() == "ok"
        assert func.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0]

    @patch("bqcore.utils.decorators.time.sleep")
    def test_non_retryable_error_is_raised_immediately(self, mock_sleep):
        func = Mock(side_effect=validation_error("bad"))
        func.__name__ = "func"

        wrapped = retry_with_backoff(max_retries=5, retry_condition=is_retryable_exception)(func)

        with pytest.raises(Exception, match="bad"):
            wrapped()
        assert func.call_count == 1
        mock_sleep.assert_not_called()

    @patch("bqcore.utils.decorators.time.sleep")
    def test_last_exception_raised_after_max_retries(self, mock_sleep):
        func = Mock(side_effect=WarehouseError(500, "down"))
        func.__name__ = "func"

        wrapped = retry_with_backoff(max_retries=2, initial_delay=1.0, max_delay=1.5)(func)

        with pytest.raises(WarehouseError):
            wrapped()
        assert func.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 1.5]

    @patch("bqcore.utils.decorators.time.sleep")
    def test_retry_on_limits_exception_types(self, mock_sleep):
        func = Mock(side_effect=KeyError("k"))
        func.__name__ = "func"

        wrapped = retry_with_backoff(max_retries=3, retry_on=(WarehouseError,))(func)

        with pytest.raises(KeyError):
            wrapped()
        assert func.call_count == 1

    @patch("bqcore.utils.decorators.random.uniform", return_value=0.7)
    @patch("bqcore.utils.decorators.time.sleep")
    def test_jitter_randomizes_delay(self, mock_sleep, mock_uniform):
        func = Mock(side_effect=[TimeoutError(), "ok"])
        func.__name__ = "func"

        wrapped = retry_with_backoff(max_retries=1, initial_delay=1.0, jitter=True)(func)

        assert wrapped() == "ok"
        mock_uniform.assert_called_once_with(0.5, 1.0)
        mock_sleep.assert_called_once_with(0.7)

    def test_async_function(self):
        attempts = []

        @retry_with_backoff(max_retries=2, initial_delay=0.0, retry_condition=is_retryable_exception)
        async def flaky():
            attempts.append(1)
            if len(attempts) < 2:
                raise WarehouseError(503, "")
            return "done"

        assert asyncio.run(flaky()) == "done"
        assert len(attempts) == 2


class TestRetryWarehouseCall:
    @patch("bqcore.utils.decorators.time.sleep")
    def test_uses_retry_settings(self, mock_sleep):
        settings = RetrySettings(max_retries=1, initial_delay=0.5, jitter=False)
        func = Mock(side_effect=WarehouseError(500, ""))
        func.__name__ = "func"

        with pytest.raises(WarehouseError):
            retry_warehouse_call(settings)(func)()

        assert func.call_count == 2
        mock_sleep.assert_called_once_with(0.5)

    @patch("bqcore.utils.decorators.time.sleep")
    def test_does_not_retry_client_errors(self, mock_sleep):
        func = Mock(side_effect=WarehouseError(400, "Syntax error"))
        func.__name__ = "func"

        with pytest.raises(WarehouseError):
            retry_warehouse_call(RetrySettings(max_retries=3))(func)()

        assert func.call_count == 1
