"""Unit tests for the warehouse retry decision."""

import json
import logging

import pytest

from bqcore.common.exceptions import DriverError, ErrorCode, WarehouseError, validation_error
from bqcore.common.retry import (
    classify,
    classify_exception,
    is_retryable_exception,
    should_retry,
)


def _reason_body(*reasons):
    return json.dumps({
        "error": {
            "code": 400,
            "message": "failed",
            "errors": [{"reason": reason, "message": f"{reason} happened"} for reason in reasons],
        }
    })


class TestShouldRetry:
    """Rule table of should_retry."""

    @pytest.mark.parametrize("status", [429, 500, 503, 401])
    def test_retryable_status_codes(self, status):
        assert should_retry(status, "") is True

    @pytest.mark.parametrize("status", [200, 204, 299])
    def test_success_codes_are_not_retried(self, status):
        assert should_retry(status, "") is False

    def test_success_code_wins_over_retryable_reason(self):
        assert should_retry(200, _reason_body("rateLimitExceeded")) is False

    def test_iam_policy_propagation_is_retried(self):
        assert should_retry(400, "IAM setPolicy failed for Dataset ds: not found") is True

    def test_missing_job_create_permission_is_retried(self):
        assert should_retry(403, "Access Denied: bigquery.jobs.create permission") is True

    def test_plain_text_is_not_retried(self):
        assert should_retry(400, "Syntax error") is False

    @pytest.mark.parametrize("reason", [
        "rateLimitExceeded",
        "userRateLimitExceeded",
        "backendError",
        "jobRateLimitExceeded",
    ])
    def test_retryable_reasons(self, reason):
        assert should_retry(400, _reason_body("invalidQuery", reason)) is True

    def test_other_reasons_are_not_retried(self):
        assert should_retry(400, _reason_body("invalidQuery")) is False

    @pytest.mark.parametrize("body", [
        '{"error":{"message":"no errors"}}',
        '{"error":{"errors":"not a list"}}',
        '{"error":"string"}',
        '["array"]',
    ])
    def test_missing_errors_array_is_not_retried(self, body):
        assert should_retry(400, body) is False

    def test_logs_one_info_line_per_decision(self, caplog):
        caplog.set_level(logging.INFO, logger="bqcore.common.retry")

        should_retry(429, "slow down")
        should_retry(400, '{"error": {"errors": []}}')

        records = [r for r in caplog.records if r.name == "bqcore.common.retry"]
        assert [r.levelno for r in records] == [logging.INFO, logging.INFO]
        assert records[0].getMessage() == "Retrying [429] request with exception::slow down"
        assert records[1].getMessage() == 'Not retrying [400] request with exception::{"error":{"errors":[]}}'
        assert records[0].status_code == 429
        assert records[1].retry is False


class TestClassify:
    def test_classification_carries_decoded_message(self):
        result = classify(400, _reason_body("rateLimitExceeded"))

        assert result.retryable is True
        assert result.status_code == 400
        assert result.decoded_message == "rateLimitExceeded happened"

    def test_warehouse_error(self):
        result = classify_exception(WarehouseError(503, "unavailable"))
        assert result.retryable is True
        assert result.decoded_message == "unavailable"

    def test_timeout_counts_as_service_unavailable(self):
        result = classify_exception(TimeoutError("timed out"))
        assert result.status_code == 503
        assert result.retryable is True

    def test_foreign_exception_with_code_attribute(self):
        class ClientError(Exception):
            def __init__(self, code, message):
                super().__init__(message)
                self.code = code
                self.message = message

        result = classify_exception(ClientError(404, '{"error":"Not found: Table"}'))

        assert result.status_code == 404
        assert result.retryable is False
        assert result.decoded_message == "Not found: Table"

    def test_plain_exception(self):
        result = classify_exception(ValueError("boom"))
        assert result.status_code == 0
        assert result.retryable is False


class TestIsRetryableException:
    def test_validation_errors_are_never_retried(self):
        error = validation_error("bad input")
        error.is_retryable = True
        assert is_retryable_exception(error) is False

    def test_driver_error_uses_its_flag(self):
        error = DriverError("later", error_code=ErrorCode.TRANSIENT_BACKEND, is_retryable=True)
        assert is_retryable_exception(error) is True

    def test_warehouse_error_is_classified(self):
        assert is_retryable_exception(WarehouseError(500, "")) is True
        assert is_retryable_exception(WarehouseError(400, "Syntax error")) is False
