"""Unit tests for the driver error taxonomy and warehouse error translation."""

import json

import pytest

from bqcore.common.exceptions import (
    DriverError,
    ErrorCode,
    WarehouseError,
    column_not_found_error,
    invalid_filter_value_error,
    transient_backend_error,
    unsupported_filter_type_error,
    validation_error,
)
from bqcore.common.translation import translate_warehouse_error


def _envelope(message, reason="invalidQuery", code=400):
    return json.dumps({
        "error": {
            "code": code,
            "message": message,
            "errors": [{"message": message, "reason": reason}],
        }
    })


class TestDriverError:
    """DriverError behaviour and helper constructors."""

    def test_str_includes_code_and_cause(self):
        cause = ValueError("inner")
        error = DriverError("outer", error_code=ErrorCode.UNKNOWN, cause=cause)

        assert str(error) == "[UNKNOWN_001] outer (caused by: ValueError: inner)"

    def test_to_dict(self):
        error = validation_error("bad", field="limit", value=1001)

        assert error.to_dict() == {
            "type": "DriverError",
            "message": "bad",
            "error_code": "VALIDATION_001",
            "error_name": "VALIDATION_ERROR",
            "details": {"field": "limit", "value": "1001"},
            "is_retryable": False,
        }

    def test_from_error_code_marks_transient_as_retryable(self):
        error = DriverError.from_error_code(ErrorCode.TRANSIENT_BACKEND, "later")
        assert error.is_retryable is True

    def test_validation_family(self):
        assert column_not_found_error("c").is_validation
        assert unsupported_filter_type_error("c", "ARRAY").is_validation
        assert not transient_backend_error("later").is_validation

    def test_helper_messages(self):
        assert column_not_found_error("c").message == 'Column "c" not found in table definition.'
        assert invalid_filter_value_error("INT64", "STRING").message == (
            'Invalid filter value, expected:"INT64", actual:"STRING".'
        )

    def test_transient_error_records_attempts(self):
        error = transient_backend_error("later", attempts=3)
        assert error.details == {"attempts": 3}
        assert error.is_retryable

    def test_logs_on_construction(self, caplog):
        caplog.set_level("ERROR", logger="bqcore.common.exceptions")

        validation_error("logged once")

        records = [r for r in caplog.records if r.name == "bqcore.common.exceptions"]
        assert len(records) == 1
        assert records[0].error_code == "VALIDATION_001"


class TestTranslateWarehouseError:
    """Mapping of warehouse failures into error codes."""

    def test_driver_error_passes_through(self):
        error = validation_error("x")
        assert translate_warehouse_error(error) is error

    def test_retryable_failure(self):
        error = translate_warehouse_error(WarehouseError(429, _envelope("Quota", reason="rateLimitExceeded")))

        assert error.error_code == ErrorCode.TRANSIENT_BACKEND
        assert error.is_retryable
        assert error.message == "Quota"

    def test_no_matching_signature(self):
        message = (
            "No matching signature for operator = for argument types: INT64, STRING. "
            "Supported signature: ANY = ANY at [1:50]"
        )

        error = translate_warehouse_error(WarehouseError(400, _envelope(message)))

        assert error.error_code == ErrorCode.UNSUPPORTED_FILTER_TYPE
        assert error.message == 'Invalid filter value, expected:"INT64", actual:"STRING".'

    def test_name_not_found(self):
        message = "Name non-exist not found inside t at [1:8]"

        error = translate_warehouse_error(WarehouseError(400, _envelope(message)))

        assert error.error_code == ErrorCode.COLUMN_NOT_FOUND
        assert error.message == message
        assert error.details["column"] == "non-exist"

    @pytest.mark.parametrize("message", [
        "Invalid timestamp: 'abc'",
        "Cannot query over table 'd.t' without a filter over column(s) 'id' "
        "that can be used for partition elimination",
    ])
    def test_validation_failures(self, message):
        error = translate_warehouse_error(WarehouseError(400, _envelope(message)))

        assert error.error_code == ErrorCode.VALIDATION_ERROR
        assert error.message == message

    def test_error_while_reading_table(self):
        message = "Error while reading table: p.d.t, error message: Incompatible partition schemas."

        error = translate_warehouse_error(WarehouseError(400, _envelope(message)))

        assert error.error_code == ErrorCode.VALIDATION_ERROR
        assert error.message == "Incompatible partition schemas."

    @pytest.mark.parametrize("status,code", [
        (404, ErrorCode.NOT_FOUND),
        (403, ErrorCode.PERMISSION_DENIED),
        (409, ErrorCode.ALREADY_EXISTS),
        (418, ErrorCode.UNKNOWN),
    ])
    def test_status_mapping(self, status, code):
        error = translate_warehouse_error(WarehouseError(status, '{"error":"nope"}'))

        assert error.error_code == code
        assert error.message == "nope"
        assert error.details["status_code"] == status

    def test_cause_is_kept(self):
        original = WarehouseError(404, "Not found")
        assert translate_warehouse_error(original).cause is original
