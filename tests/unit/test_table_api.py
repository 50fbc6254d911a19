"""Unit tests for the table preview/export request path."""

from unittest.mock import Mock, patch

import pytest

from bqcore.api import ExportTableRequest, PreviewTableRequest, build_export_query, preview_table
from bqcore.common.exceptions import DriverError, ErrorCode, WarehouseError
from bqcore.logging.filters import run_id_var
from bqcore.protocols import SchemaReflection, WarehouseClient
from bqcore.settings.main import _Settings
from bqcore.settings.query import QuerySettings
from bqcore.settings.retry import RetrySettings
from bqcore.types import ColumnDefinition, FilterCondition, FilterSpec, OrderBy


class FakeResult:
    def __init__(self, rows, schema=()):
        self._rows = rows
        self.schema = schema

    def __iter__(self):
        return iter(self._rows)


@pytest.fixture
def settings():
    return _Settings(
        query=QuerySettings(preview_truncate_length=5),
        retry=RetrySettings(max_retries=2, initial_delay=0.0, jitter=False),
    )


@pytest.fixture
def reflection():
    reflection = Mock(spec=SchemaReflection)
    reflection.columns.return_value = [
        ColumnDefinition(name="id", type="INT64"),
        ColumnDefinition(name="name", type="STRING"),
    ]
    return reflection


@pytest.fixture
def client():
    client = Mock(spec=WarehouseClient)
    client.run_query.return_value = FakeResult([
        {"id": 1, "name": "abcdefgh"},
        {"id": 2, "name": None},
    ])
    return client


class TestPreviewTable:
    """preview_table end to end against fake collaborators."""

    def test_preview_returns_materialized_rows(self, client, reflection, settings):
        request = PreviewTableRequest(
            dataset_name="ds",
            table_name="t",
            columns=["name", "id"],
            filters=FilterSpec(conditions=[FilterCondition(column="id", values=["1", "2"])]),
            order_by=[OrderBy(column="id")],
        )

        response = preview_table(client, reflection, request, settings=settings)

        reflection.columns.assert_called_once_with("ds", "t")
        client.run_query.assert_called_once_with(
            "SELECT `t`.`name`, `t`.`id` FROM `ds`.`t` WHERE `t`.`id` IN (?, ?) "
            "ORDER BY `t`.`id` ASC LIMIT 100",
            (1, 2),
            ("INT64", "INT64"),
        )
        assert response.columns == ("name", "id")
        first, second = response.rows
        assert first.get("name").value == "abcde"
        assert first.get("name").truncated is True
        assert first.get("id").value == "1"
        assert second.get("name").is_null

    def test_transient_failures_are_retried(self, client, reflection, settings):
        client.run_query.side_effect = [WarehouseError(503, "busy"), FakeResult([{"id": 3}])]
        request = PreviewTableRequest(dataset_name="ds", table_name="t", columns=["id"])

        with patch("bqcore.utils.decorators.time.sleep"):
            response = preview_table(client, reflection, request, settings=settings)

        assert client.run_query.call_count == 2
        assert response.rows[0].get("id").value == "3"

    def test_exhausted_retries_raise_transient_error(self, client, reflection, settings):
        client.run_query.side_effect = WarehouseError(500, '{"error":"backend down"}')
        request = PreviewTableRequest(dataset_name="ds", table_name="t", columns=["id"])

        with patch("bqcore.utils.decorators.time.sleep"):
            with pytest.raises(DriverError) as exc_info:
                preview_table(client, reflection, request, settings=settings)

        assert client.run_query.call_count == 3
        assert exc_info.value.error_code == ErrorCode.TRANSIENT_BACKEND
        assert exc_info.value.message == "backend down"

    def test_backend_filter_error_is_translated(self, client, reflection, settings):
        client.run_query.side_effect = WarehouseError(
            400, "No matching signature for operator = for argument types: INT64, STRING. x"
        )
        request = PreviewTableRequest(dataset_name="ds", table_name="t", columns=["id"])

        with pytest.raises(DriverError) as exc_info:
            preview_table(client, reflection, request, settings=settings)

        assert client.run_query.call_count == 1
        assert exc_info.value.error_code == ErrorCode.UNSUPPORTED_FILTER_TYPE

    def test_validation_error_skips_query(self, client, reflection, settings):
        request = PreviewTableRequest(dataset_name="ds", table_name="t", columns=["missing"])

        with pytest.raises(DriverError) as exc_info:
            preview_table(client, reflection, request, settings=settings)

        assert exc_info.value.error_code == ErrorCode.COLUMN_NOT_FOUND
        client.run_query.assert_not_called()

    def test_missing_table_is_not_found(self, client, reflection, settings):
        reflection.columns.side_effect = WarehouseError(404, '{"error":"Not found: Table p:ds.t"}')
        request = PreviewTableRequest(dataset_name="ds", table_name="t", columns=["id"])

        with pytest.raises(DriverError) as exc_info:
            preview_table(client, reflection, request, settings=settings)

        assert exc_info.value.error_code == ErrorCode.NOT_FOUND
        assert exc_info.value.message == "Not found: Table p:ds.t"

    def test_run_id_is_scoped_to_the_request(self, client, reflection, settings):
        seen = []

        def run_query(sql, bindings, types):
            seen.append(run_id_var.get())
            return FakeResult([])

        client.run_query.side_effect = run_query
        request = PreviewTableRequest(dataset_name="ds", table_name="t", columns=["id"])

        preview_table(client, reflection, request, ctx="run-42", settings=settings)

        assert seen == ["run-42"]
        assert run_id_var.get() is None


class TestBuildExportQuery:
    def test_select_mode_lists_all_columns(self, reflection, settings):
        request = ExportTableRequest(dataset_name="ds", table_name="t", filters=FilterSpec(limit=10))

        compiled = build_export_query(reflection, request, settings=settings)

        assert compiled.sql == "SELECT `t`.`id`, `t`.`name` FROM `ds`.`t` LIMIT 10"
        assert compiled.columns == ("id", "name")

    def test_reflection_may_return_plain_mappings(self, settings):
        reflection = Mock(spec=SchemaReflection)
        reflection.columns.return_value = [{"name": "x", "type": "NUMERIC(10,2)"}]

        compiled = build_export_query(
            reflection, ExportTableRequest(dataset_name="ds", table_name="t"), settings=settings
        )

        assert compiled.columns == ("x",)
