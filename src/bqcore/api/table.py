from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from pydantic import ConfigDict, Field

from bqcore.common.exceptions import DriverError
from bqcore.common.translation import translate_warehouse_error
from bqcore.constants.sql import QueryMode
from bqcore.logging import get_logger
from bqcore.observability.context import execution_request_scope, resolve_request_context
from bqcore.protocols.warehouse import SchemaReflection, WarehouseClient
from bqcore.query_builder.factory import get_query_builder
from bqcore.results.materializer import materialize_rows
from bqcore.settings import get_settings
from bqcore.settings.main import _Settings
from bqcore.types.base import DriverBaseModel
from bqcore.types.query import CompiledQuery, FilterSpec, OrderBy
from bqcore.types.result import MaterializedRow
from bqcore.types.schema import ColumnDefinition
from bqcore.utils.decorators import retry_warehouse_call

logger = get_logger(__name__)

T = TypeVar("T")


class TableRequest(DriverBaseModel):
    """Common fields of table preview and export requests."""
    model_config = ConfigDict(frozen=True)

    dataset_name: str
    table_name: str
    columns: Tuple[str, ...] = ()
    filters: Optional[FilterSpec] = None
    order_by: Tuple[OrderBy, ...] = ()


class PreviewTableRequest(TableRequest):
    """Request for a bounded, display-ready sample of a table."""


class ExportTableRequest(TableRequest):
    """Request for the query an exporter runs; empty ``columns`` means all."""


class PreviewTableResponse(DriverBaseModel):
    """Preview rows in the requested column order."""
    model_config = ConfigDict(frozen=True)

    columns: Tuple[str, ...]
    rows: Tuple[MaterializedRow, ...] = Field(default_factory=tuple)


def _call_warehouse(settings: _Settings, func: Callable[..., T], *args: Any) -> T:
    """Run a collaborator call with backoff and map failures to DriverError."""
    try:
        return retry_warehouse_call(settings.retry)(func)(*args)
    except DriverError:
        raise
    except Exception as exc:
        raise translate_warehouse_error(exc) from exc


def _fetch_schema(
    reflection: SchemaReflection,
    request: TableRequest,
    settings: _Settings,
) -> List[ColumnDefinition]:
    columns = _call_warehouse(
        settings, reflection.columns, request.dataset_name, request.table_name
    )
    return [
        column if isinstance(column, ColumnDefinition) else ColumnDefinition.model_validate(column)
        for column in columns
    ]


def _compile(
    mode: QueryMode,
    request: TableRequest,
    schema: Sequence[ColumnDefinition],
    settings: _Settings,
) -> CompiledQuery:
    return get_query_builder(settings.query).compile(
        mode,
        request.filters,
        request.order_by,
        request.columns,
        schema,
        request.dataset_name,
        request.table_name,
    )


def _scope_attributes(request: TableRequest) -> Dict[str, str]:
    return {"dataset": request.dataset_name, "table": request.table_name}


def preview_table(
    client: WarehouseClient,
    reflection: SchemaReflection,
    request: PreviewTableRequest,
    *,
    ctx: Optional[Any] = None,
    settings: Optional[_Settings] = None,
) -> PreviewTableResponse:
    """Preview a table.

    Fetches the schema, compiles a PREVIEW query, runs it and materializes
    the rows. Schema and query calls are retried with backoff.

    Args:
        client: Warehouse client executing the query
        reflection: Schema reflection for the table
        request: Preview request
        ctx: Optional request context (context object, run id or mapping)
        settings: Optional settings override

    Raises:
        DriverError: Validation errors from compilation, or the translated
            warehouse failure
    """
    settings = settings or get_settings()
    ctx = resolve_request_context(ctx)
    ctx.attributes.update(_scope_attributes(request))

    with execution_request_scope(ctx, operation="bqcore.preview_table"):
        schema = _fetch_schema(reflection, request, settings)
        compiled = _compile(QueryMode.PREVIEW, request, schema, settings)

        def run() -> List[Any]:
            return list(client.run_query(compiled.sql, compiled.bindings, compiled.types))

        raw_rows = _call_warehouse(settings, run)
        rows = tuple(
            materialize_rows(
                QueryMode.PREVIEW,
                raw_rows,
                compiled.columns,
                schema,
                settings.query.preview_truncate_length,
            )
        )
        logger.info(
            "Previewed %s.%s",
            request.dataset_name,
            request.table_name,
            extra={"row_count": len(rows)},
        )
        return PreviewTableResponse(columns=compiled.columns, rows=rows)


def build_export_query(
    reflection: SchemaReflection,
    request: ExportTableRequest,
    *,
    ctx: Optional[Any] = None,
    settings: Optional[_Settings] = None,
) -> CompiledQuery:
    """Compile the SELECT query a table export runs.

    Raises:
        DriverError: Validation errors from compilation, or the translated
            schema reflection failure
    """
    settings = settings or get_settings()
    ctx = resolve_request_context(ctx)
    ctx.attributes.update(_scope_attributes(request))

    with execution_request_scope(ctx, operation="bqcore.build_export_query"):
        schema = _fetch_schema(reflection, request, settings)
        return _compile(QueryMode.SELECT, request, schema, settings)
