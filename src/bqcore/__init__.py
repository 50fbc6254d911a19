from bqcore.__version__ import __version__

from bqcore.api import (
    ExportTableRequest,
    PreviewTableRequest,
    PreviewTableResponse,
    build_export_query,
    preview_table,
)

from bqcore.common import (
    DriverError,
    ErrorCode,
    WarehouseError,
    decode_message,
    direct_error_message,
    extract_direct_message,
    should_retry,
    translate_warehouse_error,
)
from bqcore.constants import BigqueryType, DataType, FilterOperator, OrderDirection, QueryMode
from bqcore.query_builder import compile_query, get_query_builder
from bqcore.results import materialize, materialize_rows
from bqcore.types import (
    ColumnDefinition,
    CompiledQuery,
    FilterCondition,
    FilterSpec,
    MaterializedColumn,
    MaterializedRow,
    OrderBy,
)

# Utils (public API)
from bqcore.utils import retry_with_backoff


__all__ = [
    "__version__",

    # Query specification
    "ColumnDefinition",
    "FilterCondition",
    "FilterSpec",
    "OrderBy",
    "CompiledQuery",
    "BigqueryType",
    "DataType",
    "FilterOperator",
    "OrderDirection",
    "QueryMode",

    # Compiler and materializer
    "compile_query",
    "get_query_builder",
    "materialize",
    "materialize_rows",
    "MaterializedColumn",
    "MaterializedRow",

    # Exceptions and classification (public API)
    "DriverError",
    "ErrorCode",
    "WarehouseError",
    "should_retry",
    "decode_message",
    "extract_direct_message",
    "direct_error_message",
    "translate_warehouse_error",

    # Utilities (public API)
    "retry_with_backoff",

    # api
    "PreviewTableRequest",
    "PreviewTableResponse",
    "ExportTableRequest",
    "preview_table",
    "build_export_query",
]
