from .table import (
    ExportTableRequest,
    PreviewTableRequest,
    PreviewTableResponse,
    build_export_query,
    preview_table,
)

__all__ = [
    "ExportTableRequest",
    "PreviewTableRequest",
    "PreviewTableResponse",
    "build_export_query",
    "preview_table",
]
