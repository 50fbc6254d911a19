"""Result materialization for the BigQuery driver core."""

from bqcore.results.materializer import materialize, materialize_rows, stringify_value

__all__ = [
    "materialize",
    "materialize_rows",
    "stringify_value",
]
