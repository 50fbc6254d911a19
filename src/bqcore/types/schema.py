"""Table schema types supplied by schema reflection."""

from typing import Any

from pydantic import ConfigDict, Field, field_validator

from bqcore.constants.bigquery import BigqueryType
from bqcore.types.base import DriverBaseModel


class ColumnDefinition(DriverBaseModel):
    """One column of a reflected table.

    Attributes:
        name: Column name as stored in the table.
        type: Base BigQuery type. Declared strings such as ``"NUMERIC(10,2)"``
            or ``"ARRAY<INT64>"`` are normalized on construction.
        nullable: Whether the column accepts NULL.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    type: BigqueryType
    nullable: bool = True

    @field_validator("type", mode="before")
    @classmethod
    def parse_declared_type(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, BigqueryType):
            return BigqueryType.parse(value)
        return value
