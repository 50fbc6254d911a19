"""Unit tests for schema and query specification models."""

import pytest
from pydantic import ValidationError

from bqcore.constants.bigquery import BigqueryType
from bqcore.constants.sql import FilterOperator
from bqcore.types import ColumnDefinition, FilterCondition, FilterSpec


class TestColumnDefinition:
    @pytest.mark.parametrize("declared,expected", [
        ("NUMERIC(10,2)", BigqueryType.NUMERIC),
        ("STRING(50)", BigqueryType.STRING),
        ("ARRAY<INT64>", BigqueryType.ARRAY),
        ("integer", BigqueryType.INT64),
        ("RECORD", BigqueryType.STRUCT),
        ("BIGDECIMAL(40)", BigqueryType.BIGNUMERIC),
    ])
    def test_declared_type_is_normalized(self, declared, expected):
        assert ColumnDefinition(name="c", type=declared).type is expected

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValidationError):
            ColumnDefinition(name="c", type="BLOB")

    def test_is_immutable(self):
        column = ColumnDefinition(name="c", type="INT64")
        with pytest.raises(ValidationError):
            column.name = "d"


class TestFilterModels:
    def test_scalar_value_is_wrapped(self):
        condition = FilterCondition(column=" id ", operator="gte", values="5")

        assert condition.column == "id"
        assert condition.values == ("5",)
        assert condition.operator.is_ordering

    def test_equality_is_not_ordering(self):
        assert not FilterOperator.EQ.is_ordering
        assert not FilterOperator.IN.is_ordering

    def test_empty_strings_are_unset(self):
        spec = FilterSpec(change_since="", change_until="  ", fulltext_search="")

        assert spec.change_since is None
        assert spec.change_until is None
        assert spec.fulltext_search is None

    def test_numeric_change_bound_is_kept_as_text(self):
        assert FilterSpec(change_since=1667293200).change_since == "1667293200"

    def test_to_dict_uses_plain_values(self):
        spec = FilterSpec(conditions=[FilterCondition(column="a", values=[1])], limit=5)

        assert spec.to_dict() == {
            "conditions": [{"column": "a", "operator": "eq", "values": [1]}],
            "limit": 5,
        }
