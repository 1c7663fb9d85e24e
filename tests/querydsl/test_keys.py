"""Tests for the key condition builder."""

import pytest
from boto3.dynamodb.conditions import Key

from hephaestus.exceptions import PartitionNotSetError, UnsupportedSortOperatorError
from hephaestus.querydsl.keys import build_key_condition
from hephaestus.schema import QueryKeyValue, WhereOperator


def test_partition_only():
    condition = build_key_condition(QueryKeyValue(key="Status", value="active"))
    assert condition == Key("Status").eq("active")


def test_partition_and_sort_are_anded():
    condition = build_key_condition(
        QueryKeyValue(key="year", value=2020),
        QueryKeyValue(key="genre", value="Comedy", operator=WhereOperator.EQUAL),
    )
    assert condition == Key("year").eq(2020) & Key("genre").eq("Comedy")


def test_partition_operator_is_ignored():
    condition = build_key_condition(QueryKeyValue(key="year", value=2020, operator=WhereOperator.GREATER_THAN))
    assert condition == Key("year").eq(2020)


@pytest.mark.parametrize(
    "partition",
    [
        None,
        QueryKeyValue(key="", value="active"),
        QueryKeyValue(key="Status", value=None),
    ],
)
def test_partition_not_set(partition):
    with pytest.raises(PartitionNotSetError):
        build_key_condition(partition)


@pytest.mark.parametrize("operator", [WhereOperator.BEGINS_WITH, WhereOperator.BETWEEN, WhereOperator.LESS_THAN])
def test_unsupported_sort_operator(operator):
    with pytest.raises(UnsupportedSortOperatorError) as exc:
        build_key_condition(
            QueryKeyValue(key="year", value=2020),
            QueryKeyValue(key="title", value="The", operator=operator),
        )
    assert exc.value.operator == operator
    assert exc.value.details["key"] == "title"


@pytest.mark.parametrize(
    "sort",
    [
        QueryKeyValue(key="genre", value=None),
        QueryKeyValue(key="", value="Comedy"),
    ],
)
def test_incomplete_sort_is_skipped(sort):
    condition = build_key_condition(QueryKeyValue(key="year", value=2020), sort)
    assert condition == Key("year").eq(2020)


def test_incomplete_sort_skips_operator_check():
    condition = build_key_condition(
        QueryKeyValue(key="year", value=2020),
        QueryKeyValue(key="title", operator=WhereOperator.BEGINS_WITH),
    )
    assert condition == Key("year").eq(2020)


@pytest.mark.parametrize("value", [0, "", False])
def test_falsy_key_values_count_as_set(value):
    condition = build_key_condition(QueryKeyValue(key="year", value=value), QueryKeyValue(key="rank", value=value))
    assert condition == Key("year").eq(value) & Key("rank").eq(value)
