"""Tests for the exception hierarchy and message formatting."""

import pytest

from hephaestus.exceptions import (
    BuildFilterExpressionError,
    CompileError,
    EmptyInOperandsError,
    EmptyWhereClauseError,
    ExecutionError,
    HephaestusError,
    IndexNotSetError,
    InvalidValueError,
    MissingRangeBoundError,
    PartitionNotSetError,
    QueryCancelledError,
    QueryFailedError,
    TableNotSetError,
    UnsupportedOperatorError,
    UnsupportedSortOperatorError,
    ValidationError,
)


@pytest.mark.parametrize(
    "error,parent",
    [
        (TableNotSetError, ValidationError),
        (IndexNotSetError, ValidationError),
        (PartitionNotSetError, ValidationError),
        (InvalidValueError, ValidationError),
        (EmptyWhereClauseError, CompileError),
        (UnsupportedOperatorError, CompileError),
        (UnsupportedSortOperatorError, CompileError),
        (MissingRangeBoundError, CompileError),
        (EmptyInOperandsError, CompileError),
        (BuildFilterExpressionError, CompileError),
        (QueryFailedError, ExecutionError),
        (QueryCancelledError, ExecutionError),
    ],
)
def test_hierarchy(error, parent):
    assert issubclass(error, parent)
    assert issubclass(error, HephaestusError)


def test_default_messages():
    assert str(TableNotSetError()) == "table not set"
    assert str(IndexNotSetError()) == "index not set"
    assert str(PartitionNotSetError()) == "partition not set"


def test_details_are_formatted():
    err = UnsupportedOperatorError(operator="LIKE", field="title")
    assert str(err) == "unsupported operator (operator='LIKE', field='title')"
    assert err.operator == "LIKE"


def test_repr():
    err = QueryFailedError(page=2)
    assert repr(err) == "QueryFailedError(message='failed to perform query', details={'page': 2})"


def test_details_without_message():
    assert str(HephaestusError(table="movies")) == "table='movies'"


def test_build_filter_cause():
    try:
        try:
            raise EmptyWhereClauseError()
        except EmptyWhereClauseError as inner:
            raise BuildFilterExpressionError() from inner
    except BuildFilterExpressionError as outer:
        assert isinstance(outer.cause, EmptyWhereClauseError)
