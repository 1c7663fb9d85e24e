"""Pydantic schemas describing a DynamoDB index query.

`QueryOptions` is the single input of the query executor. Filters are a
recursive `Where` tree whose leaves are `WhereCondition` values; sibling
predicates at one level are joined by the node's `LogicalOperator`, and
precedence is expressed by nesting `groups`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import UnsupportedOperatorError


class LogicalOperator(str, Enum):
    AND = "AND"
    OR = "OR"

    @classmethod
    def parse(cls, value: Any) -> Optional["LogicalOperator"]:
        """Return the matching member, or None for an empty operator (treated as AND)."""
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip().lstrip("$").upper()
            if not text:
                return None
            if text in cls.__members__:
                return cls[text]
        raise UnsupportedOperatorError("unsupported logical operator", operator=value)


class WhereOperator(str, Enum):
    """Closed set of leaf comparison kinds understood by the filter compiler."""

    EQUAL = "="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_THAN_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_EQUAL = ">="
    BETWEEN = "BETWEEN"
    IN = "IN"
    CONTAINS = "CONTAINS"
    BEGINS_WITH = "BEGINS_WITH"
    ATTRIBUTE_EXISTS = "EXISTS"
    ATTRIBUTE_NOT_EXISTS = "NOT_EXISTS"

    @classmethod
    def parse(cls, value: Any) -> "WhereOperator":
        """Resolve a member from its symbol, its name, or a `field__lookup` style alias.

        Examples:
            WhereOperator.parse("=")            # EQUAL
            WhereOperator.parse("greater_than") # GREATER_THAN
            WhereOperator.parse("gte")          # GREATER_THAN_EQUAL

        Raises:
            UnsupportedOperatorError: if nothing matches
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                return cls(text.upper())
            except ValueError:
                pass
            if text.upper() in cls.__members__:
                return cls[text.upper()]
            alias = LOOKUP_MAP.get(text.lower())
            if alias is not None:
                return alias
        raise UnsupportedOperatorError(operator=value)


LOOKUP_MAP = {
    "eq": WhereOperator.EQUAL,
    "ne": WhereOperator.NOT_EQUAL,
    "lt": WhereOperator.LESS_THAN,
    "lte": WhereOperator.LESS_THAN_EQUAL,
    "gt": WhereOperator.GREATER_THAN,
    "gte": WhereOperator.GREATER_THAN_EQUAL,
    "between": WhereOperator.BETWEEN,
    "range": WhereOperator.BETWEEN,
    "in": WhereOperator.IN,
    "contains": WhereOperator.CONTAINS,
    "begins_with": WhereOperator.BEGINS_WITH,
    "startswith": WhereOperator.BEGINS_WITH,
    "exists": WhereOperator.ATTRIBUTE_EXISTS,
    "not_exists": WhereOperator.ATTRIBUTE_NOT_EXISTS,
}


class WhereCondition(BaseModel):
    """A single leaf filter: `field <operator> value`."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Attribute name (dots address nested map members).")
    operator: WhereOperator = Field(WhereOperator.EQUAL, description="Comparison kind.")
    value: Any = Field(None, description="Operand; lower bound for BETWEEN.")
    value2: Any = Field(None, description="Upper bound for BETWEEN.")
    values: List[Any] = Field(default_factory=list, description="Operands for IN.")

    @field_validator("operator", mode="before")
    @classmethod
    def _parse_operator(cls, value: Any) -> WhereOperator:
        return WhereOperator.parse(value)


class Where(BaseModel):
    """Recursive boolean filter node.

    Conditions compile first, then groups, and the results are folded
    left-to-right with `operator` (AND when unset). A node with neither
    conditions nor groups is rejected by the compiler.
    """

    model_config = ConfigDict(frozen=True)

    conditions: List[WhereCondition] = Field(default_factory=list)
    groups: List["Where"] = Field(default_factory=list)
    operator: Optional[LogicalOperator] = None

    @field_validator("operator", mode="before")
    @classmethod
    def _parse_operator(cls, value: Any) -> Optional[LogicalOperator]:
        return LogicalOperator.parse(value)

    @property
    def is_empty(self) -> bool:
        return not self.conditions and not self.groups

    @property
    def connector(self) -> LogicalOperator:
        return self.operator or LogicalOperator.AND

    def __and__(self, other: "Where") -> "Where":
        return Where(groups=[self, other], operator=LogicalOperator.AND)

    def __or__(self, other: "Where") -> "Where":
        return Where(groups=[self, other], operator=LogicalOperator.OR)


Where.model_rebuild()


class QueryKeyValue(BaseModel):
    """Key attribute name and value used for the partition or sort key."""

    model_config = ConfigDict(frozen=True)

    key: str = ""
    value: Any = None
    operator: WhereOperator = WhereOperator.EQUAL

    @field_validator("operator", mode="before")
    @classmethod
    def _parse_operator(cls, value: Any) -> WhereOperator:
        return WhereOperator.parse(value)

    @property
    def is_set(self) -> bool:
        return bool(self.key) and self.value is not None


class QueryOptions(BaseModel):
    """Everything needed to query one index of one table."""

    model_config = ConfigDict(frozen=True)

    table: str = Field("", description="Table name.")
    index: str = Field("", description="Secondary index name, e.g. 'YearGenreIndex'.")
    limit: int = Field(0, ge=0, le=2**31 - 1, description="Items per page; 0 uses the default.")
    cursor: Optional[str] = Field(None, description="Opaque continuation token to start from.")
    partition: Optional[QueryKeyValue] = None
    sort: Optional[QueryKeyValue] = None
    where: Optional[Where] = Field(None, description="Filter applied to non-key attributes.")
    projection: List[str] = Field(default_factory=list, description="Attributes to return; all when empty.")
