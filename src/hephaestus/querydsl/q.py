"""Query DSL core utilities.

This module defines the `Q` class used to compose filter expressions with
keyword lookups instead of building `Where` / `WhereCondition` values by hand.
A `Q` tree converts to a `Where` tree, which the DynamoDB compiler turns into
a native filter expression.

Typical usage:

- Build filters: `Q(year__gte=2020) & Q(genre="Comedy")`
- Precedence: `Q(status="active") & (Q(rating__gt=7) | Q(featured=True))`
- Compile: `q.to_where()` or `q.to_expr()`
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..exceptions import UnsupportedOperatorError
from ..schema import LOOKUP_MAP, LogicalOperator, Where, WhereCondition, WhereOperator


class Q:
    """Composable boolean query node.

    A `Q` instance holds leaf-level filters (e.g., `field__lookup=value`) or
    a boolean combination of two child nodes.

    - Use `&` to combine with logical AND.
    - Use `|` to combine with logical OR.

    Filter keys follow the `field__lookup` convention where lookup is one of:
    `eq`, `ne`, `gt`, `gte`, `lt`, `lte`, `between`, `in`, `contains`,
    `begins_with`, `exists`, `not_exists`. A key without a recognised lookup
    is an equality test. Double underscores inside the field become dots,
    addressing nested map members (`info__lang__eq` -> `info.lang`).

    Lookup values:
    - `between` takes a `(low, high)` pair
    - `in` takes a sequence
    - `exists` takes a bool; `False` means the attribute must be absent
    """

    def __init__(self, **filters: Any):
        self.filters: Dict[str, Any] = filters
        self.children: List["Q"] = []
        self.connector = LogicalOperator.AND

    def __and__(self, other: "Q") -> "Q":
        """Return a new node representing logical AND of two nodes."""
        node = Q()
        node.connector = LogicalOperator.AND
        node.children = [self, other]
        return node

    def __or__(self, other: "Q") -> "Q":
        """Return a new node representing logical OR of two nodes."""
        node = Q()
        node.connector = LogicalOperator.OR
        node.children = [self, other]
        return node

    def __str__(self) -> str:
        return self.to_expr()

    def __repr__(self) -> str:
        return f"<Q: {self.to_where().model_dump(exclude_defaults=True)}>"

    # -------------------
    # Where representation
    # -------------------
    def _split_key(self, key: str) -> tuple[str, WhereOperator]:
        if "__" in key:
            field, lookup = key.rsplit("__", 1)
            op = LOOKUP_MAP.get(lookup)
            if op is not None:
                return field.replace("__", "."), op
        return key.replace("__", "."), WhereOperator.EQUAL

    def _leaf_conditions(self) -> List[WhereCondition]:
        conditions: List[WhereCondition] = []
        for key, value in self.filters.items():
            field, op = self._split_key(key)
            if op == WhereOperator.BETWEEN:
                try:
                    low, high = value
                except (TypeError, ValueError) as e:
                    raise UnsupportedOperatorError(
                        "between lookup expects a (low, high) pair", operator=op.value, field=field
                    ) from e
                conditions.append(WhereCondition(field=field, operator=op, value=low, value2=high))
            elif op == WhereOperator.IN:
                conditions.append(WhereCondition(field=field, operator=op, values=list(value)))
            elif op == WhereOperator.ATTRIBUTE_EXISTS and value is False:
                conditions.append(WhereCondition(field=field, operator=WhereOperator.ATTRIBUTE_NOT_EXISTS))
            else:
                conditions.append(WhereCondition(field=field, operator=op, value=value))
        return conditions

    def to_where(self) -> Where:
        """Return the `Where` tree for this node.

        - Leaves become one node holding all keyword conditions (joined by AND).
        - Combinations become a node whose groups are the two children.
        """
        if self.children:
            return Where(groups=[child.to_where() for child in self.children], operator=self.connector)
        return Where(conditions=self._leaf_conditions())

    def to_expr(self) -> str:
        """Compile to a readable DynamoDB filter expression string."""
        from .compilers.dynamodb import dynamodb_where

        return dynamodb_where.to_expr(self.to_where())
