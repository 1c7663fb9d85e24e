"""DynamoDB where compiler.

Transforms `Where` trees into boto3 condition objects (`boto3.dynamodb.conditions`)
suitable for a Query `FilterExpression`.

DynamoDB filter expressions support:
- Comparison: =, <>, <, <=, >, >=
- Range: BETWEEN, IN
- Functions: contains, begins_with, attribute_exists, attribute_not_exists
- Logical: AND, OR

Sibling predicates at one level are joined by a single connector, folded
left to right. Mixed AND/OR precedence is expressed with nested groups.
"""

import operator
from functools import reduce
from typing import Any, Callable, Dict, List, Union

from boto3.dynamodb.conditions import Attr, ConditionBase, ConditionExpressionBuilder

from ...exceptions import (
    EmptyInOperandsError,
    EmptyWhereClauseError,
    MissingRangeBoundError,
    UnsupportedOperatorError,
)
from ...schema import LogicalOperator, Where, WhereCondition, WhereOperator
from .base import BaseWhere
from .utils import normalize_where_input, render_expression

__all__ = (
    "DynamoDBWhereCompiler",
    "dynamodb_where",
)


class DynamoDBWhereCompiler(BaseWhere):
    """Compile `Where` trees into boto3 `ConditionBase` predicates.

    The compiler is stateless; compiling the same tree twice yields equal
    predicates (boto3 conditions compare by operator and operands).
    """

    # Binary comparisons mapped to the boto3 Attr method that builds them
    _COMPARISONS = {
        WhereOperator.EQUAL: "eq",
        WhereOperator.NOT_EQUAL: "ne",
        WhereOperator.LESS_THAN: "lt",
        WhereOperator.LESS_THAN_EQUAL: "lte",
        WhereOperator.GREATER_THAN: "gt",
        WhereOperator.GREATER_THAN_EQUAL: "gte",
    }

    _CONNECTORS: Dict[LogicalOperator, Callable[[ConditionBase, ConditionBase], ConditionBase]] = {
        LogicalOperator.AND: operator.and_,
        LogicalOperator.OR: operator.or_,
    }

    def to_where(self, where: Union[Where, Dict[str, Any], Any]) -> ConditionBase:
        """Convert a Where tree, Q object or dict to a boto3 condition.

        Raises:
            EmptyWhereClauseError: a node reached during compilation is empty
            UnsupportedOperatorError: a leaf uses an operator with no DynamoDB form
            MissingRangeBoundError: a BETWEEN leaf lacks a bound
            EmptyInOperandsError: an IN leaf has no operands
        """
        node = normalize_where_input(where)
        return self._node_to_condition(node)

    def to_expr(self, where: Union[Where, Dict[str, Any], Any]) -> str:
        """Render the compiled filter with placeholders substituted, for logs and debugging."""
        built = ConditionExpressionBuilder().build_expression(self.to_where(where))
        return render_expression(
            built.condition_expression,
            built.attribute_name_placeholders,
            built.attribute_value_placeholders,
        )

    def compile_condition(self, condition: WhereCondition) -> ConditionBase:
        """Compile one leaf condition into a boto3 condition."""
        attr = Attr(condition.field)
        op = condition.operator

        method = self._COMPARISONS.get(op)
        if method is not None:
            return getattr(attr, method)(condition.value)

        if op == WhereOperator.BETWEEN:
            if condition.value is None or condition.value2 is None:
                raise MissingRangeBoundError(field=condition.field, operator=WhereOperator.BETWEEN.value)
            return attr.between(condition.value, condition.value2)

        if op == WhereOperator.IN:
            if not condition.values:
                raise EmptyInOperandsError(field=condition.field, operator=WhereOperator.IN.value)
            return attr.is_in(list(condition.values))

        if op == WhereOperator.CONTAINS:
            return attr.contains(str(condition.value))
        if op == WhereOperator.BEGINS_WITH:
            return attr.begins_with(str(condition.value))
        if op == WhereOperator.ATTRIBUTE_EXISTS:
            return attr.exists()
        if op == WhereOperator.ATTRIBUTE_NOT_EXISTS:
            return attr.not_exists()

        raise UnsupportedOperatorError(operator=op, field=condition.field)

    def _node_to_condition(self, node: Where) -> ConditionBase:
        """Recursively compile a node: leaves first, then nested groups, then fold."""
        predicates: List[ConditionBase] = [self.compile_condition(c) for c in node.conditions]
        for group in node.groups:
            predicates.append(self._node_to_condition(group))

        if not predicates:
            raise EmptyWhereClauseError()

        combine = self._CONNECTORS[node.connector]
        return reduce(combine, predicates)


dynamodb_where = DynamoDBWhereCompiler()
