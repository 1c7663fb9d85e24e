"""Key condition builder for index queries.

The partition key is always matched by equality. The sort key narrows the
range within a partition; equality is the only operator wired up so far and
anything else is rejected rather than ignored.
"""

from typing import Callable, Dict, Optional

from boto3.dynamodb.conditions import ConditionBase, Key

from ..exceptions import PartitionNotSetError, UnsupportedSortOperatorError
from ..schema import QueryKeyValue, WhereOperator

__all__ = ("build_key_condition",)

_SORT_KEY_BUILDERS: Dict[WhereOperator, Callable[[Key, QueryKeyValue], ConditionBase]] = {
    WhereOperator.EQUAL: lambda key, sort: key.eq(sort.value),
}


def build_key_condition(partition: Optional[QueryKeyValue], sort: Optional[QueryKeyValue] = None) -> ConditionBase:
    """Build the KeyConditionExpression for a query.

    Args:
        partition: Partition key name and value; required
        sort: Optional sort key. Ignored unless both key and value are set.

    Returns:
        `Key(partition) == value`, ANDed with the sort key predicate when present

    Raises:
        PartitionNotSetError: partition missing, or its key or value unset
        UnsupportedSortOperatorError: sort key operator other than equality
    """
    if partition is None or not partition.is_set:
        raise PartitionNotSetError()

    condition = Key(partition.key).eq(partition.value)

    if sort is not None and sort.is_set:
        build_sort = _SORT_KEY_BUILDERS.get(sort.operator)
        if build_sort is None:
            raise UnsupportedSortOperatorError(operator=sort.operator, key=sort.key)
        condition = condition & build_sort(Key(sort.key), sort)

    return condition
