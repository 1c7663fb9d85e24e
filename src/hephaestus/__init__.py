"""
Hephaestus: compile structured filters into DynamoDB index queries.

Exposes the query executor, the option/filter schemas and the Q DSL.
"""

from .context import Context
from .engine import DynamoDB, QueryPaginator, query
from .querydsl import Q
from .schema import LogicalOperator, QueryKeyValue, QueryOptions, Where, WhereCondition, WhereOperator
from .types import Item, Items

__version__ = "0.1.0"

__all__ = [
    "DynamoDB",
    "QueryPaginator",
    "query",
    "Context",
    "Q",
    "LogicalOperator",
    "WhereOperator",
    "WhereCondition",
    "Where",
    "QueryKeyValue",
    "QueryOptions",
    "Item",
    "Items",
]
