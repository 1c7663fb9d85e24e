from .base import BaseWhere
from .dynamodb import DynamoDBWhereCompiler, dynamodb_where

__all__ = (
    "BaseWhere",
    "DynamoDBWhereCompiler",
    "dynamodb_where",
)
