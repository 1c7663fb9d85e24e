"""Type aliases for the hephaestus package.

This module provides reusable type definitions shared by the executor,
the utilities and the CLI.
"""

from typing import Any, Dict, List, Protocol

# Low-level DynamoDB item, e.g. {"title": {"S": "Heat"}, "year": {"N": "1995"}}
AttributeValue = Dict[str, Any]
Item = Dict[str, AttributeValue]
Items = List[Item]


class QueryClient(Protocol):
    """The part of a boto3 DynamoDB client the query executor relies on."""

    def query(self, **kwargs: Any) -> Dict[str, Any]: ...
