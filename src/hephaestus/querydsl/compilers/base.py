"""Base compiler interface.

Defines the abstract contract a where compiler must follow.
"""

from abc import ABC, abstractmethod
from typing import Any

__all__ = ("BaseWhere",)


class BaseWhere(ABC):
    """Abstract base class for where clause compilers.

    Subclasses implement `to_where` to produce a backend-native predicate
    and `to_expr` to render it as a readable string.
    """

    @abstractmethod
    def to_where(self, where: Any) -> Any:
        """Convert a Where tree, Q node or dict into a backend-native predicate."""
        raise NotImplementedError

    @abstractmethod
    def to_expr(self, where: Any) -> str:
        """Convert a Where tree, Q node or dict into a string expression for debugging."""
        raise NotImplementedError
