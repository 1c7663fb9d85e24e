"""Compiler utility functions."""

from typing import Any, Dict, Union

from ...schema import Where


def normalize_where_input(where: Union[Where, Dict[str, Any], Any]) -> Where:
    """Normalize a Q object, dict or Where into a `Where` tree.

    Args:
        where: `Where` instance, Q object (with a `.to_where()` method) or a
            dict shaped like `Where` (e.g. decoded from JSON)

    Returns:
        `Where` ready for compilation

    Raises:
        TypeError: If input is none of the accepted types
    """
    if isinstance(where, Where):
        return where
    if hasattr(where, "to_where") and callable(where.to_where):
        return where.to_where()
    if isinstance(where, dict):
        return Where.model_validate(where)
    raise TypeError(f"where parameter must be a Where, Q object or dict, got {type(where).__name__}")


def render_expression(expression: str, names: Dict[str, str], values: Dict[str, Any]) -> str:
    """Substitute `#n0`/`:v0` style placeholders back into an expression string."""
    # longest first so "#n1" never eats the prefix of "#n10"
    for placeholder in sorted(names, key=len, reverse=True):
        expression = expression.replace(placeholder, names[placeholder])
    for placeholder in sorted(values, key=len, reverse=True):
        expression = expression.replace(placeholder, repr(values[placeholder]))
    return expression
