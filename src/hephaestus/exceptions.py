"""Custom exceptions for the Hephaestus query library.

Every failure path raises a subclass of `HephaestusError`. Validation and
compile errors are raised locally before any backend call; execution errors
wrap whatever the DynamoDB client raised mid-pagination.
"""

from typing import Any, Dict


# Base exception
class HephaestusError(Exception):
    """Base exception for all Hephaestus errors.

    Attributes:
        message: Error message
        details: Additional error context as key-value pairs
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        """Initialize exception with message and additional details.

        Args:
            message: Human-readable error message
            **kwargs: Additional context (e.g., field, operator, table)
        """
        self.message = message
        self.details: Dict[str, Any] = kwargs
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the complete error message with details."""
        if not self.details:
            return self.message

        details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        if self.message:
            return f"{self.message} ({details_str})"
        return details_str

    def __repr__(self) -> str:
        """Return detailed representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# Validation exceptions
class ValidationError(HephaestusError):
    """Raised when query options fail validation. No backend call is made.

    Example:
        >>> raise ValidationError("Invalid query options", field="limit")
    """


class TableNotSetError(ValidationError):
    """Raised when `QueryOptions.table` is empty."""

    def __init__(self, message: str = "table not set", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class IndexNotSetError(ValidationError):
    """Raised when `QueryOptions.index` is empty."""

    def __init__(self, message: str = "index not set", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class PartitionNotSetError(ValidationError):
    """Raised when the partition key is missing, has no key name, or has no value."""

    def __init__(self, message: str = "partition not set", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InvalidValueError(ValidationError):
    """Raised when a key or filter value has no DynamoDB attribute value form.

    Example:
        >>> raise InvalidValueError("unsupported value", placeholder=":v1", value_type="datetime")
    """

    def __init__(self, message: str = "unsupported value", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InvalidCursorError(ValidationError):
    """Raised when a continuation cursor cannot be turned into a start key.

    Example:
        >>> raise InvalidCursorError("invalid cursor", cursor="not-base64")
    """


# Compile exceptions
class CompileError(HephaestusError):
    """Base exception for errors raised while compiling key or filter expressions."""


class EmptyWhereClauseError(CompileError):
    """Raised when a `Where` node has neither conditions nor groups."""

    def __init__(self, message: str = "no conditions provided", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class UnsupportedOperatorError(CompileError):
    """Raised for an operator that has no native filter equivalent.

    Example:
        >>> raise UnsupportedOperatorError(operator="LIKE", field="title")
    """

    def __init__(self, message: str = "unsupported operator", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)

    @property
    def operator(self) -> Any:
        return self.details.get("operator")


class UnsupportedSortOperatorError(CompileError):
    """Raised when the sort key uses an operator other than equality."""

    def __init__(self, message: str = "unsupported sort key operator", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)

    @property
    def operator(self) -> Any:
        return self.details.get("operator")


class MissingRangeBoundError(CompileError):
    """Raised when a BETWEEN condition lacks its lower or upper bound."""

    def __init__(self, message: str = "BETWEEN operator requires both value and value2", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class EmptyInOperandsError(CompileError):
    """Raised when an IN condition has no operands."""

    def __init__(self, message: str = "IN operator requires non-empty values", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class BuildFilterExpressionError(CompileError):
    """Raised by the query executor when the `where` tree fails to compile.

    The underlying compile error is chained as `__cause__` and kept on `cause`.
    """

    def __init__(self, message: str = "failed to build filter expression", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__


# Execution exceptions
class ExecutionError(HephaestusError):
    """Base exception for failures that happen after the request is sent."""


class QueryFailedError(ExecutionError):
    """Raised when a page fetch fails. Items from earlier pages are discarded.

    Example:
        >>> raise QueryFailedError("failed to perform query", table="movies", page=2)
    """

    def __init__(self, message: str = "failed to perform query", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class QueryCancelledError(ExecutionError):
    """Raised when the caller's context is cancelled or its deadline passes between pages."""

    def __init__(self, message: str = "query cancelled", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


# Configuration exceptions
class ConfigurationError(HephaestusError):
    """Raised when configuration is invalid or missing.

    Example:
        >>> raise ConfigurationError("Invalid configuration", setting="AWS_REGION", value="")
    """


class MissingConfigError(ConfigurationError):
    """Raised when required configuration values are not set.

    Example:
        >>> raise MissingConfigError("Configuration not set", config_key="AWS_REGION")
    """
