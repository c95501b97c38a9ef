"""Custom exceptions for the expense analytics engine.

All exceptions inherit from ExpenseAnalyticsError, so callers can catch
every engine-specific error with a single except clause.

Insufficient data (an empty transaction list, too few months of history)
is never an error: the engine answers with conservative defaults instead.
These exceptions are reserved for contract violations.

Example:
    try:
        transactions = load_transactions(records)
    except InvalidTransactionError as e:
        logger.warning("rejected_record", index=e.index, field=e.field)
        raise
"""

from typing import Any, Optional


class ExpenseAnalyticsError(Exception):
    """Base exception for all expense analytics errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the caller can fix the input and try again.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class InvalidTransactionError(ExpenseAnalyticsError):
    """Error raised when a transaction record violates the input contract.

    Raised at the boundary by ``load_transactions`` and, as a last line,
    by the aggregator when an amount is negative or non-finite.

    Attributes:
        transaction_id: Identifier of the offending transaction (if known).
        field: The field that failed validation.
        value: The rejected value.
        index: Position of the record in the submitted list (if known).

    Example:
        >>> raise InvalidTransactionError(
        ...     "Amount must be finite",
        ...     transaction_id="rcpt-17",
        ...     field="amount",
        ...     value="NaN",
        ... )
        InvalidTransactionError: Amount must be finite
    """

    def __init__(
        self,
        message: str,
        *,
        transaction_id: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        index: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.transaction_id = transaction_id
        self.field = field
        self.value = value
        self.index = index

        if transaction_id:
            self.details["transaction_id"] = transaction_id
        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if index is not None:
            self.details["index"] = index


class ConfigurationError(ExpenseAnalyticsError):
    """Error raised when the analytics policy configuration is inconsistent.

    Configuration errors are not recoverable at runtime; the offending
    setting has to be corrected.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or relation.
        actual: The actual value found.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "ExpenseAnalyticsError",
    "InvalidTransactionError",
    "ConfigurationError",
]
