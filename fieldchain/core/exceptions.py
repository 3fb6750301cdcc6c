"""Custom exception classes for fieldchain error handling.

This module defines the exception hierarchy for fieldchain:
- ValidationError: One or more validation rules failed for a session
- RuleContractError: A rule was invoked in a way its caller contract forbids
- ReaderError: An input file for the command line could not be read

All exceptions inherit from FieldchainError for consistent error handling.
"""

from typing import Any


class FieldchainError(Exception):
    """Base exception for all fieldchain errors.

    Provides a common base class for all custom exceptions in fieldchain,
    enabling catch-all error handling when needed.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error description
            context: Optional dictionary of contextual information (session
                    name, field names, values, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        if not self.context:
            return self.message

        context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{self.message} [{context_str}]"


class ValidationError(FieldchainError):
    """Exception raised when validation rules fail.

    Raised by RuleChain on the first violation in immediate mode, or once by
    finalize() in continuous mode with all recorded messages joined.

    Context typically includes:
        - session_name: Name of the validation session (API/operation name)
        - field: Field name the error is attributed to. For aggregated errors
                 this is the last field set on the chain.
    """

    def __init__(
        self,
        message: str,
        session_name: str | None = None,
        field: str | None = None,
        timestamp: str | None = None,
        failures: tuple[Any, ...] = (),
        **extra_context: Any,
    ) -> None:
        """Initialize validation error with session and field details.

        Args:
            message: Human-readable error description
            session_name: Name of the owning validation session
            field: Field name the error is attributed to
            timestamp: Creation time in epoch milliseconds, as a string
            failures: ValidationFailure records carried by this error
            **extra_context: Additional context information
        """
        context: dict[str, Any] = {}
        if session_name is not None:
            context["session_name"] = session_name
        if field is not None:
            context["field"] = field
        context.update(extra_context)

        super().__init__(message, context)
        self.session_name = session_name
        self.field_name = field
        self.timestamp = timestamp
        self.failures = tuple(failures)

    def to_dict(self) -> dict[str, Any]:
        """Return the error shape exposed to external callers."""
        return {
            "session_name": self.session_name,
            "message": self.message,
            "field_name": self.field_name,
            "timestamp": self.timestamp,
        }


class RuleContractError(FieldchainError):
    """Exception raised when a rule is used outside its caller contract.

    This is a programming error, distinct from a validation failure: it is
    raised immediately in every mode and is never recorded by an ErrorSink.

    Context typically includes:
        - rule: Name of the rule that was misused
        - field: Field name bound at the time
        - value: Offending value
        - reason: Why the call is invalid

    Example:
        >>> raise RuleContractError(
        ...     "Value is not numeric",
        ...     rule="must_be_at_most",
        ...     field="age",
        ...     value="abc",
        ... )
    """

    def __init__(
        self,
        message: str,
        rule: str | None = None,
        field: str | None = None,
        value: Any = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        """Initialize rule contract error.

        Args:
            message: Human-readable error description
            rule: Name of the rule that was misused
            field: Field name bound at the time
            value: Offending value
            reason: Why the call is invalid
            **extra_context: Additional context information
        """
        context: dict[str, Any] = {}
        if rule is not None:
            context["rule"] = rule
        if field is not None:
            context["field"] = field
        if value is not None:
            context["value"] = value
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, context)


class ReaderError(FieldchainError):
    """Exception raised when reading an input file fails.

    Raised by the command line when a file cannot be parsed into a DataFrame.

    Context typically includes:
        - file_path: Path to the input file that failed to parse
        - format: Expected file format
        - reason: Specific reason for the parsing failure
    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        format: str | None = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        """Initialize reader error with input file details.

        Args:
            message: Human-readable error description
            file_path: Path to the input file that failed
            format: Expected file format (e.g., "csv", "parquet")
            reason: Specific reason for the parsing failure
            **extra_context: Additional context information
        """
        context: dict[str, Any] = {}
        if file_path is not None:
            context["file_path"] = file_path
        if format is not None:
            context["format"] = format
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, context)
