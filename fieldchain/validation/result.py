"""ValidationResult data structure.

This module defines the non-raising outcome of a validation session. A
RuleChain produces one from its ErrorSink via RuleChain.result(), and an
immediate-mode ValidationError can be wrapped with from_error().
"""

from dataclasses import dataclass, field

from fieldchain.core.exceptions import ValidationError
from fieldchain.validation.failure import ValidationFailure, current_timestamp
from fieldchain.validation.sink import join_messages


@dataclass
class ValidationResult:
    """Outcome of a validation session.

    Attributes:
        is_valid: True if no failure was recorded
        failures: Recorded failures, in the order they occurred
        session_name: Name of the session that produced this result
        field_name: Field the session last named, if known

    Example:
        >>> result = ValidationResult(
        ...     is_valid=False,
        ...     failures=[ValidationFailure("createOrder", "Invalid Input: code. It is a mandatory field.", "code")],
        ...     session_name="createOrder",
        ... )
        >>> print(result.format())
        [createOrder] Validation failed
        Errors:
          - Invalid Input: code. It is a mandatory field.
    """

    is_valid: bool
    failures: list[ValidationFailure] = field(default_factory=list)
    session_name: str = ""
    field_name: str | None = None

    @property
    def messages(self) -> list[str]:
        return [failure.message for failure in self.failures]

    def has_errors(self) -> bool:
        """Check if validation failed with errors."""
        return len(self.failures) > 0

    def format(self) -> str:
        """Format result as human-readable string.

        Produces the session name, the validation status and one line per
        failure message.
        """
        lines = []

        status = "passed" if self.is_valid else "failed"
        lines.append(f"[{self.session_name}] Validation {status}")

        if self.has_errors():
            lines.append("Errors:")
            for message in self.messages:
                lines.append(f"  - {message}")

        return "\n".join(lines)

    def raise_for_errors(self) -> None:
        """Raise a single ValidationError if any failure is held.

        The message is built with join_messages(), the same policy as
        RuleChain.finalize(). The error is attributed to field_name when it
        is set (RuleChain.result() sets it to the last field named on the
        chain, matching finalize()) and to the field of the last failure
        otherwise.
        """
        if not self.has_errors():
            return
        field_name = self.field_name
        if field_name is None:
            field_name = self.failures[-1].field_name
        raise ValidationError(
            join_messages(self.messages),
            session_name=self.session_name,
            field=field_name,
            timestamp=current_timestamp(),
            failures=tuple(self.failures),
        )

    @staticmethod
    def from_error(error: ValidationError) -> "ValidationResult":
        """Wrap a ValidationError raised by a RuleChain.

        Failures carried by the error are reused; an error raised without
        failures is turned into a single failure.
        """
        failures = list(error.failures) or [
            ValidationFailure(
                session_name=error.session_name or "",
                message=error.message,
                field_name=error.field_name,
                timestamp=error.timestamp or current_timestamp(),
            )
        ]
        return ValidationResult(
            is_valid=False,
            failures=failures,
            session_name=error.session_name or "",
            field_name=error.field_name,
        )

    @staticmethod
    def combine(results: list["ValidationResult"]) -> "ValidationResult":
        """Combine multiple results into an aggregated result.

        The combined result is valid only if every result is valid, holds all
        failures in order, and is named "combined".

        Example:
            >>> combined = ValidationResult.combine([
            ...     ValidationResult(is_valid=True, session_name="a"),
            ...     ValidationResult(is_valid=False, failures=[ValidationFailure("b", "bad")], session_name="b"),
            ... ])
            >>> combined.is_valid, len(combined.failures), combined.session_name
            (False, 1, 'combined')
        """
        all_failures: list[ValidationFailure] = []
        for result in results:
            all_failures.extend(result.failures)

        return ValidationResult(
            is_valid=len(all_failures) == 0,
            failures=all_failures,
            session_name="combined",
        )
