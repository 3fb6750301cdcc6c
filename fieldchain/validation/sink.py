"""ErrorSink: accumulated failures of one validation session."""

from collections.abc import Iterator, Sequence

from fieldchain.validation.failure import ValidationFailure

SEPARATOR = ","


def join_messages(messages: Sequence[str]) -> str:
    """Join failure messages into a single message.

    Messages are joined with a comma. When there is more than one message,
    the joined string is wrapped in "[ " and " ]"; a single message is
    returned unwrapped and no messages give an empty string.

    Example:
        >>> join_messages(["a", "b"])
        '[ a,b ]'
    """
    joined = SEPARATOR.join(messages)
    if len(messages) > 1:
        return f"[ {joined} ]"
    return joined


class ErrorSink:
    """Ordered, append-only collection of ValidationFailures.

    Failures are kept in insertion order and are never de-duplicated. The
    sink is only cleared by an explicit call to reset().

    Example:
        >>> sink = ErrorSink()
        >>> sink.record(ValidationFailure("s", "Invalid Input: a. It is a mandatory field."))
        >>> sink.record(ValidationFailure("s", "Value must only contain numbers."))
        >>> sink.joined_message()
        '[ Invalid Input: a. It is a mandatory field.,Value must only contain numbers. ]'
    """

    def __init__(self) -> None:
        self._failures: list[ValidationFailure] = []

    def record(self, failure: ValidationFailure) -> None:
        """Append a failure."""
        self._failures.append(failure)

    def is_empty(self) -> bool:
        return len(self._failures) == 0

    def joined_message(self) -> str:
        """Render all messages as a single string, see join_messages().

        Returns:
            The joined message, or an empty string when the sink is empty
        """
        return join_messages(self.messages)

    def reset(self) -> None:
        """Remove all recorded failures."""
        self._failures.clear()

    @property
    def failures(self) -> tuple[ValidationFailure, ...]:
        return tuple(self._failures)

    @property
    def messages(self) -> list[str]:
        return [failure.message for failure in self._failures]

    def __len__(self) -> int:
        return len(self._failures)

    def __iter__(self) -> Iterator[ValidationFailure]:
        return iter(tuple(self._failures))

    def __repr__(self) -> str:
        return f"ErrorSink(failures={self.messages!r})"
