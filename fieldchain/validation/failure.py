"""ValidationFailure record.

A ValidationFailure is the immutable record of one violated rule. It is what
an ErrorSink stores and what a ValidationError carries.
"""

import time
from dataclasses import dataclass, field
from typing import Any


def current_timestamp() -> str:
    """Return the current time in epoch milliseconds, as a string."""
    return str(int(time.time() * 1000))


@dataclass(frozen=True)
class ValidationFailure:
    """One violated rule within a validation session.

    Attributes:
        session_name: Name of the owning validation session
        message: Full failure message, including the field prefix when present
        field_name: Field under evaluation when the rule failed
        timestamp: Creation time in epoch milliseconds, as a string

    Example:
        >>> failure = ValidationFailure(
        ...     session_name="createOrder",
        ...     message="Invalid Input: code. It is a mandatory field.",
        ...     field_name="code",
        ... )
        >>> failure.to_dict()["field_name"]
        'code'
    """

    session_name: str
    message: str
    field_name: str | None = None
    timestamp: str = field(default_factory=current_timestamp)

    def to_dict(self) -> dict[str, Any]:
        """Return the failure in the shape exposed to external callers."""
        return {
            "session_name": self.session_name,
            "message": self.message,
            "field_name": self.field_name,
            "timestamp": self.timestamp,
        }
