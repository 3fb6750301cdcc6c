"""Exit code constants for CLI commands.

Exit codes follow Unix conventions where 0 indicates success and non-zero
values indicate different types of failures.

Exit codes:
    0: SUCCESS - All checks passed
    1: UNEXPECTED_ERROR - Unexpected/unhandled exception
    2: VALIDATION_ERROR - One or more validation rules failed
    3: READER_ERROR - Input file reading/parsing failure
    6: CONFIG_ERROR - Configuration file or argument error
"""


class ExitCode:
    """Standard exit codes for CLI commands.

    Example:
        >>> from fieldchain.cli.exit_codes import ExitCode
        >>> import sys
        >>>
        >>> try:
        ...     chain.finalize()
        ...     sys.exit(ExitCode.SUCCESS)
        ... except ValidationError:
        ...     sys.exit(ExitCode.VALIDATION_ERROR)
    """

    SUCCESS = 0
    """All checks passed."""

    UNEXPECTED_ERROR = 1
    """Unexpected or unhandled exception occurred."""

    VALIDATION_ERROR = 2
    """One or more validation rules failed."""

    READER_ERROR = 3
    """Input file reading or parsing failed."""

    CONFIG_ERROR = 6
    """Configuration file or argument error."""
