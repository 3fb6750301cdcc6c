"""Command implementations for the fieldchain CLI.

This module implements the CLI commands:
- check-unique: Check that records in a file are unique on a set of fields
- check-config: Validate a settings file

Each command returns an exit code from ExitCode instead of raising.
"""

import logging
import sys
from pathlib import Path
from typing import Annotated, Any

import polars as pl
from cyclopts import Parameter

from fieldchain.cli.config import ConfigError, load_config, merge_config, validate_config
from fieldchain.cli.exit_codes import ExitCode
from fieldchain.cli.output import configure_logging, handle_error, report_failures
from fieldchain.core.exceptions import ReaderError
from fieldchain.validation.chain import RuleChain
from fieldchain.validation.result import ValidationResult

logger = logging.getLogger(__name__)

READERS = {
    ".csv": ("csv", pl.read_csv),
    ".json": ("json", pl.read_json),
    ".ndjson": ("ndjson", pl.read_ndjson),
    ".jsonl": ("ndjson", pl.read_ndjson),
    ".parquet": ("parquet", pl.read_parquet),
}

DEFAULT_SESSION_NAME = "check-unique"


def read_records(path: Path) -> pl.DataFrame:
    """Read a records file into a DataFrame.

    The format is inferred from the file extension.

    Args:
        path: Path to a .csv, .json, .ndjson/.jsonl or .parquet file

    Returns:
        DataFrame with one row per record

    Raises:
        ValueError: If the extension is not supported
        ReaderError: If the file cannot be parsed
    """
    suffix = path.suffix.lower()
    if suffix not in READERS:
        supported = ", ".join(sorted(READERS))
        raise ValueError(
            f"Cannot infer format from extension '{path.suffix}'. Supported: {supported}"
        )

    format_name, read = READERS[suffix]
    try:
        return read(path)
    except Exception as e:
        raise ReaderError(
            f"Failed to read {path}", file_path=str(path), format=format_name, reason=str(e)
        ) from e


def check_records(
    records: pl.DataFrame,
    fields: list[str],
    session_name: str = DEFAULT_SESSION_NAME,
    max_items: int | None = None,
) -> ValidationResult:
    """Run the record checks in continuous mode and return the outcome.

    Checks that records exist, that there are at most max_items of them,
    and that no record repeats the values of fields held by an earlier one.
    """
    chain = RuleChain(session_name)
    chain.bind(records).field("records").continuous().required()
    if max_items is not None:
        chain.must_not_exceed_max_items(max_items)
    chain.must_not_have_duplicates(*fields)
    return chain.result()


def check_unique(
    input_path: Annotated[Path, Parameter(help="Records file (csv, json, ndjson, parquet)")],
    field: Annotated[list[str] | None, Parameter(help="Field that must be unique (repeatable)")] = None,
    max_items: Annotated[int | None, Parameter(help="Maximum number of records")] = None,
    session_name: Annotated[str | None, Parameter(help="Session name used in messages")] = None,
    config: Annotated[Path | None, Parameter(help="Settings file path")] = None,
    verbose: Annotated[bool, Parameter(help="Show detailed error information")] = False,
    log_level: Annotated[str | None, Parameter(help="Log level (debug, info, warning, error)")] = None,
    log_file: Annotated[Path | None, Parameter(help="Log file path")] = None,
) -> int:
    """Check that the records in a file are unique on the given fields.

    Every record whose field values repeat an earlier record is reported.
    Settings from --config are used for anything not given on the command
    line.

    Args:
        input_path: Path to records file
        field: Field names that must be unique together
        max_items: Maximum number of records allowed
        session_name: Session name reported in messages
        config: Path to settings file (optional)
        verbose: Show detailed error information including stack traces
        log_level: Logging level (debug, info, warning, error)
        log_file: Path to log file (optional)

    Returns:
        Exit code (0 when unique, 2 when duplicates are found, non-zero for errors)

    Example:
        >>> from pathlib import Path
        >>> from fieldchain.cli.commands import check_unique
        >>>
        >>> exit_code = check_unique(Path("products.csv"), field=["sku", "warehouse"])
    """
    try:
        cfg: dict[str, Any] = {}
        if config:
            cfg = load_config(config)
            errors = validate_config(cfg)
            if errors:
                print("✗ Configuration validation failed:", file=sys.stderr)
                for error in errors:
                    print(f"  {error}", file=sys.stderr)
                return ExitCode.CONFIG_ERROR

        cfg = merge_config(
            cfg,
            fields=field,
            max_items=max_items,
            session_name=session_name,
            log_level=log_level,
            log_file=str(log_file) if log_file else None,
        )

        try:
            configure_logging(
                cfg.get("log_level", "warning"),
                Path(cfg["log_file"]) if cfg.get("log_file") else None,
            )
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        fields = cfg.get("fields") or []
        if not fields:
            print("Error: at least one --field is required", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        if not input_path.exists():
            print(f"Error: Input file not found: {input_path}", file=sys.stderr)
            return ExitCode.UNEXPECTED_ERROR

        try:
            records = read_records(input_path)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        unknown = [name for name in fields if name not in records.columns]
        if unknown:
            print(
                f"Error: Unknown field(s) {', '.join(unknown)}. "
                f"Available: {', '.join(records.columns)}",
                file=sys.stderr,
            )
            return ExitCode.CONFIG_ERROR

        logger.info("Checking %d records of %s on %s", records.height, input_path, fields)
        limit = cfg.get("max_items")
        result = check_records(
            records,
            fields,
            session_name=cfg.get("session_name", DEFAULT_SESSION_NAME),
            max_items=int(limit) if limit is not None else None,
        )

        if result.has_errors():
            report_failures(result)
            return ExitCode.VALIDATION_ERROR

        print(f"✓ {records.height} records are unique on {', '.join(fields)}")
        return ExitCode.SUCCESS

    except ReaderError as e:
        handle_error(e, verbose=verbose)
        return ExitCode.READER_ERROR
    except ConfigError as e:
        handle_error(e, verbose=verbose)
        return ExitCode.CONFIG_ERROR
    except Exception as e:
        handle_error(e, verbose=verbose)
        return ExitCode.UNEXPECTED_ERROR


def check_config(
    config_path: Annotated[Path, Parameter(help="Settings file path")],
) -> int:
    """Validate a settings file.

    Loads the file and checks every setting, displaying all problems found.

    Args:
        config_path: Path to settings file to validate

    Returns:
        Exit code (0 for valid settings, 6 for invalid settings)

    Example:
        >>> from pathlib import Path
        >>> from fieldchain.cli.commands import check_config
        >>>
        >>> exit_code = check_config(config_path=Path("settings.yaml"))
    """
    try:
        config = load_config(config_path)

        errors = validate_config(config)
        if errors:
            print("✗ Configuration validation failed:", file=sys.stderr)
            for error in errors:
                print(f"  {error}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        print("✓ Configuration is valid")
        if "session_name" in config:
            print(f"  Session: {config['session_name']}")
        if config.get("fields"):
            print(f"  Fields: {', '.join(config['fields'])}")
        if "max_items" in config:
            print(f"  Max items: {config['max_items']}")

        return ExitCode.SUCCESS

    except ConfigError as e:
        print("✗ Configuration error:", file=sys.stderr)
        print(f"  {e}", file=sys.stderr)
        return ExitCode.CONFIG_ERROR
    except Exception as e:
        handle_error(e, verbose=False)
        return ExitCode.UNEXPECTED_ERROR
