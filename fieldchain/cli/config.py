"""Configuration file loading and validation.

This module handles loading command settings from JSON and YAML files,
merging CLI arguments with file-based settings (with CLI taking precedence),
and validating the settings themselves with a RuleChain.

Settings files can specify:
- session_name: Name reported in validation errors
- fields: Field names that must be unique together
- max_items: Maximum number of records allowed
- log_level: Logging level (debug, info, warning, error)
- log_file: Path of a log file

Example settings file (YAML):
    session_name: importProducts
    fields: [sku, warehouse]
    max_items: 5000
    log_level: info
"""

import json
from pathlib import Path
from typing import Any

import yaml

from fieldchain.cli.output import LOG_LEVELS
from fieldchain.validation.chain import RuleChain

KNOWN_SETTINGS = frozenset({"session_name", "fields", "max_items", "log_level", "log_file"})
SESSION_NAME_PATTERN = r"[A-Za-z][A-Za-z0-9_.-]*"
FIELD_NAME_PATTERN = r"[A-Za-z_][A-Za-z0-9_]*"
MAX_SESSION_NAME_LENGTH = 64
MAX_FIELDS = 16


class ConfigError(Exception):
    """Configuration file error.

    Raised when settings files cannot be loaded or parsed, or do not hold a
    mapping at the top level.
    """
    pass


def load_config(path: Path) -> dict[str, Any]:
    """Load settings from a JSON or YAML file.

    Format is determined by file extension (.json, .yaml, .yml) and
    auto-detected otherwise, trying JSON first. An empty YAML file loads as
    an empty mapping.

    Args:
        path: Path to settings file

    Returns:
        Settings dictionary

    Raises:
        ConfigError: If the file cannot be loaded, has invalid syntax, or is
            not a mapping

    Example:
        >>> from pathlib import Path
        >>> from fieldchain.cli.config import load_config
        >>>
        >>> config = load_config(Path("settings.yaml"))
        >>> print(config["fields"])  # ["sku", "warehouse"]
    """
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        content = path.read_text()
    except OSError as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    try:
        if path.suffix == ".json":
            config = json.loads(content)
        elif path.suffix in (".yaml", ".yml"):
            config = yaml.safe_load(content)
        else:
            try:
                config = json.loads(content)
            except json.JSONDecodeError:
                config = yaml.safe_load(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(
            f"Configuration in {path} must be a mapping, got {type(config).__name__}"
        )
    return config


def merge_config(base: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    """Merge CLI arguments into base settings.

    Only non-None override values are applied, so settings file values are
    kept when the matching CLI argument is not given. An empty list given
    for "fields" is treated as not given.

    Example:
        >>> merge_config({"fields": ["sku"], "log_level": "info"}, log_level="debug")
        {'fields': ['sku'], 'log_level': 'debug'}
    """
    merged = base.copy()

    for key, value in overrides.items():
        if value is None:
            continue
        if key == "fields" and not value:
            continue
        merged[key] = value
    return merged


def validate_config(config: dict[str, Any]) -> list[str]:
    """Validate settings values.

    Every setting is checked in continuous mode so that all problems are
    reported together.

    Args:
        config: Settings dictionary to validate

    Returns:
        List of validation error messages (empty list if valid)

    Example:
        >>> validate_config({"log_level": "loud"})
        ['Invalid Input: log_level. Values can only be either [debug, info, warning, error].']
    """
    chain = RuleChain("check-config")

    (
        chain.bind(config.get("session_name"))
        .field("session_name")
        .continuous()
        .must_have_max_length(MAX_SESSION_NAME_LENGTH)
        .must_match_regex(SESSION_NAME_PATTERN)
    )

    fields = config.get("fields")
    chain.bind(fields).field("fields").continuous().must_be_true(
        fields is None or isinstance(fields, list), "Must be a list of field names"
    )
    if isinstance(fields, list):
        chain.must_not_exceed_max_items(MAX_FIELDS)
        for i, name in enumerate(fields):
            (
                chain.bind(name)
                .field_indexed("fields[{0}]", i)
                .continuous()
                .required()
                .must_match_regex(FIELD_NAME_PATTERN)
            )

    chain.bind(config.get("max_items")).field("max_items").continuous().must_be_numeric()

    log_level = config.get("log_level")
    if isinstance(log_level, str):
        log_level = log_level.lower()
    chain.bind(log_level).field("log_level").continuous().must_be_one_of(*LOG_LEVELS)

    unknown = sorted(set(config) - KNOWN_SETTINGS)
    chain.bind(unknown).field("settings").continuous().must_be_true(
        not unknown, f"Unknown settings {', '.join(unknown)}"
    )

    return chain.result().messages
