"""Fluent field validation for fieldchain.

This module provides the RuleChain validator together with the structures it
reports through: ValidationFailure records, the ErrorSink that accumulates
them in continuous mode, and the non-raising ValidationResult.
"""

# Rule chain
from fieldchain.validation.chain import BindingState, RuleChain, ValidationMode, new_rule_chain

# Duplicate detection
from fieldchain.validation.duplicates import field_key, find_duplicates

# Failure records and accumulation
from fieldchain.validation.failure import ValidationFailure
from fieldchain.validation.result import ValidationResult
from fieldchain.validation.sink import ErrorSink

__all__ = [
    # Rule chain
    "RuleChain",
    "ValidationMode",
    "BindingState",
    "new_rule_chain",
    # Failure records and accumulation
    "ValidationFailure",
    "ErrorSink",
    "ValidationResult",
    # Duplicate detection
    "field_key",
    "find_duplicates",
]
