"""RuleChain: fluent, per-field validation.

A RuleChain is created once per validation session (one incoming request,
one object graph) and re-bound to successive values and field names. Each
rule method checks the bound value and either raises straight away
(immediate mode, the default) or records the failure and carries on
(continuous mode), in which case finalize() raises everything at once.

Example:
    >>> chain = RuleChain("createOrder")
    >>> chain.bind(order.code).field("code").required().must_have_max_length(10)
    >>> for i, item in enumerate(order.items):
    ...     chain.bind(item.sku).field_indexed("items[{0}].sku", i).continuous().required()
    >>> chain.finalize()

A RuleChain is mutable and must not be shared across concurrent sessions.
"""

import logging
import re
from enum import Enum
from typing import Any

from fieldchain.core.exceptions import RuleContractError, ValidationError
from fieldchain.validation.duplicates import KeyFunction, field_key, find_duplicates, iter_elements
from fieldchain.validation.failure import ValidationFailure, current_timestamp
from fieldchain.validation.predicates import (
    as_int,
    as_number,
    is_absent,
    is_digits,
    is_email,
    item_count,
    matches,
    render_values,
)
from fieldchain.validation.result import ValidationResult
from fieldchain.validation.sink import ErrorSink

logger = logging.getLogger(__name__)

PERIOD = "."


class ValidationMode(Enum):
    """How a RuleChain handles a failed rule.

    Attributes:
        IMMEDIATE: Raise ValidationError on the first failure
        CONTINUOUS: Record failures and raise them together on finalize()
    """

    IMMEDIATE = "immediate"
    CONTINUOUS = "continuous"


class BindingState(Enum):
    """Lifecycle of the current binding.

    UNBOUND until the first bind(); every bind() moves to BOUND; a recorded
    failure moves to FAILED, after which failure messages for the same
    binding drop the "Invalid Input: <field>. " prefix.
    """

    UNBOUND = "unbound"
    BOUND = "bound"
    FAILED = "failed"


class RuleChain:
    """Chainable validator for one validation session.

    Attributes:
        session_name: Name of the owning session (API or operation name)
        value: Value currently under evaluation
        field_name: Symbolic name of the field under evaluation
        mode: Current ValidationMode, IMMEDIATE after every bind()
        state: Current BindingState
        errors: ErrorSink holding failures recorded in continuous mode
    """

    def __init__(self, session_name: str):
        """Initialize a rule chain.

        Args:
            session_name: Name of the validation session, used in every error
        """
        self._session_name = session_name
        self.value: Any = None
        self.field_name: str | None = None
        self.mode = ValidationMode.IMMEDIATE
        self.state = BindingState.UNBOUND
        self.errors = ErrorSink()

    @property
    def session_name(self) -> str:
        return self._session_name

    # ------------------------------------------------------------------
    # Binding and mode control
    # ------------------------------------------------------------------

    def bind(self, value: Any) -> "RuleChain":
        """Bind a new value under test.

        Resets the binding state and switches back to immediate mode. The
        field name is kept until field() is called again.
        """
        self.value = value
        self.state = BindingState.BOUND
        self.mode = ValidationMode.IMMEDIATE
        return self

    def field(self, name: str) -> "RuleChain":
        self.field_name = name
        return self

    def field_indexed(self, name: str, index: int) -> "RuleChain":
        """Set the field name, substituting index into its placeholder.

        Example:
            >>> RuleChain("s").field_indexed("items[{0}].code", 2).field_name
            'items[2].code'
        """
        self.field_name = name.format(index)
        return self

    def index(self, idx: int) -> "RuleChain":
        """Substitute idx into the placeholder of the current field name.

        Raises:
            RuleContractError: If no field name has been set
        """
        if self.field_name is None:
            raise RuleContractError(
                "index() called before field()", rule="index", reason="no field name set"
            )
        self.field_name = self.field_name.format(idx)
        return self

    def continuous(self) -> "RuleChain":
        """Record failures instead of raising, until the next bind()."""
        self.mode = ValidationMode.CONTINUOUS
        return self

    def reset(self) -> "RuleChain":
        """Clear recorded failures and return to immediate mode.

        Needed between independent validation passes that reuse this chain;
        nothing clears the ErrorSink implicitly.
        """
        self.errors.reset()
        self.mode = ValidationMode.IMMEDIATE
        if self.state is BindingState.FAILED:
            self.state = BindingState.BOUND
        return self

    @property
    def invalid_prefix(self) -> str:
        """Prefix the next failure message will carry."""
        if self.state is BindingState.FAILED:
            return ""
        return f"Invalid Input: {self.field_name}. "

    # ------------------------------------------------------------------
    # Fail/record decision
    # ------------------------------------------------------------------

    def _ensure_bound(self, rule: str) -> None:
        if self.state is BindingState.UNBOUND:
            raise RuleContractError(
                f"{rule}() called before bind()", rule=rule, reason="no value bound"
            )

    def _present(self, rule: str) -> bool:
        """Check binding and report whether the bound value is present."""
        self._ensure_bound(rule)
        return not is_absent(self.value)

    def _violation(self, text: str) -> None:
        self.fail(self.invalid_prefix + text)

    def fail(self, message: str) -> "RuleChain":
        """Route a raw message through the fail/record decision.

        In immediate mode a ValidationError is raised with the message as
        given. In continuous mode the failure is recorded and the binding
        moves to FAILED.

        Args:
            message: Complete failure message; no prefix is added

        Returns:
            self, in continuous mode

        Raises:
            ValidationError: In immediate mode
        """
        failure = ValidationFailure(
            session_name=self.session_name,
            message=message,
            field_name=self.field_name,
        )

        if self.mode is ValidationMode.IMMEDIATE:
            logger.error("Validation Errors : %s", message)
            raise ValidationError(
                message,
                session_name=self.session_name,
                field=self.field_name,
                timestamp=failure.timestamp,
                failures=(failure,),
            )

        self.errors.record(failure)
        self.state = BindingState.FAILED
        return self

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def required(self) -> "RuleChain":
        """Fail if the value is None, a blank string or an empty collection."""
        self._ensure_bound("required")
        if is_absent(self.value):
            self._violation("It is a mandatory field.")
        return self

    def must_be_null_when(self, should_be_null: bool, condition: str) -> "RuleChain":
        """Fail if a value is present while should_be_null holds.

        Args:
            should_be_null: When true, any present value is a failure
            condition: Description of the condition, used in the message
        """
        if self._present("must_be_null_when") and should_be_null:
            self._violation(f"Should be null when {condition}{PERIOD}")
        return self

    def must_be_one_of(self, *values: Any) -> "RuleChain":
        """Fail if the value is not one of values."""
        if self._present("must_be_one_of") and self.value not in values:
            self._violation(f"Values can only be either {render_values(values)}{PERIOD}")
        return self

    def must_be_one_of_int(self, *values: int, coding_scheme: str | None = None) -> "RuleChain":
        """Fail if the integer value is not one of values.

        Args:
            *values: Allowed integer codes
            coding_scheme: Optional name of the coding scheme the codes belong
                          to, appended to the message as a reference

        Raises:
            RuleContractError: If the value cannot be read as an integer
        """
        if not self._present("must_be_one_of_int"):
            return self
        if as_int(self.value, "must_be_one_of_int", self.field_name) not in values:
            message = f"Values can only be either {render_values(values)}{PERIOD}"
            if coding_scheme and coding_scheme.strip():
                message += f" Please refer to {coding_scheme} coding scheme."
            self._violation(message)
        return self

    def must_match_regex(self, regex: str | re.Pattern[str]) -> "RuleChain":
        """Fail if the string form of the value does not fully match regex."""
        if self._present("must_match_regex") and not matches(self.value, regex):
            pattern = regex.pattern if isinstance(regex, re.Pattern) else regex
            self._violation(f"Value must match the given regex {pattern}{PERIOD}")
        return self

    def must_be_numeric(self) -> "RuleChain":
        if self._present("must_be_numeric") and not is_digits(self.value):
            self._violation("Value must only contain numbers.")
        return self

    def must_have_exact_length(self, length: int) -> "RuleChain":
        if self._present("must_have_exact_length") and len(str(self.value)) != length:
            self._violation(f"Value must exactly be {length} characters long.")
        return self

    def must_have_max_length(self, length: int) -> "RuleChain":
        if self._present("must_have_max_length") and len(str(self.value)) > length:
            self._violation(f"Value must not exceed allowed {length} characters long.")
        return self

    def must_not_exceed_max_items(self, maximum: int) -> "RuleChain":
        """Fail if the collection holds more than maximum items.

        Raises:
            RuleContractError: If the value is not a collection
        """
        if not self._present("must_not_exceed_max_items"):
            return self
        if item_count(self.value, "must_not_exceed_max_items", self.field_name) > maximum:
            self._violation(f"List items must not exceed {maximum}{PERIOD}")
        return self

    def email(self) -> "RuleChain":
        if self._present("email") and not is_email(self.value):
            self._violation("Provide a valid Email Address.")
        return self

    def must_be_at_most(self, maximum: int | float) -> "RuleChain":
        """Fail if the numeric value is greater than maximum.

        Raises:
            RuleContractError: If the value cannot be read as a number
        """
        if not self._present("must_be_at_most"):
            return self
        if as_number(self.value, "must_be_at_most", self.field_name) > maximum:
            self._violation(f"Value must be lesser than or equals to {maximum}{PERIOD}")
        return self

    def must_be_at_least(self, minimum: int | float) -> "RuleChain":
        """Fail if the numeric value is less than minimum.

        Raises:
            RuleContractError: If the value cannot be read as a number
        """
        if not self._present("must_be_at_least"):
            return self
        if as_number(self.value, "must_be_at_least", self.field_name) < minimum:
            self._violation(f"Value must be greater than or equals to {minimum}{PERIOD}")
        return self

    def must_be_true(self, condition: bool, message: str) -> "RuleChain":
        """Fail with a custom message if condition is false.

        Evaluated whether or not the value is present. Use only for checks
        the other rules do not cover.
        """
        self._ensure_bound("must_be_true")
        if not condition:
            self._violation(f"{message}{PERIOD}")
        return self

    def must_not_have_duplicates(
        self, *fields: str, key: KeyFunction | None = None, label: str | None = None
    ) -> "RuleChain":
        """Fail once for every element that repeats an earlier composite key.

        The bound value must be a collection of elements or a polars
        DataFrame. By default the composite key is made of the named fields,
        read by key from mappings, by attribute from objects and by column
        from DataFrame rows; absent values are left out of the key, so
        elements missing every field collide with each other.

        The message names the fields, or label when one is given. With key=
        the field names are optional as long as a label is given.

        Args:
            *fields: Names of the fields that must be unique together
            key: Optional function mapping an element to its composite key,
                 used instead of reading the fields
            label: Optional description of the key used in the message
                   instead of the field names

        Raises:
            RuleContractError: If neither fields nor key and label are
                given, or the value is not a collection

        Example:
            >>> chain.bind(users).field("users").must_not_have_duplicates(
            ...     key=lambda user: user["email"].lower(), label="email (any case)"
            ... )
        """
        if not fields and (key is None or label is None):
            raise RuleContractError(
                "must_not_have_duplicates() needs field names, or a key function and a label",
                rule="must_not_have_duplicates",
                field=self.field_name,
            )
        if not self._present("must_not_have_duplicates"):
            return self

        elements = iter_elements(self.value, fields, "must_not_have_duplicates")
        positions = find_duplicates(elements, key or field_key(fields))
        if positions:
            logger.debug(
                "%s: duplicate elements at positions %s for %s",
                self.session_name,
                positions,
                self.field_name,
            )
        names = f"[{label}]" if label is not None else render_values(fields)
        for _ in positions:
            self._violation(f"Fields : {names} must be unique.")
        return self

    # ------------------------------------------------------------------
    # Finalization
    # ------------------------------------------------------------------

    def finalize(self) -> None:
        """Raise all failures recorded in continuous mode as one error.

        Does nothing when no failure was recorded. The error carries the
        joined messages and the last field name set on the chain. Callers
        using continuous mode must call this, or the recorded failures are
        never surfaced.

        Raises:
            ValidationError: If the ErrorSink holds any failure
        """
        if self.errors.is_empty():
            return

        logger.debug("%s has Validation Errors.", self.session_name)
        logger.debug("%s %r", self.session_name, self.errors)

        raise ValidationError(
            self.errors.joined_message(),
            session_name=self.session_name,
            field=self.field_name,
            timestamp=current_timestamp(),
            failures=self.errors.failures,
        )

    def result(self) -> ValidationResult:
        """Return the recorded failures without raising."""
        return ValidationResult(
            is_valid=self.errors.is_empty(),
            failures=list(self.errors.failures),
            session_name=self.session_name,
            field_name=self.field_name,
        )

    def __repr__(self) -> str:
        return (
            f"RuleChain(session_name={self.session_name!r}, field_name={self.field_name!r}, "
            f"mode={self.mode.value}, state={self.state.value}, errors={len(self.errors)})"
        )


def new_rule_chain(session_name: str) -> RuleChain:
    """Create a RuleChain for a new validation session."""
    return RuleChain(session_name)
