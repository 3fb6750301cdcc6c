"""Value predicates shared by RuleChain rules.

These helpers decide whether a value is absent, numeric, a valid e-mail
address, and so on. They never raise validation failures themselves; the
parsing helpers raise RuleContractError when a value cannot be interpreted
the way a rule requires.
"""

import math
import re
from collections.abc import Collection
from decimal import Decimal, InvalidOperation
from typing import Any

import polars as pl

from fieldchain.core.exceptions import RuleContractError

EMAIL_PATTERN = re.compile(
    r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,63}$"
)

# RFC 5321 path limits
MAX_EMAIL_LENGTH = 254
MAX_LOCAL_PART_LENGTH = 64


def is_absent(value: Any) -> bool:
    """Check whether a value counts as absent.

    None, empty or whitespace-only strings, and empty collections (including
    an empty polars DataFrame) are absent. Zero and False are present.

    Example:
        >>> is_absent(None), is_absent("  "), is_absent([]), is_absent(0)
        (True, True, True, False)
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, pl.DataFrame):
        return value.height == 0
    if isinstance(value, Collection):
        return len(value) == 0
    return False


def is_digits(value: Any) -> bool:
    """Check that the string form of value is made of digits only."""
    text = str(value)
    return text != "" and text.isdecimal()


def is_email(value: Any, pattern: re.Pattern[str] = EMAIL_PATTERN) -> bool:
    """Check that value is a syntactically valid e-mail address."""
    text = str(value)
    if len(text) > MAX_EMAIL_LENGTH:
        return False
    local_part, _, _ = text.partition("@")
    if len(local_part) > MAX_LOCAL_PART_LENGTH:
        return False
    return pattern.match(text) is not None


def matches(value: Any, regex: str | re.Pattern[str]) -> bool:
    """Check that the whole string form of value matches regex."""
    return re.fullmatch(regex, str(value)) is not None


def render_values(values: Collection[Any]) -> str:
    """Render values as a bracketed, comma separated list.

    Example:
        >>> render_values([1, 2, 3])
        '[1, 2, 3]'
    """
    return "[" + ", ".join(str(v) for v in values) + "]"


def as_int(value: Any, rule: str, field: str | None = None) -> int:
    """Interpret value as an integer.

    Accepts ints and strings holding an integer literal.

    Raises:
        RuleContractError: If value cannot be read as an integer
    """
    if isinstance(value, bool):
        raise RuleContractError(
            "Value is not an integer", rule=rule, field=field, value=value, reason="bool given"
        )
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as e:
        raise RuleContractError(
            "Value is not an integer", rule=rule, field=field, value=value, reason=str(e)
        ) from e


def as_number(value: Any, rule: str, field: str | None = None) -> int | float | Decimal:
    """Interpret value as a number for bound comparisons.

    ints are returned unchanged; floats and Decimals are returned when
    finite; strings are parsed as an integer first and as a Decimal otherwise.

    Raises:
        RuleContractError: If value cannot be read as a finite number
    """
    if isinstance(value, bool):
        raise RuleContractError(
            "Value is not numeric", rule=rule, field=field, value=value, reason="bool given"
        )
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        number = value
    else:
        text = str(value).strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = Decimal(text)
        except InvalidOperation as e:
            raise RuleContractError(
                "Value is not numeric", rule=rule, field=field, value=value, reason="unparsable"
            ) from e
    if not is_finite(number):
        raise RuleContractError(
            "Value is not numeric", rule=rule, field=field, value=value, reason="not finite"
        )
    return number


def is_finite(number: float | Decimal) -> bool:
    if isinstance(number, Decimal):
        return number.is_finite()
    return math.isfinite(number)


def item_count(value: Any, rule: str, field: str | None = None) -> int:
    """Return the number of items in a collection or DataFrame.

    Raises:
        RuleContractError: If value is not a sized collection
    """
    if isinstance(value, pl.DataFrame):
        return value.height
    if isinstance(value, str) or not isinstance(value, Collection):
        raise RuleContractError(
            "Value is not a collection",
            rule=rule,
            field=field,
            value=value,
            reason=f"got {type(value).__name__}",
        )
    return len(value)
