"""Duplicate detection over collections of composite keys.

Elements are reduced to a composite key, either by a caller-supplied key
function or by reading named fields off each element. The first occurrence
of a key is accepted; every later occurrence is reported as a duplicate.
"""

import logging
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping, Sequence
from typing import Any

import polars as pl

from fieldchain.core.exceptions import RuleContractError
from fieldchain.validation.predicates import is_absent

logger = logging.getLogger(__name__)

KeyFunction = Callable[[Any], Hashable]

_MISSING = object()


def read_field(element: Any, name: str) -> Any:
    """Read a named field off an element.

    Mappings are read by key, anything else by attribute. A field that does
    not exist reads as None.
    """
    if isinstance(element, Mapping):
        return element.get(name)
    value = getattr(element, name, _MISSING)
    if value is _MISSING:
        logger.debug("Field %r not found on %s", name, type(element).__name__)
        return None
    return value


def field_key(fields: Sequence[str]) -> KeyFunction:
    """Build a key function that extracts fields into a composite key.

    Absent field values are omitted from the key, so two elements lacking
    every listed field share the empty key ().

    Example:
        >>> key = field_key(["code", "name"])
        >>> key({"code": "A", "name": None})
        ('A',)
    """

    def key(element: Any) -> tuple[str, ...]:
        parts = []
        for name in fields:
            value = read_field(element, name)
            if not is_absent(value):
                parts.append(str(value))
        return tuple(parts)

    return key


def iter_elements(value: Any, fields: Sequence[str], rule: str) -> Iterator[Any]:
    """Iterate over the elements of a collection or the rows of a DataFrame.

    DataFrame rows are yielded as dicts restricted to the listed columns that
    exist in the frame, or holding every column when no fields are listed.

    Raises:
        RuleContractError: If value is not iterable as a collection
    """
    if isinstance(value, pl.DataFrame):
        if not fields:
            yield from value.iter_rows(named=True)
            return
        columns = [name for name in fields if name in value.columns]
        missing = [name for name in fields if name not in value.columns]
        if missing:
            logger.debug("Columns not found in DataFrame: %s", ", ".join(missing))
        if not columns:
            yield from ({} for _ in range(value.height))
            return
        yield from value.select(columns).iter_rows(named=True)
        return

    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise RuleContractError(
            "Value is not a collection of elements",
            rule=rule,
            reason=f"got {type(value).__name__}",
        )
    yield from value


def find_duplicates(elements: Iterable[Any], key: KeyFunction) -> list[int]:
    """Return the positions of elements whose key was already seen.

    Args:
        elements: Elements in iteration order
        key: Function mapping an element to a hashable composite key

    Returns:
        Positions of every repeated occurrence, in order. The first
        occurrence of each key is never included.

    Example:
        >>> find_duplicates([{"code": "A"}, {"code": "B"}, {"code": "A"}], field_key(["code"]))
        [2]
    """
    seen: set[Hashable] = set()
    positions: list[int] = []
    for position, element in enumerate(elements):
        composite = key(element)
        if composite in seen:
            positions.append(position)
        else:
            seen.add(composite)
    return positions
