"""Property-based tests for RuleChain modes and prefixes.

These properties hold for any field name and value:
- Absent values fail required() and nothing else
- In continuous mode only the first failure of a binding carries the prefix
- finalize() raises exactly when something was recorded
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fieldchain.core.exceptions import ValidationError
from fieldchain.validation.chain import RuleChain
from tests.conftest import absent_values, field_names, present_strings


@given(field_names(), absent_values())
def test_absent_value_fails_required(field_name, value):
    chain = RuleChain("props")

    with pytest.raises(ValidationError) as exc_info:
        chain.bind(value).field(field_name).required()

    assert exc_info.value.message == f"Invalid Input: {field_name}. It is a mandatory field."


@given(field_names(), absent_values())
def test_absent_value_skips_other_rules(field_name, value):
    chain = RuleChain("props")

    (
        chain.bind(value)
        .field(field_name)
        .must_be_null_when(True, "always")
        .must_be_one_of("never")
        .must_be_one_of_int(-1)
        .must_match_regex(r"(?!)")
        .must_be_numeric()
        .must_have_exact_length(999)
        .must_have_max_length(0)
        .must_not_exceed_max_items(0)
        .email()
        .must_be_at_most(-1)
        .must_be_at_least(1)
    )


@given(field_names(), present_strings())
def test_present_string_passes_required(field_name, value):
    RuleChain("props").bind(value).field(field_name).required()


@given(field_names(), st.integers(min_value=2, max_value=6))
def test_only_first_failure_prefixed(field_name, failure_count):
    chain = RuleChain("props")
    chain.bind("x").field(field_name).continuous()
    for i in range(failure_count):
        chain.must_be_true(False, f"Check {i}")

    messages = chain.errors.messages
    assert messages[0] == f"Invalid Input: {field_name}. Check 0."
    assert messages[1:] == [f"Check {i}." for i in range(1, failure_count)]

    with pytest.raises(ValidationError) as exc_info:
        chain.finalize()
    assert exc_info.value.message == "[ " + ",".join(messages) + " ]"


@given(st.lists(st.tuples(field_names(), st.booleans()), max_size=10))
def test_finalize_raises_iff_recorded(bindings):
    chain = RuleChain("props")
    for field_name, passes in bindings:
        chain.bind("x").field(field_name).continuous().must_be_true(passes, "Failed")

    failed = [name for name, passes in bindings if not passes]
    assert len(chain.errors) == len(failed)
    assert chain.errors.messages == [f"Invalid Input: {name}. Failed." for name in failed]

    if failed:
        with pytest.raises(ValidationError):
            chain.finalize()
    else:
        chain.finalize()


@given(st.integers(min_value=0, max_value=10_000), st.integers(min_value=0, max_value=10_000))
def test_numeric_bounds_agree_with_comparison(value, bound):
    chain = RuleChain("props")
    chain.bind(value).field("n").continuous().must_be_at_most(bound).must_be_at_least(bound)

    expected = int(value > bound) + int(value < bound)
    assert len(chain.errors) == expected
