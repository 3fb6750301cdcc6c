"""Shared test fixtures and Hypothesis strategies for fieldchain tests."""

import pytest
from hypothesis import settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from fieldchain.validation.chain import RuleChain
from fieldchain.validation.failure import ValidationFailure

settings.register_profile("fieldchain", max_examples=100, deadline=None)
settings.load_profile("fieldchain")


FIELD_NAME_ALPHABET = st.characters(
    whitelist_categories=("Lu", "Ll", "Nd"),
    whitelist_characters="_.[]",
)


@pytest.fixture
def chain() -> RuleChain:
    """A fresh RuleChain for one test session."""
    return RuleChain("testSession")


def field_names() -> st.SearchStrategy[str]:
    """Generate non-empty symbolic field names."""
    return st.text(alphabet=FIELD_NAME_ALPHABET, min_size=1, max_size=20)


def absent_values() -> st.SearchStrategy:
    """Generate values that count as absent.

    None, empty or whitespace-only strings, and empty collections.
    """
    return st.one_of(
        st.none(),
        st.text(alphabet=" \t\n", max_size=5),
        st.just([]),
        st.just(()),
        st.just({}),
        st.just(set()),
    )


def present_strings() -> st.SearchStrategy[str]:
    """Generate strings holding at least one non-whitespace character."""
    return st.text(
        alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd", "Pd")),
        min_size=1,
        max_size=30,
    )


@composite
def failures(draw: st.DrawFn) -> ValidationFailure:
    """Generate random ValidationFailure records."""
    return ValidationFailure(
        session_name=draw(field_names()),
        message=draw(st.text(min_size=1, max_size=60)),
        field_name=draw(st.one_of(st.none(), field_names())),
    )
