"""Tests for issue title normalization."""

import pytest
from partyviews.core.normalize import normalize_title, same_issue


def test_punctuation_and_case_are_ignored():
    """Test that punctuation and case do not affect the key."""
    assert normalize_title("Brexit, Again!!") == normalize_title("brexit again")
    assert normalize_title("Brexit, Again!!") == "brexit again"


def test_whitespace_is_collapsed_and_trimmed():
    assert normalize_title("  NHS    Funding \t\n") == "nhs funding"
    assert normalize_title("Housing - Crisis") == "housing crisis"


def test_symbol_only_input_is_empty_key():
    assert normalize_title("") == ""
    assert normalize_title("?!...") == ""
    assert normalize_title("   ") == ""


def test_underscores_are_stripped():
    assert normalize_title("net_zero") == "netzero"


def test_non_string_input():
    assert normalize_title(None) == ""


def test_no_fuzzy_matching():
    """Synonyms and near-duplicates stay distinct."""
    assert not same_issue("NHS Funding", "Health Service Funding")
    assert not same_issue("Housing Crisis", "Housing Crises")
    assert same_issue("Cost of Living!", "cost of living")


if __name__ == "__main__":
    pytest.main([__file__])
