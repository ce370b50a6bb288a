"""Tests for ticket id extraction from branch names."""

import pytest

from ticketgate.extractor import PROJECT_KEYS, extract_ticket_id


@pytest.mark.parametrize("key", PROJECT_KEYS)
def test_every_project_key_is_recognized(key: str) -> None:
    """Each whitelisted key followed by digits is extracted."""
    assert extract_ticket_id(f"feature/{key}-42-something") == f"{key}-42"


def test_extraction_is_case_insensitive_and_uppercases() -> None:
    """Lower and mixed case keys come back uppercased."""
    assert extract_ticket_id("feature/dpbug-1234-cart") == "DPBUG-1234"
    assert extract_ticket_id("bugfix/DpDeV-7") == "DPDEV-7"


def test_surrounding_text_is_ignored() -> None:
    """Token is found anywhere in the branch name."""
    assert extract_ticket_id("DPBUG-1234") == "DPBUG-1234"
    assert extract_ticket_id("hotfix/prefix_EPP-99_suffix") == "EPP-99"


def test_first_match_wins() -> None:
    """When several ids are present the first one is returned."""
    assert extract_ticket_id("feature/RMS-1-and-BRC-2") == "RMS-1"


def test_unknown_project_key_returns_none() -> None:
    """Keys outside the whitelist are not tickets."""
    assert extract_ticket_id("feature/ABC-123") is None


def test_key_without_number_returns_none() -> None:
    """A project key needs a numeric suffix."""
    assert extract_ticket_id("feature/DPBUG-cart") is None


def test_no_ticket_returns_none() -> None:
    """Branch without any token (or empty) yields None."""
    assert extract_ticket_id("fix-something") is None
    assert extract_ticket_id("") is None
