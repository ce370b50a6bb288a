"""Ticket id extraction from branch names."""

import re

# Jira project keys whose tickets may back a pull request
PROJECT_KEYS = (
    "DPBUG",
    "DPDEV",
    "DPDO",
    "DPDX",
    "DPEN",
    "DPEPAM",
    "DPMC",
    "DPOPS",
    "DPOSF",
    "DPSM",
    "DPSOW",
    "DPSUPPORT",
    "EMEAX",
    "EPP",
    "RMS",
    "BRC",
)

TICKET_ID_RE = re.compile(r"(?:" + "|".join(PROJECT_KEYS) + r")-\d+", re.IGNORECASE)


def extract_ticket_id(branch_name: str) -> str | None:
    """Return the first ticket id found in a branch name.

    Matching is case-insensitive and ignores surrounding text
    (feature/dpbug-1234-cart -> DPBUG-1234).

    Args:
        branch_name: Head branch of the pull request.

    Returns:
        Uppercased ticket id, or None when no known project key is present.
    """
    if not branch_name:
        return None
    match = TICKET_ID_RE.search(branch_name)
    if match is None:
        return None
    return match.group(0).upper()
