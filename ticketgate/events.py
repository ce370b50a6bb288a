"""Triggering event payload (pull_request / pull_request_target).

Only the repository and PR number are taken from the payload; everything
else is re-fetched from the API because the payload may be stale (e.g. the
title was edited after the event fired).
"""

import json
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel


class EventError(Exception):
    """Raised when the event payload is missing or is not a pull request event."""

    pass


class PullRequestEvent(BaseModel):
    """Pull request event (action opened, edited, synchronize, ...)."""

    repo: str
    pr_number: int


def parse_pull_request_event(payload: Dict[str, Any], default_repo: str | None = None) -> PullRequestEvent:
    """Build PullRequestEvent from a webhook payload dict."""
    pull = payload.get("pull_request") or {}
    pr_number = pull.get("number") if isinstance(pull, dict) else None
    if pr_number is None:
        raise EventError("Event payload has no pull_request.number; run on pull_request events")
    repo_payload = payload.get("repository") or {}
    repo = repo_payload.get("full_name") or default_repo
    if not repo:
        raise EventError("Event payload has no repository.full_name and no repository is configured")
    try:
        return PullRequestEvent(repo=repo, pr_number=int(pr_number))
    except (TypeError, ValueError) as e:
        raise EventError(f"Invalid pull request number: {pr_number!r}") from e


def load_pull_request_event(path: Path, default_repo: str | None = None) -> PullRequestEvent:
    """Read and parse the event file written by the CI runner."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise EventError(f"Event file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise EventError(f"Event file is not valid JSON: {path}") from e
    if not isinstance(payload, dict):
        raise EventError(f"Unexpected event payload in {path}")
    return parse_pull_request_event(payload, default_repo=default_repo)
