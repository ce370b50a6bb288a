"""Jira REST API adapter (read-only issue lookup)."""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from ticketgate.adapters.base import IssueTrackerAdapter, IssueTrackerError
from ticketgate.models import FixVersion, Ticket

ISSUE_API_PATH = "/rest/api/latest/issue/"

# Jira writes offsets without a colon: 2024-01-15T10:00:00.000-0700
_COMPACT_OFFSET_RE = re.compile(r"([+-]\d{2})(\d{2})$")


def _parse_jira_datetime(s: str) -> datetime:
    return datetime.fromisoformat(_COMPACT_OFFSET_RE.sub(r"\1:\2", s.replace("Z", "+00:00")))


def _name_of(field: Any) -> str:
    if isinstance(field, dict):
        return field.get("name") or ""
    return ""


def _fix_versions_from_api(items: List[Dict[str, Any]]) -> List[FixVersion]:
    return [
        FixVersion(
            name=item.get("name") or "",
            release_date=item.get("releaseDate") or None,
            released=bool(item.get("released", False)),
        )
        for item in items
        if isinstance(item, dict)
    ]


def _created_from_api(value: Any) -> Optional[datetime]:
    """Parse fields.created; None when absent or not a Jira timestamp."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return _parse_jira_datetime(value)
    except ValueError:
        return None


def _ticket_from_api(ticket_id: str, data: Dict[str, Any]) -> Ticket:
    fields = data.get("fields") or {}
    if not isinstance(fields, dict):
        raise ValueError("fields is not an object")
    return Ticket(
        id=data.get("key") or ticket_id,
        issue_type=_name_of(fields.get("issuetype")),
        status=_name_of(fields.get("status")),
        fix_versions=_fix_versions_from_api(fields.get("fixVersions") or []),
        created=_created_from_api(fields.get("created")),
    )


def normalize_base_url(base_url: str) -> str:
    """Return base URL with scheme and without trailing slash.

    A bare hostname (acme.atlassian.net) is served over https.
    """
    url = base_url.strip().rstrip("/")
    if "://" not in url:
        url = f"https://{url}"
    return url


class JiraAdapter(IssueTrackerAdapter):
    """Jira Cloud / Server implementation using basic auth (email + API token)."""

    def __init__(self, base_url: str, user_email: str, api_token: str, timeout: float = 30) -> None:
        self._base_url = normalize_base_url(base_url)
        self._timeout = timeout
        self._session = requests.Session()
        self._session.auth = (user_email, api_token)
        self._session.headers["Accept"] = "application/json"
        self._session.headers["Content-Type"] = "application/json"

    def _request(self, method: str, path: str) -> requests.Response:
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.request(method, url, timeout=self._timeout)
        except requests.Timeout as e:
            raise IssueTrackerError(f"Jira {method} {path} timed out after {self._timeout}s") from e
        except requests.RequestException as e:
            raise IssueTrackerError(f"Jira {method} {path} request failed: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                body = resp.json()
            except ValueError:
                body = None
            messages = body.get("errorMessages") if isinstance(body, dict) else None
            if isinstance(messages, list) and messages:
                msg = "; ".join(str(m) for m in messages)
            raise IssueTrackerError(f"{resp.status_code}: {msg}")
        return resp

    def get_ticket(self, ticket_id: str) -> Ticket:
        resp = self._request("GET", f"{ISSUE_API_PATH}{ticket_id}")
        try:
            data = resp.json()
        except ValueError as e:
            raise IssueTrackerError(f"Invalid JSON for {ticket_id}: {e}") from e
        if not isinstance(data, dict):
            raise IssueTrackerError(f"Unexpected payload for {ticket_id}")
        try:
            return _ticket_from_api(ticket_id, data)
        except (TypeError, ValueError) as e:
            raise IssueTrackerError(f"Malformed ticket payload for {ticket_id}: {e}") from e
