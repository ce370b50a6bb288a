"""GitHub API adapter."""

from datetime import datetime
from typing import Any, Dict

import requests

from ticketgate.adapters.base import GitPlatformAdapter, GitPlatformError
from ticketgate.models import PullRequest


def _parse_iso(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _pr_from_api(data: Dict[str, Any]) -> PullRequest:
    head = data.get("head") or {}
    base = data.get("base") or {}
    return PullRequest(
        number=data["number"],
        title=data.get("title") or "",
        head_branch=head.get("ref", ""),
        base_branch=base.get("ref", ""),
        created_at=_parse_iso(data["created_at"]),
        html_url=data.get("html_url"),
    )


class GitHubAdapter(GitPlatformAdapter):
    """GitHub REST API implementation."""

    def __init__(self, token: str, api_url: str = "https://api.github.com", timeout: float = 30) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"Bearer {token}"
        self._session.headers["Accept"] = "application/vnd.github+json"

    def _request(self, method: str, path: str) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        try:
            resp = self._session.request(method, url, timeout=self._timeout)
        except requests.Timeout as e:
            raise GitPlatformError(f"{method} {path} timed out after {self._timeout}s") from e
        except requests.RequestException as e:
            raise GitPlatformError(f"{method} {path} failed: {e}") from e
        if resp.status_code == 404:
            raise GitPlatformError(f"Not found: {path}")
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                body = resp.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                msg = body["message"]
            raise GitPlatformError(f"{resp.status_code}: {msg}")
        return resp

    def get_pr(self, repo: str, pr_number: int) -> PullRequest:
        resp = self._request("GET", f"/repos/{repo}/pulls/{pr_number}")
        try:
            data = resp.json()
        except ValueError as e:
            raise GitPlatformError(f"Invalid JSON for pull request #{pr_number}: {e}") from e
        if not isinstance(data, dict):
            raise GitPlatformError(f"Unexpected payload for pull request #{pr_number}")
        try:
            return _pr_from_api(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise GitPlatformError(f"Malformed pull request payload for #{pr_number}: {e}") from e
