"""Remote adapters: Git platform (pull requests) and issue tracker (tickets)."""

from ticketgate.adapters.base import (
    GitPlatformAdapter,
    GitPlatformError,
    IssueTrackerAdapter,
    IssueTrackerError,
    TransportError,
)
from ticketgate.adapters.github import GitHubAdapter
from ticketgate.adapters.jira import JiraAdapter

__all__ = [
    "GitPlatformAdapter",
    "GitPlatformError",
    "GitHubAdapter",
    "IssueTrackerAdapter",
    "IssueTrackerError",
    "JiraAdapter",
    "TransportError",
]
