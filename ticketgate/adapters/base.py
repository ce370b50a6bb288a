"""Abstract bases for the Git platform and issue tracker adapters."""

from abc import ABC, abstractmethod

from ticketgate.models import FailureKind, PullRequest, Ticket


class TransportError(Exception):
    """Raised when a remote call fails (network, HTTP status or payload)."""

    failure = FailureKind.TRANSPORT_FAILURE


class GitPlatformError(TransportError):
    """Raised when a Git platform API call fails."""

    pass


class IssueTrackerError(TransportError):
    """Raised when an issue tracker API call fails."""

    pass


class GitPlatformAdapter(ABC):
    """Abstract interface for Git hosting platforms (pull request metadata)."""

    @abstractmethod
    def get_pr(self, repo: str, pr_number: int) -> PullRequest:
        """Fetch PR by number."""
        ...


class IssueTrackerAdapter(ABC):
    """Abstract interface for issue trackers."""

    @abstractmethod
    def get_ticket(self, ticket_id: str) -> Ticket:
        """Fetch ticket by id."""
        ...
