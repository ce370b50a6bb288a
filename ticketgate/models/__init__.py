"""Data models for pull requests, tickets and gate outcomes (Pydantic)."""

from ticketgate.models.context import GateContext
from ticketgate.models.outcome import FailureKind, ValidationOutcome
from ticketgate.models.pull_request import PullRequest
from ticketgate.models.ticket import FixVersion, Ticket

__all__ = ["FailureKind", "FixVersion", "GateContext", "PullRequest", "Ticket", "ValidationOutcome"]
