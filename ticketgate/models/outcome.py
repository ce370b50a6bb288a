"""Gate outcome: pass/fail plus the failure kind and formatted reason."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class FailureKind(str, Enum):
    """Why the gate failed."""

    BRANCH_TICKET_MISSING = "BranchTicketMissing"
    TITLE_TICKET_MISMATCH = "TitleTicketMismatch"
    MERGE_BLOCKED = "MergeBlocked"
    ISSUE_TYPE_REJECTED = "IssueTypeRejected"
    STATUS_NOT_READY = "StatusNotReady"
    NO_VALID_FIX_VERSION = "NoValidFixVersion"
    TRANSPORT_FAILURE = "TransportFailure"
    CONTEXT_REFRESH_FAILED = "ContextRefreshFailed"


class ValidationOutcome(BaseModel):
    """Single result of one gate run."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    failure_reason: str | None = None
    failure: FailureKind | None = None
    ticket_id: str | None = None

    @classmethod
    def ok(cls, ticket_id: str | None = None) -> "ValidationOutcome":
        return cls(passed=True, ticket_id=ticket_id)

    @classmethod
    def fail(cls, failure: FailureKind, reason: str, ticket_id: str | None = None) -> "ValidationOutcome":
        return cls(passed=False, failure=failure, failure_reason=reason, ticket_id=ticket_id)
