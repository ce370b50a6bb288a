"""Ordered validation rules for the pull request gate.

Each rule is data: a name, the failure kind it reports, an ``applies``
predicate (rules that do not apply are skipped, not downgraded), a
``check`` predicate and a message builder. ``run_rules`` evaluates a
sequence in order and stops at the first failure.

LOCAL_RULES only need the pull request and the extracted ticket id;
REMOTE_RULES need the ticket fetched from the tracker. Append to these
tuples to add rules.
"""

import re
from typing import Callable, Iterable

from pydantic import BaseModel, ConfigDict

from ticketgate.models import FailureKind, GateContext, ValidationOutcome

MERGE_BLOCK_RE = re.compile(r"DO NOT MERGE", re.IGNORECASE)

ACCEPTED_ISSUE_TYPES = (
    "A360",
    "Bug",
    "DPBug",
    "QA Bug",
    "Story",
    "[System] Incident",
    "Task",
    "Sub-task",
)

READY_STATUS = "Ready For Deployment"

# Destination branches that ship to production
RELEASE_BRANCH_PREFIXES = ("release", "hotfix")

_INDENT_AFTER_NEWLINE_RE = re.compile(r"\n\s+")


def format_multiline_text(text: str) -> str:
    """Drop indentation after each newline and strip surrounding whitespace."""
    return _INDENT_AFTER_NEWLINE_RE.sub("\n", text).strip()


def is_release_branch(branch: str | None) -> bool:
    return bool(branch) and branch.startswith(RELEASE_BRANCH_PREFIXES)


def _always(ctx: GateContext) -> bool:
    return True


class Rule(BaseModel):
    """One gate rule."""

    model_config = ConfigDict(frozen=True)

    name: str
    failure: FailureKind
    check: Callable[[GateContext], bool]
    message: Callable[[GateContext], str]
    applies: Callable[[GateContext], bool] = _always

    def evaluate(self, ctx: GateContext) -> ValidationOutcome | None:
        """Return a failed outcome, or None when the rule passes or does not apply."""
        if not self.applies(ctx) or self.check(ctx):
            return None
        return ValidationOutcome.fail(
            self.failure,
            format_multiline_text(self.message(ctx)),
            ticket_id=ctx.ticket_id,
        )


def run_rules(rules: Iterable[Rule], ctx: GateContext) -> ValidationOutcome | None:
    """Evaluate rules in order; return the first failure or None."""
    for rule in rules:
        outcome = rule.evaluate(ctx)
        if outcome is not None:
            return outcome
    return None


def branch_ticket_missing_message(branch_name: str) -> str:
    return format_multiline_text(
        f"""The branch
        "{branch_name}"
        must include an existing JIRA ticket ID.
        Rename the branch to reference the relevant ticket.
        """
    )


def _title(ctx: GateContext) -> str:
    return ctx.pull_request.title if ctx.pull_request else ""


def _title_contains_ticket(ctx: GateContext) -> bool:
    return ctx.ticket_id in _title(ctx)


def _title_has_no_merge_block(ctx: GateContext) -> bool:
    return MERGE_BLOCK_RE.search(_title(ctx)) is None


def _issue_type_accepted(ctx: GateContext) -> bool:
    issue_type = (ctx.ticket.issue_type if ctx.ticket else "").lower()
    return issue_type in {t.lower() for t in ACCEPTED_ISSUE_TYPES}


def _status_ready(ctx: GateContext) -> bool:
    status = ctx.ticket.status if ctx.ticket else ""
    return status.lower() == READY_STATUS.lower()


def _has_valid_fix_version(ctx: GateContext) -> bool:
    if ctx.ticket is None:
        return False
    for fv in ctx.ticket.fix_versions:
        if not fv.released:
            return True
        if fv.release_date is not None and fv.release_date >= ctx.reference_date:
            return True
    return False


def _targets_release(ctx: GateContext) -> bool:
    return is_release_branch(ctx.base_branch)


TITLE_CONTAINS_TICKET = Rule(
    name="TitleContainsTicket",
    failure=FailureKind.TITLE_TICKET_MISMATCH,
    check=_title_contains_ticket,
    message=lambda ctx: f"""The title message
        "{_title(ctx)}"
        must include an existing JIRA ticket ID.
        Rename the Pull Request title to reference the relevant ticket.
        """,
)

NO_MERGE_BLOCK = Rule(
    name="NoMergeBlock",
    failure=FailureKind.MERGE_BLOCKED,
    check=_title_has_no_merge_block,
    message=lambda ctx: f"""The title message
        "{_title(ctx)}"
        instructs this Pull Request should not be merged. Remove "DO NOT MERGE"
        text from title before proceeding.
        """,
)

ACCEPTED_ISSUE_TYPE = Rule(
    name="AcceptedIssueType",
    failure=FailureKind.ISSUE_TYPE_REJECTED,
    check=_issue_type_accepted,
    message=lambda ctx: (
        f"""The issue type for {ctx.ticket_id}
        is "{ctx.ticket.issue_type if ctx.ticket else ''}". The accepted issue types are:
        """
        + "\n".join(ACCEPTED_ISSUE_TYPES)
    ),
)

RELEASE_READINESS = Rule(
    name="ReleaseReadiness",
    failure=FailureKind.STATUS_NOT_READY,
    applies=_targets_release,
    check=_status_ready,
    message=lambda ctx: f"""The ticket {ctx.ticket_id} has status "{ctx.ticket.status if ctx.ticket else ''}".
        Please move to "{READY_STATUS}" and try again.
        """,
)

FIX_VERSION_ASSIGNED = Rule(
    name="FixVersionAssigned",
    failure=FailureKind.NO_VALID_FIX_VERSION,
    applies=_targets_release,
    check=_has_valid_fix_version,
    message=lambda ctx: f"""The ticket {ctx.ticket_id} hasn't been assigned a valid fixVersion.
        Please assign under Release Checklist tab and try again. It could also be the case
        that the assigned fix versions do not have an assigned release date. Please check
        with the release team to confirm.
        """,
)

LOCAL_RULES = (TITLE_CONTAINS_TICKET, NO_MERGE_BLOCK)
REMOTE_RULES = (ACCEPTED_ISSUE_TYPE, RELEASE_READINESS, FIX_VERSION_ASSIGNED)
