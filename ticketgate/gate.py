"""Pull request gate: refresh context, extract ticket, run rules.

Stages run strictly in order and each one either hands an updated
GateContext to the next or stops the run with a ValidationOutcome:

    refresh PR -> extract ticket id -> local rules -> fetch ticket -> remote rules

Network failures while refreshing context are raised as ContextRefreshError;
rule failures are returned as outcomes.
"""

import logging
from datetime import date
from typing import Sequence

from ticketgate.adapters.base import GitPlatformAdapter, IssueTrackerAdapter, TransportError
from ticketgate.extractor import extract_ticket_id
from ticketgate.models import FailureKind, GateContext, PullRequest, Ticket, ValidationOutcome
from ticketgate.rules import LOCAL_RULES, REMOTE_RULES, Rule, branch_ticket_missing_message, run_rules


class ContextRefreshError(Exception):
    """Raised when PR or ticket context cannot be fetched.

    The message names only the PR or ticket; the underlying
    TransportError is kept as __cause__ and logged.
    """

    failure = FailureKind.CONTEXT_REFRESH_FAILED


class PullRequestGate:
    """Validates a pull request against its Jira ticket."""

    def __init__(
        self,
        platform: GitPlatformAdapter | None,
        tracker: IssueTrackerAdapter,
        local_rules: Sequence[Rule] = LOCAL_RULES,
        remote_rules: Sequence[Rule] = REMOTE_RULES,
        log: logging.Logger | None = None,
    ) -> None:
        self._platform = platform
        self._tracker = tracker
        self._local_rules = tuple(local_rules)
        self._remote_rules = tuple(remote_rules)
        self._log = log or logging.getLogger("ticketgate.gate")

    def validate(self, repo: str, pr_number: int) -> ValidationOutcome:
        """Run the full gate for one pull request.

        Raises:
            ContextRefreshError: PR metadata or the ticket could not be fetched.
        """
        pr = self._refresh_pull_request(repo, pr_number)
        self._log.info(
            "PR #%s | head=%s | base=%s | title=%r", pr.number, pr.head_branch, pr.base_branch, pr.title
        )

        ticket_id = extract_ticket_id(pr.head_branch)
        if ticket_id is None:
            return ValidationOutcome.fail(
                FailureKind.BRANCH_TICKET_MISSING,
                branch_ticket_missing_message(pr.head_branch),
            )

        ctx = GateContext(
            ticket_id=ticket_id,
            reference_date=pr.created_at.date(),
            pull_request=pr,
            base_branch=pr.base_branch,
        )
        failed = run_rules(self._local_rules, ctx)
        if failed is not None:
            return failed

        ctx = ctx.with_ticket(self._fetch_ticket(ticket_id, f"Pull Request {pr_number}"))
        return self._finish(ctx)

    def check_ticket(self, ticket_id: str, base_branch: str | None = None) -> ValidationOutcome:
        """Run the ticket rules for an explicit ticket id (no pull request).

        Release rules apply only when base_branch is a release/hotfix branch;
        fix versions are compared against today's date.

        Raises:
            ContextRefreshError: the ticket could not be fetched.
        """
        ticket_id = ticket_id.strip().upper()
        ticket = self._fetch_ticket(ticket_id, f"ticket {ticket_id}")
        ctx = GateContext(
            ticket_id=ticket_id,
            reference_date=date.today(),
            base_branch=base_branch,
            ticket=ticket,
        )
        return self._finish(ctx)

    def _finish(self, ctx: GateContext) -> ValidationOutcome:
        failed = run_rules(self._remote_rules, ctx)
        if failed is not None:
            return failed
        return ValidationOutcome.ok(ctx.ticket_id)

    def _refresh_pull_request(self, repo: str, pr_number: int) -> PullRequest:
        if self._platform is None:
            raise ValueError("PullRequestGate was created without a Git platform adapter")
        try:
            return self._platform.get_pr(repo, pr_number)
        except TransportError as e:
            self._log.warning("%s fetching PR #%s from %s: %s", e.failure.value, pr_number, repo, e)
            raise ContextRefreshError(f"Unable to refresh context for Pull Request {pr_number}.") from e

    def _fetch_ticket(self, ticket_id: str, subject: str) -> Ticket:
        try:
            ticket = self._tracker.get_ticket(ticket_id)
        except TransportError as e:
            self._log.warning("%s fetching ticket %s: %s", e.failure.value, ticket_id, e)
            raise ContextRefreshError(f"Unable to refresh context for {subject}.") from e
        self._log.info(
            "Ticket %s | type=%s | status=%s | fix_versions=%d | created=%s",
            ticket.id,
            ticket.issue_type,
            ticket.status,
            len(ticket.fix_versions),
            ticket.created.isoformat() if ticket.created else "-",
        )
        return ticket
