"""Context threaded through the gate pipeline stages."""

from datetime import date

from pydantic import BaseModel, ConfigDict

from ticketgate.models.pull_request import PullRequest
from ticketgate.models.ticket import Ticket


class GateContext(BaseModel):
    """Everything the rules may look at for one run.

    ticket is None until the tracker has been queried; base_branch is None
    in direct ticket mode without a destination branch.
    """

    model_config = ConfigDict(frozen=True)

    ticket_id: str
    reference_date: date
    pull_request: PullRequest | None = None
    base_branch: str | None = None
    ticket: Ticket | None = None

    def with_ticket(self, ticket: Ticket) -> "GateContext":
        return self.model_copy(update={"ticket": ticket})
