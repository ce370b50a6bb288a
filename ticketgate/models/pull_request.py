"""Pull request snapshot model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class PullRequest(BaseModel):
    """Pull request as refreshed from the Git platform."""

    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    head_branch: str
    base_branch: str
    created_at: datetime
    html_url: str | None = None
