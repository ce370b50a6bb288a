"""Issue tracker ticket and fix version models."""

from datetime import date, datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FixVersion(BaseModel):
    """Tracker release a ticket is scheduled for."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    release_date: date | None = None
    released: bool = False


class Ticket(BaseModel):
    """Issue tracker record (id is always uppercase)."""

    model_config = ConfigDict(frozen=True)

    id: str
    issue_type: str = ""
    status: str = ""
    fix_versions: List[FixVersion] = Field(default_factory=list)
    created: datetime | None = None

    @field_validator("id")
    @classmethod
    def _uppercase_id(cls, v: str) -> str:
        return v.strip().upper()
