"""Board Schemas — compact board and user views embedded in other responses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str


class BoardSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None


class BoardWithOwner(BoardSummary):
    owner: UserSummary
    created_at: datetime
