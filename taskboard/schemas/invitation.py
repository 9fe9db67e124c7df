"""Invitation Schemas — Pydantic models for issuing, listing and redeeming invitations.

Invariants:
    - InvitationCreate.email: stripped, single address, max 320 chars
    - The token is returned only to the owner who issued it (InvitationIssued)

Design Decisions:
    - Regex pattern over EmailStr: no extra dependency, the ledger only needs a deliverable-looking address
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard.core.domain_types import InvitationStatus
from taskboard.schemas.board import BoardSummary, BoardWithOwner, UserSummary


class InvitationCreate(BaseModel):
    email: str = Field(
        min_length=3, max_length=320, pattern=r"^\s*[^@\s]+@[^@\s]+\.[^@\s]+\s*$",
    )

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return v.strip()


class InvitationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    board_id: UUID
    email: str
    invited_by: UUID
    status: InvitationStatus
    expires_at: datetime
    created_at: datetime


class InvitationIssued(InvitationResponse):
    token: str


class InvitationDetailResponse(InvitationResponse):
    board: BoardSummary
    inviter: UserSummary | None = None
    expired: bool = False


class InvitationAccepted(BaseModel):
    message: str = "Invitation accepted"
    board: BoardWithOwner
