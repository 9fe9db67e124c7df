"""Invitation Routes — issue and list (board owner), resolve and accept (invitee).

Invariants:
    - Every route requires an authenticated principal
    - Issue/list: unknown board -> 404 before the owner check -> 403
    - Accept returns the board with its owner

Design Decisions:
    - Two routers: board-scoped routes under /boards/{id}, token routes under /invitations
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.auth import get_current_user
from taskboard.core.domain_types import BoardId, UserId
from taskboard.core.repository_protocols import InviteeNotifier
from taskboard.infrastructure.database import get_db
from taskboard.infrastructure.notifier import get_notifier
from taskboard.models.user import User
from taskboard.schemas.board import BoardSummary, BoardWithOwner, UserSummary
from taskboard.schemas.invitation import (
    InvitationAccepted,
    InvitationCreate,
    InvitationDetailResponse,
    InvitationIssued,
)
from taskboard.services.board_access import load_board
from taskboard.services.invitation_ledger import InvitationDetails, InvitationLedger

board_router = APIRouter(prefix="/api/v1/boards", tags=["invitations"])
token_router = APIRouter(prefix="/api/v1/invitations", tags=["invitations"])


def get_ledger(
    db: AsyncSession = Depends(get_db),
    notifier: InviteeNotifier = Depends(get_notifier),
) -> InvitationLedger:
    return InvitationLedger(db, notifier)


def _detail_response(details: InvitationDetails) -> InvitationDetailResponse:
    invitation = details.invitation
    return InvitationDetailResponse(
        id=invitation.id,
        board_id=invitation.board_id,
        email=invitation.email,
        invited_by=invitation.invited_by,
        status=invitation.status,
        expires_at=invitation.expires_at,
        created_at=invitation.created_at,
        board=BoardSummary.model_validate(details.board),
        inviter=(
            UserSummary.model_validate(details.inviter) if details.inviter else None
        ),
        expired=details.expired,
    )


@board_router.post(
    "/{board_id}/invitations",
    response_model=InvitationIssued,
    status_code=status.HTTP_201_CREATED,
)
async def issue_invitation(
    board_id: UUID,
    body: InvitationCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    ledger: InvitationLedger = Depends(get_ledger),
):
    """Invite an email address to collaborate on the board."""
    board = await load_board(db, BoardId(board_id))
    invitation = await ledger.issue(board, UserId(user.id), body.email)
    return InvitationIssued.model_validate(invitation)


@board_router.get(
    "/{board_id}/invitations", response_model=list[InvitationDetailResponse],
)
async def list_invitations(
    board_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    ledger: InvitationLedger = Depends(get_ledger),
):
    """Invitations of the board, newest first."""
    board = await load_board(db, BoardId(board_id))
    return [
        _detail_response(details)
        for details in await ledger.list_for_board(board, UserId(user.id))
    ]


@token_router.get("/{token}", response_model=InvitationDetailResponse)
async def resolve_invitation(
    token: str,
    user: User = Depends(get_current_user),
    ledger: InvitationLedger = Depends(get_ledger),
):
    """Show a live invitation so the invitee can decide."""
    invitation = await ledger.resolve(token)
    return _detail_response(await ledger.get_details(invitation))


@token_router.post("/{token}/accept", response_model=InvitationAccepted)
async def accept_invitation(
    token: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    ledger: InvitationLedger = Depends(get_ledger),
):
    """Redeem the invitation for the authenticated user."""
    board = await ledger.accept(token, user)
    owner = await db.get(User, board.owner_id)
    return InvitationAccepted(
        board=BoardWithOwner(
            id=board.id,
            title=board.title,
            description=board.description,
            created_at=board.created_at,
            owner=UserSummary.model_validate(owner),
        ),
    )
