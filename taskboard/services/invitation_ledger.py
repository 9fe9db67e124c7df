"""Invitation Ledger — issues, resolves and consumes board invitation tokens.

Invariants:
    - issue(): inviter must be OWNER; invitee already OWNER/COLLABORATOR -> AlreadyCollaborator
    - Tokens come from secrets (>= 128 bits) and are unique; a violation caused by an
      already stored token retries with a fresh one, exhausting attempts raises
      TokenCollisionError; any other integrity violation propagates
    - Notification failure never fails issue(); it is logged and swallowed
    - resolve(): NotFound, then Expired (status stays "pending" in storage)
    - accept(): NotFound, EmailMismatch, Expired, AlreadyAccepted, in that order
    - accept() flips status with a compare-and-swap and inserts the collaboration in the
      same transaction; a lost race yields AlreadyAccepted, never a second collaboration

Design Decisions:
    - Savepoints (begin_nested) around the inserts that may hit unique constraints:
      the outer transaction survives and the violation becomes a retry or a no-op
    - Clock injected: expiry is a read-time comparison against clock()
"""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.config import Settings, get_settings
from taskboard.core.access_control import classify, require_owner
from taskboard.core.domain_types import BoardId, BoardRole, InvitationStatus, UserId
from taskboard.core.errors import (
    AlreadyCollaboratorError,
    ErrorContext,
    InvitationAlreadyAcceptedError,
    ResourceNotFoundError,
    TokenCollisionError,
)
from taskboard.core.invitation_rules import (
    check_acceptable,
    check_resolvable,
    compute_expiry,
    is_expired,
    normalize_email,
)
from taskboard.core.repository_protocols import InviteeNotifier
from taskboard.models.board import Board
from taskboard.models.collaboration import Collaboration
from taskboard.models.invitation import Invitation
from taskboard.models.user import User
from taskboard.services.board_access import collaborator_ids, load_board, role_for
from taskboard.services.clock import utc_now

logger = logging.getLogger(__name__)


def generate_token(nbytes: int) -> str:
    """Hex token with nbytes of entropy from the OS CSPRNG."""
    return secrets.token_hex(nbytes)


@dataclass
class InvitationDetails:
    """Invitation with the rows a reader needs to decide whether to accept."""
    invitation: Invitation
    board: Board
    inviter: User | None
    expired: bool


class InvitationLedger:
    """Owns the pending -> accepted lifecycle of board invitations."""

    def __init__(
        self,
        db: AsyncSession,
        notifier: InviteeNotifier,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.notifier = notifier
        self.settings = settings or get_settings()
        self.clock = clock

    # ─── issue ──────────────────────────────────────────────────

    async def issue(self, board: Board, inviter_id: UserId, email: str) -> Invitation:
        """Create a pending invitation for email on board."""
        require_owner(await role_for(self.db, board, inviter_id), board.id)

        email = email.strip()
        invitee = await self._find_user(email)
        if invitee is not None:
            invitee_role = classify(
                invitee.id, board.owner_id, await collaborator_ids(self.db, board.id),
            )
            if invitee_role is not BoardRole.NONE:
                raise AlreadyCollaboratorError(
                    email, context=ErrorContext(board_id=str(board.id)),
                )

        invitation = await self._insert_with_fresh_token(board.id, inviter_id, email)
        await self.db.commit()
        logger.info(
            "Invitation issued",
            extra={"board_id": str(board.id), "invitation_id": str(invitation.id)},
        )

        await self._notify(invitation, board)
        return invitation

    async def _find_user(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == normalize_email(email)),
        )
        return result.scalar_one_or_none()

    async def _insert_with_fresh_token(
        self, board_id: BoardId, inviter_id: UserId, email: str,
    ) -> Invitation:
        attempts = self.settings.invitation_token_attempts
        for attempt in range(1, attempts + 1):
            token = generate_token(self.settings.invitation_token_bytes)
            invitation = Invitation(
                board_id=board_id,
                email=email,
                invited_by=inviter_id,
                token=token,
                status=InvitationStatus.PENDING.value,
                expires_at=compute_expiry(self.clock(), self.settings.invitation_ttl_days),
            )
            try:
                async with self.db.begin_nested():
                    self.db.add(invitation)
                return invitation
            except IntegrityError:
                if not await self._token_taken(token):
                    raise
                logger.warning(
                    f"Invitation token collision (attempt {attempt}/{attempts})",
                    extra={"board_id": str(board_id)},
                )
        raise TokenCollisionError(
            attempts, context=ErrorContext(board_id=str(board_id)),
        )

    async def _token_taken(self, token: str) -> bool:
        result = await self.db.execute(
            select(Invitation.id).where(Invitation.token == token),
        )
        return result.first() is not None

    async def _notify(self, invitation: Invitation, board: Board) -> None:
        try:
            await self.notifier.send_invitation(
                invitation.email, board.title, invitation.token,
            )
        except Exception:
            logger.warning(
                "Failed to send invitation notification",
                exc_info=True,
                extra={"board_id": str(board.id), "invitation_id": str(invitation.id)},
            )

    # ─── resolve ────────────────────────────────────────────────

    async def resolve(self, token: str) -> Invitation:
        """Look up a live invitation by token."""
        invitation = await self._get_by_token(token)
        check_resolvable(invitation, self.clock())
        return invitation

    async def _get_by_token(self, token: str, *, for_update: bool = False) -> Invitation:
        query = select(Invitation).where(Invitation.token == token)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        invitation = result.scalar_one_or_none()
        if invitation is None:
            raise ResourceNotFoundError("Invitation")
        return invitation

    async def get_details(self, invitation: Invitation) -> InvitationDetails:
        board = await load_board(self.db, invitation.board_id)
        inviter = await self.db.get(User, invitation.invited_by)
        return InvitationDetails(
            invitation=invitation,
            board=board,
            inviter=inviter,
            expired=is_expired(invitation.expires_at, self.clock()),
        )

    # ─── accept ─────────────────────────────────────────────────

    async def accept(self, token: str, principal: User) -> Board:
        """Redeem token for principal, granting collaboration on the board."""
        invitation = await self._get_by_token(token, for_update=True)
        check_acceptable(invitation, principal.email, self.clock())

        result = await self.db.execute(
            update(Invitation)
            .where(
                Invitation.id == invitation.id,
                Invitation.status == InvitationStatus.PENDING.value,
            )
            .values(status=InvitationStatus.ACCEPTED.value),
        )
        if result.rowcount != 1:
            context = ErrorContext(
                board_id=str(invitation.board_id), invitation_id=str(invitation.id),
            )
            await self.db.rollback()
            raise InvitationAlreadyAcceptedError(context=context)

        board = await load_board(self.db, invitation.board_id)
        created = False
        if board.owner_id != principal.id:
            created = await self._ensure_collaboration(principal.id, board.id)
        await self.db.commit()

        logger.info(
            "Invitation accepted",
            extra={
                "board_id": str(board.id),
                "invitation_id": str(invitation.id),
                "user_id": str(principal.id),
            },
        )
        if not created:
            logger.info(
                "Invitee already had access, no collaboration added",
                extra={"board_id": str(board.id), "user_id": str(principal.id)},
            )
        return board

    async def _ensure_collaboration(self, user_id: UserId, board_id: BoardId) -> bool:
        """Insert the collaboration unless the pair already exists."""
        if user_id in await collaborator_ids(self.db, board_id):
            return False
        try:
            async with self.db.begin_nested():
                self.db.add(Collaboration(user_id=user_id, board_id=board_id))
        except IntegrityError:
            return False
        return True

    # ─── listing ────────────────────────────────────────────────

    async def list_for_board(self, board: Board, principal_id: UserId) -> list[InvitationDetails]:
        """All invitations of the board, newest first. Owner only."""
        require_owner(await role_for(self.db, board, principal_id), board.id)

        result = await self.db.execute(
            select(Invitation, User)
            .outerjoin(User, Invitation.invited_by == User.id)
            .where(Invitation.board_id == board.id)
            .order_by(Invitation.created_at.desc()),
        )
        now = self.clock()
        return [
            InvitationDetails(
                invitation=invitation,
                board=board,
                inviter=inviter,
                expired=is_expired(invitation.expires_at, now),
            )
            for invitation, inviter in result.all()
        ]
