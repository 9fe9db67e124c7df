"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - IO capabilities (notification) are accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, ORM rows and test doubles both qualify
"""

from datetime import datetime
from typing import Protocol

from taskboard.core.domain_types import BoardId, InvitationId


class InvitationLike(Protocol):
    """Structural contract for Invitation rows passed to invitation_rules."""
    id: InvitationId
    board_id: BoardId
    email: str
    status: str
    expires_at: datetime


class InviteeNotifier(Protocol):
    """Fire-and-forget delivery of an invitation to the invitee.

    Implementations may raise; InvitationLedger logs and swallows the failure.
    """
    async def send_invitation(
        self, email: str, board_title: str, token: str,
    ) -> None: ...
