"""Access Control — the single decision function gating every board operation.

Invariants:
    - classify() returns OWNER iff board owner_id == principal_id
    - COLLABORATOR only when not OWNER and a collaboration exists for the pair
    - Exactly one of OWNER / COLLABORATOR / NONE for any (principal, board)
    - No side effects; safe to call any number of times per request

Design Decisions:
    - Callers pass the membership set already loaded: the read lives in the shell
      (services/board_access.py), the decision lives here
"""

from collections.abc import Collection
from taskboard.core.domain_types import BoardId, BoardRole, UserId
from taskboard.core.errors import ErrorContext, ForbiddenError


def classify(
    principal_id: UserId, owner_id: UserId, collaborator_ids: Collection[UserId],
) -> BoardRole:
    """Decide the principal's role on a board."""
    if owner_id == principal_id:
        return BoardRole.OWNER
    if principal_id in collaborator_ids:
        return BoardRole.COLLABORATOR
    return BoardRole.NONE


def require_member(role: BoardRole, board_id: BoardId | None = None) -> None:
    """Raise ForbiddenError unless role grants read/write access to the board."""
    if role not in (BoardRole.OWNER, BoardRole.COLLABORATOR):
        raise ForbiddenError(
            context=ErrorContext(board_id=str(board_id) if board_id else None),
        )


def require_owner(role: BoardRole, board_id: BoardId | None = None) -> None:
    """Raise ForbiddenError unless role is OWNER (invitations, deletion)."""
    if role is not BoardRole.OWNER:
        raise ForbiddenError(
            "Only the board owner can perform this action",
            context=ErrorContext(board_id=str(board_id) if board_id else None),
        )
