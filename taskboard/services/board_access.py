"""Board Access — loads membership and applies AccessControl at every entry point.

Invariants:
    - Unknown board/list/card raises ResourceNotFoundError before any access decision
    - Lists and cards are resolved to their board, then classified like the board itself
    - Read-only: no writes, safe to call repeatedly within one request

Design Decisions:
    - Membership fetched with a dedicated query (not a relationship) so a long-lived
      session never classifies against a stale collection
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.access_control import classify, require_member, require_owner
from taskboard.core.domain_types import BoardId, BoardRole, CardId, ListId, UserId
from taskboard.core.errors import ResourceNotFoundError
from taskboard.models.board import Board
from taskboard.models.board_list import BoardList
from taskboard.models.card import Card
from taskboard.models.collaboration import Collaboration


async def load_board(db: AsyncSession, board_id: BoardId) -> Board:
    """Get board or raise ResourceNotFoundError."""
    result = await db.execute(select(Board).where(Board.id == board_id))
    board = result.scalar_one_or_none()
    if board is None:
        raise ResourceNotFoundError("Board", str(board_id))
    return board


async def collaborator_ids(db: AsyncSession, board_id: BoardId) -> set[UserId]:
    result = await db.execute(
        select(Collaboration.user_id).where(Collaboration.board_id == board_id),
    )
    return set(result.scalars().all())


async def role_for(db: AsyncSession, board: Board, principal_id: UserId) -> BoardRole:
    """Classify principal against the board's current membership."""
    return classify(principal_id, board.owner_id, await collaborator_ids(db, board.id))


async def authorize_board(
    db: AsyncSession, principal_id: UserId, board_id: BoardId, *, owner_only: bool = False,
) -> tuple[Board, BoardRole]:
    """Load board and require OWNER (owner_only) or OWNER/COLLABORATOR."""
    board = await load_board(db, board_id)
    role = await role_for(db, board, principal_id)
    if owner_only:
        require_owner(role, board.id)
    else:
        require_member(role, board.id)
    return board, role


async def authorize_list(
    db: AsyncSession, principal_id: UserId, list_id: ListId,
) -> tuple[BoardList, Board, BoardRole]:
    result = await db.execute(select(BoardList).where(BoardList.id == list_id))
    board_list = result.scalar_one_or_none()
    if board_list is None:
        raise ResourceNotFoundError("List", str(list_id))
    board, role = await authorize_board(db, principal_id, board_list.board_id)
    return board_list, board, role


async def authorize_card(
    db: AsyncSession, principal_id: UserId, card_id: CardId,
) -> tuple[Card, Board, BoardRole]:
    result = await db.execute(
        select(Card, BoardList.board_id)
        .join(BoardList, Card.list_id == BoardList.id)
        .where(Card.id == card_id),
    )
    row = result.one_or_none()
    if row is None:
        raise ResourceNotFoundError("Card", str(card_id))
    card, board_id = row
    board, role = await authorize_board(db, principal_id, board_id)
    return card, board, role
