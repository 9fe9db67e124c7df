"""Recommendation Routes — ranked suggestions for a board.

Invariants:
    - Unknown board -> 404; neither owner nor collaborator -> 403
    - Full set returned every call, already sorted high -> medium -> low
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.auth import get_current_user
from taskboard.core.domain_types import BoardId, UserId
from taskboard.infrastructure.database import get_db
from taskboard.models.user import User
from taskboard.schemas.recommendation import RecommendationResponse
from taskboard.services.board_access import authorize_board
from taskboard.services.recommendation_engine import RecommendationEngine

router = APIRouter(prefix="/api/v1/boards", tags=["recommendations"])


@router.get(
    "/{board_id}/recommendations", response_model=list[RecommendationResponse],
)
async def list_recommendations(
    board_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Due-date, list-move and related-card suggestions for the board."""
    board, _ = await authorize_board(db, UserId(user.id), BoardId(board_id))
    recommendations = await RecommendationEngine(db).generate(BoardId(board.id))
    return [RecommendationResponse.model_validate(r) for r in recommendations]
