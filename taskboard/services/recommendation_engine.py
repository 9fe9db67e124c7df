"""Recommendation Engine — snapshots a board and runs the pure recommendation rules.

Invariants:
    - Read-only: two SELECTs (lists, cards), no writes, no locks
    - Fresh on every call; a stale snapshot under concurrent writes is acceptable
    - Cards scanned in ascending list position, then ascending card position
    - Callers authorize and check board existence before calling generate()
"""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.domain_types import BoardId
from taskboard.core.recommendation_rules import (
    CardSnapshot,
    ListSnapshot,
    Recommendation,
    build_recommendations,
)
from taskboard.models.board_list import BoardList
from taskboard.models.card import Card
from taskboard.services.clock import utc_now

logger = logging.getLogger(__name__)


class RecommendationEngine:

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utc_now):
        self.db = db
        self.clock = clock

    async def generate(self, board_id: BoardId) -> list[Recommendation]:
        """Ranked recommendations for every card on the board."""
        lists = await self._load_lists(board_id)
        cards = await self._load_cards(board_id)
        recommendations = build_recommendations(lists, cards, self.clock())
        logger.debug(
            "Recommendations generated",
            extra={
                "board_id": str(board_id),
                "recommendation_count": len(recommendations),
            },
        )
        return recommendations

    async def _load_lists(self, board_id: BoardId) -> list[ListSnapshot]:
        result = await self.db.execute(
            select(BoardList.id, BoardList.title, BoardList.position)
            .where(BoardList.board_id == board_id)
            .order_by(BoardList.position),
        )
        return [
            ListSnapshot(id=row.id, title=row.title, position=row.position)
            for row in result.all()
        ]

    async def _load_cards(self, board_id: BoardId) -> list[CardSnapshot]:
        result = await self.db.execute(
            select(
                Card.id, Card.list_id, Card.title, Card.description,
                Card.due_date, Card.position,
            )
            .join(BoardList, Card.list_id == BoardList.id)
            .where(BoardList.board_id == board_id)
            .order_by(BoardList.position, Card.position),
        )
        return [
            CardSnapshot(
                id=row.id,
                list_id=row.list_id,
                title=row.title,
                description=row.description,
                due_date=row.due_date,
                position=row.position,
            )
            for row in result.all()
        ]
