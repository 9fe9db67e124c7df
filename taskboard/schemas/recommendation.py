"""Recommendation Schemas — wire shape of derived, non-persisted suggestions."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from taskboard.core.domain_types import (
    RecommendationActionType,
    RecommendationPriority,
    RecommendationType,
)


class CardRefResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str


class RecommendationActionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: RecommendationActionType
    due_date: datetime | None = None
    target_list_id: UUID | None = None
    related_cards: list[CardRefResponse] = []


class RecommendationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: RecommendationType
    card: CardRefResponse
    suggestion: str
    priority: RecommendationPriority
    action: RecommendationActionResponse
