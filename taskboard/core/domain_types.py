"""Domain Types — identity types and enums shared by core and shell.

Invariants:
    - UserId, BoardId, ListId, CardId, InvitationId wrap UUIDs; core and service
      signatures take these, routes wrap the path UUIDs at the boundary
    - All closed value sets encoded as str Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and store in String columns without converters
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
BoardId = NewType("BoardId", UUID)
ListId = NewType("ListId", UUID)
CardId = NewType("CardId", UUID)
InvitationId = NewType("InvitationId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class BoardRole(str, Enum):
    """Relationship of a principal to a board. Exactly one holds per (user, board)."""
    OWNER = "owner"
    COLLABORATOR = "collaborator"
    NONE = "none"


class InvitationStatus(str, Enum):
    """Stored invitation states. Expiry is derived on read, never stored."""
    PENDING = "pending"
    ACCEPTED = "accepted"


class CardPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    UNSET = "unset"


class RecommendationType(str, Enum):
    DUE_DATE = "due-date"
    LIST_MOVE = "list-move"
    RELATED_CARDS = "related-cards"


class RecommendationPriority(str, Enum):
    """Recommendation urgency. Output order is HIGH, MEDIUM, LOW."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationActionType(str, Enum):
    SET_DUE_DATE = "set-due-date"
    MOVE_CARD = "move-card"
    SHOW_RELATED = "show-related"
