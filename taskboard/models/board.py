"""Board ORM — aggregate root owning lists, cards, collaborations and invitations.

Invariants:
    - owner_id is non-nullable and never reassigned by the core
    - Membership is read with an explicit query per access check, never via lazy load
    - Child rows removed by the database (ON DELETE CASCADE, passive_deletes)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from taskboard.db.base import Base


class Board(Base):
    """Board aggregate root."""
    __tablename__ = "boards"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    collaborations: Mapped[list["Collaboration"]] = relationship(
        "Collaboration", back_populates="board",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    lists: Mapped[list["BoardList"]] = relationship(
        "BoardList", back_populates="board",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="BoardList.position",
    )
    invitations: Mapped[list["Invitation"]] = relationship(
        "Invitation", back_populates="board",
        cascade="all, delete-orphan", passive_deletes=True,
    )
