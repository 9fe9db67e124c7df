"""BoardList ORM — a column of cards on a board.

Invariants:
    - position is a non-negative integer, unique within a board, dense from 0
    - Rendering order is ascending position

Design Decisions:
    - Class named BoardList (table "lists") to avoid shadowing the builtin list
"""

import uuid

from sqlalchemy import String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from taskboard.db.base import Base


class BoardList(Base):
    __tablename__ = "lists"
    __table_args__ = (
        UniqueConstraint("board_id", "position", name="uq_lists_board_position"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    board_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("boards.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    board: Mapped["Board"] = relationship("Board", back_populates="lists")
    cards: Mapped[list["Card"]] = relationship(
        "Card", back_populates="board_list",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="Card.position",
    )
