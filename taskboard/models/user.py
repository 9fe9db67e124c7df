"""User ORM — identity of a person who can own boards or collaborate on them.

Invariants:
    - email is stored stripped and lowercased
    - email is unique regardless of case (unique index on lower(email)),
      so an invitation email resolves to at most one user
    - Immutable once created except password_hash rotation
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Index, func
from sqlalchemy.orm import Mapped, mapped_column, validates
from sqlalchemy.dialects.postgresql import UUID

from taskboard.core.invitation_rules import normalize_email
from taskboard.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    password_hash: Mapped[str | None] = mapped_column(
        String(255), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return normalize_email(value)


Index("uq_users_email_lower", func.lower(User.email), unique=True)
