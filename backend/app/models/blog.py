"""Blog ORM — persists a blog record and its owner reference.

Invariants:
    - Always belongs to a User (user_id FK, non-nullable, never reassigned)
    - title and url are non-nullable
    - likes defaults to 0
    - comments is an append-only ordered list of strings

Design Decisions:
    - owner relationship eager-loaded (selectin): list endpoints project
      {id, username, name} without lazy IO in async context
    - JSON column for comments: small, always read with the blog (ADR: simplicity)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class Blog(Base):
    """Blog entity — a content record owned by exactly one user."""
    __tablename__ = "blogs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str | None] = mapped_column(String(200), nullable=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comments: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", lazy="selectin")
