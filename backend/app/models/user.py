"""User ORM — persists accounts and their ordered list of owned blog ids.

Invariants:
    - id is UUID primary key
    - username is unique and non-nullable
    - blog_ids column is an ordered set of blog id strings (no duplicates)
    - version increments on every owned-list write (optimistic concurrency)

Design Decisions:
    - Owned-list as JSON column, not derived from blogs.user_id: the two sides
      of the ownership link are written separately and reconciled explicitly
    - password_hash never leaves the shell (response schemas omit it)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class User(Base):
    """User account — owns zero or more blogs."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    username: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True,
    )
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    blog_id_list: Mapped[list] = mapped_column(
        "blog_ids", JSON, nullable=False, default=list,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @property
    def blog_ids(self) -> list[uuid.UUID]:
        return [uuid.UUID(b) for b in self.blog_id_list]
