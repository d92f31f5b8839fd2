"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - BlogId, UserId wrap UUIDs — never use bare UUID in domain logic
    - parse_identifier() is the only place raw path strings become ids
    - Drafts are plain data: the store assigns ids, the core never does
    - Aggregate results are frozen dataclasses (display projections, not entities)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - None as the "no result" sentinel for empty aggregations, never NaN
      (ADR: keep return types meaningful, no accidental arithmetic on a non-value)
"""

from dataclasses import dataclass, field
from typing import NewType
from uuid import UUID

from app.core.errors import MalformedIdentifierError


# ─── Identity Types ──────────────────────────────────────────────

BlogId = NewType("BlogId", UUID)
UserId = NewType("UserId", UUID)


# ─── Constants ───────────────────────────────────────────────────

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 3
MUTABLE_BLOG_FIELDS = ("title", "author", "url", "likes")


def parse_identifier(raw: str) -> UUID:
    """Parse a raw identifier string. Raises MalformedIdentifierError."""
    try:
        return UUID(str(raw))
    except (ValueError, AttributeError, TypeError):
        raise MalformedIdentifierError(str(raw))


# ─── Identity & Drafts ───────────────────────────────────────────

@dataclass(frozen=True)
class UserIdentity:
    """A caller resolved from a verified bearer credential."""
    id: UserId
    username: str
    name: str | None = None


@dataclass
class BlogDraft:
    """Validated data for a blog that does not exist yet."""
    title: str
    url: str
    user_id: UserId
    author: str | None = None
    likes: int = 0
    comments: list[str] = field(default_factory=list)


@dataclass
class UserDraft:
    """Validated data for a user that does not exist yet."""
    username: str
    password_hash: str
    name: str | None = None


# ─── Aggregate Results ───────────────────────────────────────────

@dataclass(frozen=True)
class FavoriteBlog:
    """Display projection of the most-liked blog. No id, url or version."""
    title: str
    author: str | None
    likes: int


@dataclass(frozen=True)
class AuthorBlogCount:
    author: str | None
    count: int


@dataclass(frozen=True)
class AuthorLikes:
    author: str | None
    likes: int


@dataclass(frozen=True)
class BlogStatistics:
    """All author-level aggregates over one snapshot."""
    total_likes: int
    favorite_blog: FavoriteBlog | None
    most_blogs: AuthorBlogCount | None
    most_likes: AuthorLikes | None
