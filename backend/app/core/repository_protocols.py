"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - add_owned_blog/remove_owned_blog are atomic per user (no lost updates
      under concurrent appends/removals)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE these protocols are never async themselves —
      the shell orchestrates the async calls around the pure logic
    - BlogLike/UserLike instead of ORM types: service tests run against in-memory fakes
"""

from typing import Protocol, Sequence

from app.core.domain_types import (
    BlogId, UserId, BlogDraft, UserDraft, UserIdentity,
)


class BlogLike(Protocol):
    """Structural contract for stored blog records."""
    id: BlogId
    title: str
    author: str | None
    url: str
    likes: int
    comments: list[str]
    user_id: UserId


class UserLike(Protocol):
    """Structural contract for stored user records."""
    id: UserId
    username: str
    name: str | None
    password_hash: str

    @property
    def blog_ids(self) -> list[BlogId]: ...


class BlogStore(Protocol):
    """Contract for blog persistence — implemented by shell."""
    async def insert(self, draft: BlogDraft) -> BlogLike: ...
    async def find_by_id(self, blog_id: BlogId) -> BlogLike | None: ...
    async def update(self, blog_id: BlogId, fields: dict) -> BlogLike | None: ...
    async def delete(self, blog_id: BlogId) -> bool: ...
    async def list_all(self) -> Sequence[BlogLike]: ...


class UserStore(Protocol):
    """Contract for user persistence — implemented by shell."""
    async def insert(self, draft: UserDraft) -> UserLike: ...
    async def find_by_id(self, user_id: UserId) -> UserLike | None: ...
    async def find_by_username(self, username: str) -> UserLike | None: ...
    async def list_all(self) -> Sequence[UserLike]: ...
    async def add_owned_blog(self, user_id: UserId, blog_id: BlogId) -> UserLike: ...
    async def remove_owned_blog(self, user_id: UserId, blog_id: BlogId) -> UserLike: ...
    async def replace_owned_blogs(
        self, user_id: UserId, blog_ids: list[BlogId],
    ) -> UserLike: ...


class AuthContext(Protocol):
    """Resolves a bearer credential to a caller identity.

    Raises AuthenticationFailedError (reason: missing, malformed, invalid).
    """
    async def resolve(self, credential: str | None) -> UserIdentity: ...
