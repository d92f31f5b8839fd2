"""SQL Repositories — SQLAlchemy implementations of the BlogStore and UserStore protocols.

Invariants:
    - Every write commits before returning (durable on return)
    - Returned blogs have owner eager-loaded (no lazy IO after return)
    - Owned-list writes are compare-and-set on users.version; a lost race
      re-reads and retries, never overwrites a concurrent change
    - add_owned_blog is idempotent (ordered-set semantics)
    - Username uniqueness violations surface as DuplicateUsernameError

Design Decisions:
    - Optimistic retry over SELECT ... FOR UPDATE: works on SQLite and Postgres alike
    - Backoff between attempts is exponential with ±25% jitter
    - populate_existing on reads: the identity map must not hide a concurrent writer's version
"""

import asyncio
import logging
import random
from typing import Callable

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.domain_types import BlogDraft, BlogId, UserDraft, UserId
from app.core.errors import (
    ConcurrencyError, DuplicateUsernameError, ErrorContext,
    ResourceNotFoundError,
)
from app.models.blog import Blog
from app.models.user import User

logger = logging.getLogger(__name__)


class SqlBlogStore:
    """BlogStore backed by the blogs table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, draft: BlogDraft) -> Blog:
        blog = Blog(
            title=draft.title,
            author=draft.author,
            url=draft.url,
            likes=draft.likes,
            comments=list(draft.comments),
            user_id=draft.user_id,
        )
        self.db.add(blog)
        await self.db.commit()
        return await self._reload(blog.id)

    async def find_by_id(self, blog_id: BlogId) -> Blog | None:
        result = await self.db.execute(
            select(Blog)
            .where(Blog.id == blog_id)
            .options(selectinload(Blog.owner))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def update(self, blog_id: BlogId, fields: dict) -> Blog | None:
        blog = await self.find_by_id(blog_id)
        if blog is None:
            return None
        for name, value in fields.items():
            setattr(blog, name, value)
        await self.db.commit()
        return await self._reload(blog_id)

    async def delete(self, blog_id: BlogId) -> bool:
        result = await self.db.execute(delete(Blog).where(Blog.id == blog_id))
        await self.db.commit()
        return result.rowcount == 1

    async def list_all(self) -> list[Blog]:
        result = await self.db.execute(
            select(Blog)
            .options(selectinload(Blog.owner))
            .order_by(Blog.created_at, Blog.id)
        )
        return list(result.scalars().all())

    async def _reload(self, blog_id: BlogId) -> Blog:
        blog = await self.find_by_id(blog_id)
        if blog is None:
            raise ResourceNotFoundError("Blog", str(blog_id))
        return blog


class SqlUserStore:
    """UserStore backed by the users table."""

    def __init__(
        self, db: AsyncSession, max_retries: int = 5, base_delay_ms: int = 5,
    ):
        self.db = db
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms

    async def insert(self, draft: UserDraft) -> User:
        user = User(
            username=draft.username,
            name=draft.name,
            password_hash=draft.password_hash,
            blog_id_list=[],
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateUsernameError()
        return user

    async def find_by_id(self, user_id: UserId) -> User | None:
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_by_username(self, username: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.username == username),
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[User]:
        result = await self.db.execute(
            select(User).order_by(User.created_at, User.id),
        )
        return list(result.scalars().all())

    async def add_owned_blog(self, user_id: UserId, blog_id: BlogId) -> User:
        return await self._write_owned_list(
            user_id, lambda ids: ids if blog_id in ids else [*ids, blog_id],
        )

    async def remove_owned_blog(self, user_id: UserId, blog_id: BlogId) -> User:
        return await self._write_owned_list(
            user_id, lambda ids: [i for i in ids if i != blog_id],
        )

    async def replace_owned_blogs(
        self, user_id: UserId, blog_ids: list[BlogId],
    ) -> User:
        return await self._write_owned_list(user_id, lambda _: list(blog_ids))

    async def _write_owned_list(
        self, user_id: UserId, change: Callable[[list], list],
    ) -> User:
        """Compare-and-set the owned-list against the version last read."""
        for attempt in range(self.max_retries):
            user = await self.find_by_id(user_id)
            if user is None:
                raise ResourceNotFoundError("User", str(user_id))
            seen_version = user.version
            new_ids = [str(i) for i in change(user.blog_ids)]
            result = await self.db.execute(
                update(User)
                .where(User.id == user_id, User.version == seen_version)
                .values({User.blog_id_list: new_ids, User.version: seen_version + 1})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:
                await self.db.commit()
                return await self.find_by_id(user_id)
            await self.db.rollback()
            logger.warning(
                f"Owned-list write for user {user_id} lost a race, retrying",
                extra={"user_id": str(user_id), "attempt": attempt + 1},
            )
            await asyncio.sleep(self._backoff(attempt) / 1000)
        raise ConcurrencyError(
            f"Owned-list of user '{user_id}' kept changing "
            f"({self.max_retries} attempts)",
            ErrorContext(user_id=str(user_id)),
        )

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = (2 ** attempt) * self.base_delay_ms
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311
