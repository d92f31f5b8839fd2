"""API Dependencies — per-request wiring of stores, services and caller identity.

Invariants:
    - Stores share the request's AsyncSession
    - require_identity resolves the Authorization header or raises AuthenticationFailedError
    - update_identity never touches the credential unless owner_only_updates is set

Design Decisions:
    - Plain Depends() factories over a DI container (ADR: explicit wiring)
"""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.domain_types import UserIdentity
from app.infrastructure.auth import JWTAuthContext
from app.infrastructure.database import get_db
from app.infrastructure.repositories import SqlBlogStore, SqlUserStore
from app.services.blog_mutations import BlogMutationService


def get_blog_store(db: AsyncSession = Depends(get_db)) -> SqlBlogStore:
    return SqlBlogStore(db)


def get_user_store(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SqlUserStore:
    return SqlUserStore(db, max_retries=settings.owner_list_max_retries)


def get_blog_service(
    blogs: SqlBlogStore = Depends(get_blog_store),
    users: SqlUserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
) -> BlogMutationService:
    return BlogMutationService(
        blogs, users, owner_only_updates=settings.owner_only_updates,
    )


async def require_identity(
    authorization: str | None = Header(None),
    users: SqlUserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
) -> UserIdentity:
    auth = JWTAuthContext(users, settings.secret_key, settings.token_algorithm)
    return await auth.resolve(authorization)


async def update_identity(
    authorization: str | None = Header(None),
    users: SqlUserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
) -> UserIdentity | None:
    """Caller identity for updates. Resolved only under the owner-only policy.

    Without that policy updates are open to anyone, so a stale or garbage
    credential is ignored rather than rejected.
    """
    if not settings.owner_only_updates:
        return None
    auth = JWTAuthContext(users, settings.secret_key, settings.token_algorithm)
    return await auth.resolve(authorization)
