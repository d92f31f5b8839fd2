"""User Routes — registration and listing of accounts with their blogs.

Invariants:
    - Responses never include password_hash
    - Listed blogs follow the user's owned-list order; ids whose blog is gone are skipped
"""

import logging

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_blog_store, get_user_store
from app.infrastructure.repositories import SqlBlogStore, SqlUserStore
from app.schemas.user import UserBlog, UserCreate, UserResponse
from app.services.user_accounts import register_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate, users: SqlUserStore = Depends(get_user_store),
):
    """Register a new user."""
    user = await register_user(users, body)
    return UserResponse(id=user.id, username=user.username, name=user.name)


@router.get("", response_model=list[UserResponse])
async def list_users(
    users: SqlUserStore = Depends(get_user_store),
    blogs: SqlBlogStore = Depends(get_blog_store),
):
    """List users, each with a summary of the blogs they own."""
    by_id = {b.id: b for b in await blogs.list_all()}
    return [
        UserResponse(
            id=u.id,
            username=u.username,
            name=u.name,
            blogs=[
                UserBlog(
                    id=by_id[i].id, title=by_id[i].title,
                    author=by_id[i].author, url=by_id[i].url,
                )
                for i in u.blog_ids if i in by_id
            ],
        )
        for u in await users.list_all()
    ]
