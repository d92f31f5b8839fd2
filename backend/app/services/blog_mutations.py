"""Blog Mutations — ownership-enforced create/update/comment/delete over BlogStore + UserStore.

Invariants:
    - create/delete require a resolved identity; failure raised before any store access
    - Blog-side write is committed BEFORE the owner-list write is attempted
    - A failed owner-list write after a committed blog write raises
      PartiallyAppliedMutationError (never reported as success, never retried here)
    - delete by a non-owner raises OwnershipMismatchError and mutates nothing
    - update never changes the owner, whatever the patch contains
    - Blog lifecycle: nonexistent -> active (create) -> active (update, comment) -> deleted

Design Decisions:
    - Stores injected as Protocols: the same service runs on SQL and in-memory stores
    - Two-write sequence not wrapped in a cross-store transaction (ADR: stores are
      independent); the reconciliation sweep repairs what PartiallyApplied reports
    - owner_only_updates flag: stricter update policy available without a second code path
"""

import logging

from app.core.domain_types import BlogDraft, BlogId, UserIdentity, parse_identifier
from app.core.errors import (
    ErrorContext, PartiallyAppliedMutationError, ResourceNotFoundError,
)
from app.core.ownership import check_owner, mutable_fields, require_identity
from app.core.repository_protocols import BlogLike, BlogStore, UserStore
from app.schemas.blog import BlogCreate, BlogUpdate

logger = logging.getLogger(__name__)


class BlogMutationService:
    """Lifecycle operations on blogs, keeping the owner-list link consistent."""

    def __init__(
        self, blogs: BlogStore, users: UserStore, owner_only_updates: bool = False,
    ):
        self.blogs = blogs
        self.users = users
        self.owner_only_updates = owner_only_updates

    # --- Reads ----------------------------------------------------------------

    async def list_all(self) -> list[BlogLike]:
        return list(await self.blogs.list_all())

    async def get(self, raw_id: str) -> BlogLike:
        """Get by raw identifier. Malformed ids fail before the store is hit."""
        return await self._get_or_404(BlogId(parse_identifier(raw_id)))

    # --- Mutations --------------------------------------------------------------

    async def create(
        self, identity: UserIdentity | None, payload: BlogCreate,
    ) -> BlogLike:
        """Persist a new blog owned by identity, then list it on the owner."""
        owner = require_identity(identity)
        blog = await self.blogs.insert(BlogDraft(
            title=payload.title,
            url=payload.url,
            user_id=owner.id,
            author=payload.author,
            likes=payload.likes,
            comments=list(payload.comments),
        ))
        logger.info(
            f"Blog {blog.id} created by {owner.username}",
            extra={"blog_id": str(blog.id), "user_id": str(owner.id), "operation": "create"},
        )
        try:
            await self.users.add_owned_blog(owner.id, blog.id)
        except Exception as e:
            raise self._partially_applied("create", blog.id, owner, e) from e
        return blog

    async def update(
        self, raw_id: str, patch: BlogUpdate, identity: UserIdentity | None = None,
    ) -> BlogLike:
        """Apply the mutable subset of patch. Owner is always preserved."""
        blog_id = BlogId(parse_identifier(raw_id))
        blog = await self._get_or_404(blog_id)
        if self.owner_only_updates:
            check_owner(require_identity(identity), blog.user_id, blog_id, "update")
        updated = await self.blogs.update(blog_id, mutable_fields(patch.changes()))
        if updated is None:
            raise ResourceNotFoundError("Blog", str(blog_id))
        return updated

    async def append_comment(self, raw_id: str, comment: str) -> BlogLike:
        """Append comment to the end of the blog's comments."""
        blog_id = BlogId(parse_identifier(raw_id))
        blog = await self._get_or_404(blog_id)
        updated = await self.blogs.update(
            blog_id, {"comments": [*blog.comments, comment]},
        )
        if updated is None:
            raise ResourceNotFoundError("Blog", str(blog_id))
        return updated

    async def delete(self, identity: UserIdentity | None, raw_id: str) -> None:
        """Delete an owned blog, then drop it from the owner's list."""
        caller = require_identity(identity)
        blog_id = BlogId(parse_identifier(raw_id))
        blog = await self._get_or_404(blog_id)
        check_owner(caller, blog.user_id, blog_id, "delete")

        if not await self.blogs.delete(blog_id):
            # Lost a race with another delete: nothing left to unlink here
            raise ResourceNotFoundError("Blog", str(blog_id))
        logger.info(
            f"Blog {blog_id} deleted by {caller.username}",
            extra={"blog_id": str(blog_id), "user_id": str(caller.id), "operation": "delete"},
        )
        try:
            await self.users.remove_owned_blog(caller.id, blog_id)
        except Exception as e:
            raise self._partially_applied("delete", blog_id, caller, e) from e

    # --- Helpers ----------------------------------------------------------------

    async def _get_or_404(self, blog_id: BlogId) -> BlogLike:
        blog = await self.blogs.find_by_id(blog_id)
        if blog is None:
            raise ResourceNotFoundError(
                "Blog", str(blog_id), ErrorContext(blog_id=str(blog_id)),
            )
        return blog

    @staticmethod
    def _partially_applied(
        operation: str, blog_id: BlogId, owner: UserIdentity, cause: Exception,
    ) -> PartiallyAppliedMutationError:
        logger.error(
            f"Owner-list write failed after blog {operation}; "
            f"user {owner.id} needs reconciliation: {cause}",
            extra={
                "blog_id": str(blog_id),
                "user_id": str(owner.id),
                "operation": operation,
                "error_code": "PARTIALLY_APPLIED_MUTATION",
            },
            exc_info=True,
        )
        return PartiallyAppliedMutationError(operation, str(blog_id), str(owner.id))
