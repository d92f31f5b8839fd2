"""Ownership Guard — authorization checks and owner-list derivation.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - require_identity fails before any store is touched (authentication, not authorization)
    - Ownership is decided by comparing ids only, never usernames
    - mutable_fields never lets owner/user through, whatever the patch contains

Design Decisions:
    - Raise typed errors instead of returning error dicts: the mutation service
      has nothing to do with a failed check except abort
    - derive_owned_ids keeps the user's existing order for surviving ids so a
      reconciliation pass over a consistent user is a no-op
"""

from typing import Iterable

from app.core.domain_types import (
    BlogId, UserId, UserIdentity, MUTABLE_BLOG_FIELDS,
)
from app.core.errors import (
    AuthenticationFailedError, AuthFailureReason, ErrorContext,
    OwnershipMismatchError,
)


def require_identity(identity: UserIdentity | None) -> UserIdentity:
    """Anonymous callers cannot perform owner-bound operations."""
    if identity is None:
        raise AuthenticationFailedError(AuthFailureReason.MISSING)
    return identity


def check_owner(
    identity: UserIdentity, owner_id: UserId, blog_id: BlogId, operation: str,
) -> None:
    """Raise OwnershipMismatchError unless identity owns the blog."""
    if identity.id != owner_id:
        raise OwnershipMismatchError(
            operation,
            ErrorContext(blog_id=str(blog_id), user_id=str(identity.id)),
        )


def mutable_fields(patch: dict) -> dict:
    """Allow-listed subset of an update patch."""
    return {k: v for k, v in patch.items() if k in MUTABLE_BLOG_FIELDS}


def derive_owned_ids(
    current: Iterable[BlogId], owned: Iterable[BlogId],
) -> list[BlogId]:
    """Rebuild a user's owned-list from the blogs that name them as owner.

    Ids already listed and still owned keep their position (duplicates dropped);
    owned ids missing from the list are appended in the given order.
    """
    owned = list(owned)
    owned_set = set(owned)
    rebuilt: list[BlogId] = []
    seen: set[BlogId] = set()
    for blog_id in current:
        if blog_id in owned_set and blog_id not in seen:
            rebuilt.append(blog_id)
            seen.add(blog_id)
    for blog_id in owned:
        if blog_id not in seen:
            rebuilt.append(blog_id)
            seen.add(blog_id)
    return rebuilt
