"""Ownership Reconciliation — repairs the blog<->user link after partial mutations.

Invariants:
    - blogs.user_id is the source of truth; users.blog_ids is re-derived from it
    - A consistent user is left untouched (no write, no version bump)
    - Surviving ids keep their order; missing ids appended in blog-creation order
    - Blogs naming an unknown owner are reported, never deleted

Design Decisions:
    - Sweep over a full snapshot instead of replaying failed operations: the
      PartiallyApplied log tells operators something broke, the sweep does not
      need to know what
"""

import logging
from dataclasses import dataclass, field

from app.core.domain_types import BlogId, UserId
from app.core.ownership import derive_owned_ids
from app.core.repository_protocols import BlogStore, UserStore

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    users_checked: int = 0
    repaired_user_ids: list[UserId] = field(default_factory=list)
    orphaned_blog_ids: list[BlogId] = field(default_factory=list)


async def reconcile_ownership(
    blogs: BlogStore, users: UserStore,
) -> ReconciliationReport:
    """Re-derive every user's owned-list from the blogs that name them as owner."""
    owned: dict[UserId, list[BlogId]] = {}
    for blog in await blogs.list_all():
        owned.setdefault(blog.user_id, []).append(blog.id)

    report = ReconciliationReport()
    for user in await users.list_all():
        report.users_checked += 1
        current = user.blog_ids
        rebuilt = derive_owned_ids(current, owned.pop(user.id, []))
        if rebuilt != current:
            await users.replace_owned_blogs(user.id, rebuilt)
            report.repaired_user_ids.append(user.id)
            logger.warning(
                f"Repaired owned-list of user {user.username}: "
                f"{len(current)} -> {len(rebuilt)} blogs",
                extra={"user_id": str(user.id), "operation": "reconcile"},
            )

    for owner_id, blog_ids in owned.items():
        report.orphaned_blog_ids.extend(blog_ids)
        logger.error(
            f"{len(blog_ids)} blog(s) reference missing user {owner_id}",
            extra={"user_id": str(owner_id), "operation": "reconcile"},
        )

    logger.info(
        f"Ownership reconciliation checked {report.users_checked} users, "
        f"repaired {len(report.repaired_user_ids)}",
    )
    return report
