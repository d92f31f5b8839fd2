"""List Helpers — author-level aggregation over a snapshot of blog records.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Input sequences and their records are never mutated
    - Only title, author, url and likes are read from each record
    - Empty input → 0 for total_likes, None for every other aggregate
    - Ties resolve by input order: first record (favorite_blog) or
      first-observed author (most_blogs, most_likes), never by name

Design Decisions:
    - Groups kept in a dict: insertion order IS first-appearance order, so a
      strict ">" scan over dict items gives the tie-break for free
    - favorite_blog returns an allow-listed FavoriteBlog projection instead of
      stripping fields off the stored record
"""

from typing import Iterable, Protocol, Sequence

from app.core.domain_types import (
    AuthorBlogCount, AuthorLikes, BlogStatistics, FavoriteBlog,
)


class BlogRecord(Protocol):
    """The fields aggregation reads. Stored blogs and plain snapshots both fit."""
    title: str
    author: str | None
    url: str
    likes: int


def total_likes(blogs: Iterable[BlogRecord]) -> int:
    """Sum of likes across all records. 0 for empty input."""
    return sum(blog.likes for blog in blogs)


def favorite_blog(blogs: Sequence[BlogRecord]) -> FavoriteBlog | None:
    """Record with the strictly greatest likes; first one wins ties."""
    if not blogs:
        return None
    favorite = blogs[0]
    for blog in blogs[1:]:
        if blog.likes > favorite.likes:
            favorite = blog
    return FavoriteBlog(
        title=favorite.title, author=favorite.author, likes=favorite.likes,
    )


def most_blogs(blogs: Sequence[BlogRecord]) -> AuthorBlogCount | None:
    """Author with the most records."""
    groups = _group_by_author(blogs)
    best = _first_max(groups, key=len)
    if best is None:
        return None
    author, members = best
    return AuthorBlogCount(author=author, count=len(members))


def most_likes(blogs: Sequence[BlogRecord]) -> AuthorLikes | None:
    """Author with the highest summed likes (not the most records)."""
    groups = _group_by_author(blogs)
    best = _first_max(groups, key=total_likes)
    if best is None:
        return None
    author, members = best
    return AuthorLikes(author=author, likes=total_likes(members))


def blog_statistics(blogs: Sequence[BlogRecord]) -> BlogStatistics:
    """All aggregates over one snapshot."""
    snapshot = list(blogs)
    return BlogStatistics(
        total_likes=total_likes(snapshot),
        favorite_blog=favorite_blog(snapshot),
        most_blogs=most_blogs(snapshot),
        most_likes=most_likes(snapshot),
    )


# --- Helpers ------------------------------------------------------------------

def _group_by_author(
    blogs: Iterable[BlogRecord],
) -> dict[str | None, list[BlogRecord]]:
    """Group by exact author value, keyed in first-appearance order."""
    groups: dict[str | None, list[BlogRecord]] = {}
    for blog in blogs:
        groups.setdefault(blog.author, []).append(blog)
    return groups


def _first_max(groups: dict, key) -> tuple | None:
    """First (author, members) pair whose score is strictly greatest."""
    best = None
    best_score = None
    for author, members in groups.items():
        score = key(members)
        if best_score is None or score > best_score:
            best, best_score = (author, members), score
    return best
