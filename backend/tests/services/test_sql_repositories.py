"""SQL Repositories — SqlBlogStore/SqlUserStore against in-memory SQLite."""

import uuid
from types import SimpleNamespace

import pytest

from app.core.domain_types import BlogDraft, UserDraft
from app.core.errors import ConcurrencyError, DuplicateUsernameError
from app.infrastructure.repositories import SqlUserStore


def _draft(user_id, title="Canonical string reduction", **kw) -> BlogDraft:
    return BlogDraft(title=title, url="https://example.com/csr", user_id=user_id, **kw)


async def test_insert_defaults_and_owner_projection(sql_blogs, root_user):
    blog = await sql_blogs.insert(_draft(root_user.id, author="Dijkstra"))

    assert blog.likes == 0
    assert blog.comments == []
    assert blog.owner.username == "root"


async def test_update_and_find(sql_blogs, root_user):
    blog = await sql_blogs.insert(_draft(root_user.id))
    await sql_blogs.update(blog.id, {"likes": 12, "comments": ["nice"]})

    found = await sql_blogs.find_by_id(blog.id)
    assert found.likes == 12
    assert found.comments == ["nice"]


async def test_update_missing_returns_none(sql_blogs):
    assert await sql_blogs.update(uuid.uuid4(), {"likes": 1}) is None


async def test_delete_reports_whether_a_row_went(sql_blogs, root_user):
    blog = await sql_blogs.insert(_draft(root_user.id))
    assert await sql_blogs.delete(blog.id) is True
    assert await sql_blogs.delete(blog.id) is False
    assert await sql_blogs.find_by_id(blog.id) is None


async def test_list_all_in_creation_order(sql_blogs, root_user):
    for title in ("one", "two", "three"):
        await sql_blogs.insert(_draft(root_user.id, title=title))
    assert [b.title for b in await sql_blogs.list_all()] == ["one", "two", "three"]


async def test_duplicate_username_rejected_by_store(sql_users, root_user):
    with pytest.raises(DuplicateUsernameError):
        await sql_users.insert(UserDraft(username="root", password_hash="x"))


async def test_owned_list_is_an_ordered_set(sql_users, root_user):
    a, b = uuid.uuid4(), uuid.uuid4()
    await sql_users.add_owned_blog(root_user.id, a)
    await sql_users.add_owned_blog(root_user.id, b)
    user = await sql_users.add_owned_blog(root_user.id, a)

    assert user.blog_ids == [a, b]
    assert user.version == 3

    user = await sql_users.remove_owned_blog(root_user.id, a)
    assert user.blog_ids == [b]


async def test_owned_list_write_retries_after_lost_race(test_db, root_user, monkeypatch):
    users = SqlUserStore(test_db, max_retries=3, base_delay_ms=0)
    original_find = users.find_by_id
    concurrent_id, blog_id = uuid.uuid4(), uuid.uuid4()
    raced = []

    async def find_then_race(user_id):
        user = await original_find(user_id)
        if raced:
            return user
        raced.append(True)
        stale = SimpleNamespace(version=user.version, blog_ids=user.blog_ids)
        # A concurrent writer commits between our read and our write
        await SqlUserStore(test_db).add_owned_blog(user_id, concurrent_id)
        return stale

    monkeypatch.setattr(users, "find_by_id", find_then_race)
    user = await users.add_owned_blog(root_user.id, blog_id)

    assert user.blog_ids == [concurrent_id, blog_id]
    assert user.version == 2


async def test_owned_list_write_gives_up_after_max_retries(test_db, root_user, monkeypatch):
    users = SqlUserStore(test_db, max_retries=2, base_delay_ms=0)
    original_find = users.find_by_id

    async def always_stale(user_id):
        user = await original_find(user_id)
        return SimpleNamespace(version=user.version - 1, blog_ids=user.blog_ids)

    monkeypatch.setattr(users, "find_by_id", always_stale)
    with pytest.raises(ConcurrencyError):
        await users.add_owned_blog(root_user.id, uuid.uuid4())
