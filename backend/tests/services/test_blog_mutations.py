"""Blog Mutations — create/update/comment/delete against in-memory stores.

Invariants:
    - Ownership link consistent after every successful create/delete
    - Owner-list write failure after blog write → PartiallyAppliedMutationError
    - Non-owner delete → OwnershipMismatchError, nothing mutated
    - Update never changes owner
    - Missing identity fails before any store access
"""

import uuid

import pytest

from app.core.errors import (
    AuthenticationFailedError, AuthFailureReason, MalformedIdentifierError,
    OwnershipMismatchError, PartiallyAppliedMutationError, ResourceNotFoundError,
)
from app.schemas.blog import BlogCreate, BlogUpdate
from app.services.blog_mutations import BlogMutationService


def _payload(**overrides) -> BlogCreate:
    data = {"title": "Go To Statement", "url": "https://example.com/goto", "author": "Dijkstra"}
    data.update(overrides)
    return BlogCreate(**data)


def _assert_link_consistent(blog_store, user_store):
    for blog in blog_store.rows.values():
        assert blog.id in user_store.rows[blog.user_id].blog_ids
    for user in user_store.rows.values():
        for blog_id in user.blog_ids:
            assert blog_store.rows[blog_id].user_id == user.id


# --- create -------------------------------------------------------------------------

async def test_create_persists_blog_and_lists_it_on_owner(service, blog_store, user_store, alice):
    blog = await service.create(alice, _payload(likes=5))

    assert blog_store.rows[blog.id].title == "Go To Statement"
    assert blog.user_id == alice.id
    assert user_store.rows[alice.id].blog_ids == [blog.id]


async def test_create_without_likes_stores_zero(service, alice):
    blog = await service.create(alice, _payload())
    assert blog.likes == 0
    assert blog.comments == []


async def test_create_writes_blog_before_owner_list(service, blog_store, user_store, alice):
    await service.create(alice, _payload())
    assert blog_store.calls == ["insert"]
    assert user_store.calls == ["add_owned_blog"]


async def test_create_without_identity_touches_no_store(service, blog_store, user_store):
    with pytest.raises(AuthenticationFailedError) as exc:
        await service.create(None, _payload())

    assert exc.value.reason is AuthFailureReason.MISSING
    assert blog_store.calls == []
    assert user_store.calls == []


async def test_create_owner_list_failure_is_partially_applied(service, blog_store, user_store, alice):
    user_store.fail_next.add("add_owned_blog")

    with pytest.raises(PartiallyAppliedMutationError) as exc:
        await service.create(alice, _payload())

    assert exc.value.operation == "create"
    assert exc.value.context.user_id == str(alice.id)
    assert len(blog_store.rows) == 1
    assert user_store.rows[alice.id].blog_ids == []


async def test_create_blog_failure_propagates_unchanged(service, blog_store, user_store, alice):
    blog_store.fail_next.add("insert")

    with pytest.raises(RuntimeError):
        await service.create(alice, _payload())
    assert user_store.calls == []


# --- update -------------------------------------------------------------------------

async def test_update_applies_supplied_fields_only(service, alice):
    blog = await service.create(alice, _payload(likes=3))

    updated = await service.update(str(blog.id), BlogUpdate(likes=4))

    assert updated.likes == 4
    assert updated.title == "Go To Statement"
    assert updated.author == "Dijkstra"


async def test_update_ignores_owner_in_patch(service, alice, bob):
    blog = await service.create(alice, _payload())
    patch = BlogUpdate.model_validate(
        {"title": "Renamed", "user": str(bob.id), "owner": str(bob.id)},
    )

    updated = await service.update(str(blog.id), patch)

    assert updated.title == "Renamed"
    assert updated.user_id == alice.id


async def test_update_needs_no_ownership_by_default(service, alice, bob):
    blog = await service.create(alice, _payload())
    updated = await service.update(str(blog.id), BlogUpdate(likes=1), identity=bob)
    assert updated.likes == 1


async def test_update_owner_only_policy_rejects_non_owner(blog_store, user_store, alice, bob):
    strict = BlogMutationService(blog_store, user_store, owner_only_updates=True)
    blog = await strict.create(alice, _payload())

    with pytest.raises(OwnershipMismatchError):
        await strict.update(str(blog.id), BlogUpdate(likes=99), identity=bob)
    assert blog_store.rows[blog.id].likes == 0

    updated = await strict.update(str(blog.id), BlogUpdate(likes=99), identity=alice)
    assert updated.likes == 99


async def test_update_unknown_blog_is_not_found(service):
    with pytest.raises(ResourceNotFoundError):
        await service.update(str(uuid.uuid4()), BlogUpdate(likes=1))


# --- comments -----------------------------------------------------------------------

async def test_append_comment_preserves_order(service, alice):
    blog = await service.create(alice, _payload())

    await service.append_comment(str(blog.id), "first")
    updated = await service.append_comment(str(blog.id), "second")

    assert updated.comments == ["first", "second"]


async def test_append_comment_unknown_blog_is_not_found(service):
    with pytest.raises(ResourceNotFoundError):
        await service.append_comment(str(uuid.uuid4()), "hello")


# --- delete -------------------------------------------------------------------------

async def test_delete_unknown_then_wrong_owner_then_owner(service, blog_store, user_store, alice, bob):
    blog = await service.create(alice, _payload())

    with pytest.raises(ResourceNotFoundError):
        await service.delete(alice, str(uuid.uuid4()))

    with pytest.raises(OwnershipMismatchError):
        await service.delete(bob, str(blog.id))
    assert blog.id in blog_store.rows
    assert user_store.rows[alice.id].blog_ids == [blog.id]

    await service.delete(alice, str(blog.id))
    assert blog.id not in blog_store.rows
    assert user_store.rows[alice.id].blog_ids == []


async def test_non_owner_delete_mutates_nothing(service, blog_store, user_store, alice, bob):
    blog = await service.create(alice, _payload())
    blog_store.calls.clear()
    user_store.calls.clear()

    with pytest.raises(OwnershipMismatchError):
        await service.delete(bob, str(blog.id))

    assert blog_store.calls == ["find_by_id"]
    assert user_store.calls == []
    assert user_store.rows[bob.id].blog_ids == []


async def test_delete_without_identity_is_authentication_failure(service, alice):
    blog = await service.create(alice, _payload())
    with pytest.raises(AuthenticationFailedError):
        await service.delete(None, str(blog.id))


async def test_delete_owner_list_failure_is_partially_applied(service, blog_store, user_store, alice):
    blog = await service.create(alice, _payload())
    user_store.fail_next.add("remove_owned_blog")

    with pytest.raises(PartiallyAppliedMutationError) as exc:
        await service.delete(alice, str(blog.id))

    assert exc.value.operation == "delete"
    assert blog.id not in blog_store.rows
    assert user_store.rows[alice.id].blog_ids == [blog.id]


async def test_link_consistent_after_create_delete_sequence(service, blog_store, user_store, alice, bob):
    a1 = await service.create(alice, _payload(title="a1"))
    b1 = await service.create(bob, _payload(title="b1"))
    a2 = await service.create(alice, _payload(title="a2"))
    await service.delete(alice, str(a1.id))
    b2 = await service.create(bob, _payload(title="b2"))
    await service.delete(bob, str(b1.id))

    _assert_link_consistent(blog_store, user_store)
    assert user_store.rows[alice.id].blog_ids == [a2.id]
    assert user_store.rows[bob.id].blog_ids == [b2.id]


# --- reads --------------------------------------------------------------------------

async def test_get_malformed_id_never_reaches_store(service, blog_store):
    with pytest.raises(MalformedIdentifierError):
        await service.get("not-a-uuid")
    assert blog_store.calls == []


async def test_get_unknown_id_is_not_found(service):
    with pytest.raises(ResourceNotFoundError):
        await service.get(str(uuid.uuid4()))


async def test_list_all_returns_every_blog(service, alice, bob):
    await service.create(alice, _payload(title="one"))
    await service.create(bob, _payload(title="two"))
    titles = [b.title for b in await service.list_all()]
    assert titles == ["one", "two"]
