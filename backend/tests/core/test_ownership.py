"""Ownership Guard — identity requirement, owner check, patch allow-list, owned-list derivation."""

from uuid import uuid4

import pytest

from app.core.domain_types import UserIdentity
from app.core.errors import (
    AuthenticationFailedError, AuthFailureReason, OwnershipMismatchError,
)
from app.core.ownership import (
    check_owner, derive_owned_ids, mutable_fields, require_identity,
)


def _identity(username="alice"):
    return UserIdentity(id=uuid4(), username=username)


def test_require_identity_rejects_anonymous():
    with pytest.raises(AuthenticationFailedError) as exc:
        require_identity(None)
    assert exc.value.reason is AuthFailureReason.MISSING
    assert exc.value.http_status == 401


def test_require_identity_passes_identity_through():
    who = _identity()
    assert require_identity(who) is who


def test_check_owner_accepts_owner():
    who = _identity()
    check_owner(who, who.id, uuid4(), "delete")


def test_check_owner_compares_ids_not_usernames():
    owner, impostor = _identity("alice"), _identity("alice")
    blog_id = uuid4()

    with pytest.raises(OwnershipMismatchError) as exc:
        check_owner(impostor, owner.id, blog_id, "delete")

    assert exc.value.http_status == 403
    assert exc.value.context.blog_id == str(blog_id)
    assert exc.value.context.user_id == str(impostor.id)


def test_mutable_fields_drops_owner_and_unknowns():
    patch = {"title": "t", "likes": 3, "user": "x", "owner": "y", "id": "z", "comments": ["c"]}
    assert mutable_fields(patch) == {"title": "t", "likes": 3}


def test_derive_owned_ids_keeps_consistent_list_unchanged():
    a, b = uuid4(), uuid4()
    assert derive_owned_ids([b, a], [a, b]) == [b, a]


def test_derive_owned_ids_appends_missing_and_drops_stale():
    kept, stale, missing = uuid4(), uuid4(), uuid4()
    assert derive_owned_ids([stale, kept], [kept, missing]) == [kept, missing]


def test_derive_owned_ids_removes_duplicates():
    a = uuid4()
    assert derive_owned_ids([a, a], [a]) == [a]
