# tests/test_permissions.py

from __future__ import annotations

import pytest

from app.core.errors import Forbidden, NotFound
from app.core.permissions import POLICY, Relationship, authorize, is_admin_or_owner, require


def test_authorize_returns_membership(db, world) -> None:
    m = authorize(db, world.alice, world.group_id)

    assert m.group_id == world.group_id
    assert m.user_id == world.alice
    assert m.is_admin is True
    assert authorize(db, world.bob, world.group_id).is_admin is False


def test_authorize_unknown_group(db, world) -> None:
    with pytest.raises(NotFound):
        authorize(db, world.alice, 12345)


def test_authorize_non_member(db, world) -> None:
    with pytest.raises(Forbidden):
        authorize(db, world.carol, world.group_id)


def test_is_admin_or_owner(db, world) -> None:
    admin = authorize(db, world.alice, world.group_id)
    member = authorize(db, world.bob, world.group_id)

    assert is_admin_or_owner(admin, world.bob)
    assert is_admin_or_owner(member, world.bob)
    assert not is_admin_or_owner(member, world.alice)


def test_message_edit_is_author_only(db, world) -> None:
    admin = authorize(db, world.alice, world.group_id)
    member = authorize(db, world.bob, world.group_id)

    require(member, "message", "update", owner_id=world.bob)
    with pytest.raises(Forbidden):
        require(admin, "message", "update", owner_id=world.bob)


def test_message_delete_allows_admin(db, world) -> None:
    admin = authorize(db, world.alice, world.group_id)
    member = authorize(db, world.bob, world.group_id)

    require(admin, "message", "delete", owner_id=world.bob)
    require(member, "message", "delete", owner_id=world.bob)
    with pytest.raises(Forbidden):
        require(member, "message", "delete", owner_id=world.alice)


def test_tasks_have_no_ownership() -> None:
    for action in ("read", "create", "update", "delete"):
        assert POLICY[("task", action)] is Relationship.MEMBER
