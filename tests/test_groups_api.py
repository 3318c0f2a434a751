# tests/test_groups_api.py

from __future__ import annotations


def test_create_group_makes_caller_admin_and_member(client, auth, world) -> None:
    r = client.post("/api/groups", json={"name": "  study  "}, headers=auth(world.carol))

    assert r.status_code == 201
    data = r.json()["data"]
    assert data["name"] == "study"
    assert data["admin_id"] == world.carol
    assert data["members"] == [world.carol]
    assert data["invitees"] == []


def test_create_group_requires_name(client, auth, world) -> None:
    r = client.post("/api/groups", json={"name": ""}, headers=auth(world.carol))
    assert r.status_code == 400


def test_get_group_is_members_only(client, auth, world) -> None:
    r = client.get(f"/api/groups/{world.group_id}", headers=auth(world.bob))
    assert r.status_code == 200
    assert r.json()["data"]["members"] == sorted([world.alice, world.bob])

    assert client.get(f"/api/groups/{world.group_id}", headers=auth(world.carol)).status_code == 403
    assert client.get("/api/groups/999", headers=auth(world.carol)).status_code == 404


def test_list_my_groups(client, auth, world) -> None:
    r = client.get("/api/groups", headers=auth(world.bob))
    assert [g["id"] for g in r.json()["data"]] == [world.group_id]

    r = client.get("/api/groups", headers=auth(world.carol))
    assert r.json()["data"] == []


def test_invite_then_accept(client, auth, world) -> None:
    g = world.group_id

    r = client.post(f"/api/groups/{g}/invites", json={"user_id": world.carol}, headers=auth(world.bob))
    assert r.status_code == 201
    assert r.json()["data"]["invited_by"] == world.bob

    invitations = client.get("/api/groups/invitations", headers=auth(world.carol)).json()["data"]
    assert [i["id"] for i in invitations] == [g]
    assert invitations[0]["invitees"] == [world.carol]

    r = client.post(f"/api/groups/{g}/join", headers=auth(world.carol))
    assert r.status_code == 200
    assert world.carol in r.json()["data"]["members"]
    assert r.json()["data"]["invitees"] == []

    # ya es miembro: puede leer el chat
    assert client.get(f"/api/messages/{g}", headers=auth(world.carol)).status_code == 200


def test_invite_rejects_duplicates_and_members(client, auth, world) -> None:
    g = world.group_id
    url = f"/api/groups/{g}/invites"

    assert client.post(url, json={"user_id": world.carol}, headers=auth(world.alice)).status_code == 201
    assert client.post(url, json={"user_id": world.carol}, headers=auth(world.alice)).status_code == 400
    assert client.post(url, json={"user_id": world.bob}, headers=auth(world.alice)).status_code == 400
    assert client.post(url, json={"user_id": 777}, headers=auth(world.alice)).status_code == 404


def test_non_member_cannot_invite(client, auth, world) -> None:
    r = client.post(
        f"/api/groups/{world.group_id}/invites",
        json={"user_id": world.carol},
        headers=auth(world.carol),
    )
    assert r.status_code == 403


def test_join_without_invite_is_forbidden(client, auth, world) -> None:
    r = client.post(f"/api/groups/{world.group_id}/join", headers=auth(world.carol))
    assert r.status_code == 403


def test_admin_removes_member(client, auth, world) -> None:
    g = world.group_id

    r = client.delete(f"/api/groups/{g}/members/{world.bob}", headers=auth(world.alice))
    assert r.status_code == 204

    assert client.get(f"/api/tasks/{g}", headers=auth(world.bob)).status_code == 403


def test_member_can_leave_but_not_kick(client, auth, world, db) -> None:
    g = world.group_id
    client.post(f"/api/groups/{g}/invites", json={"user_id": world.carol}, headers=auth(world.alice))
    client.post(f"/api/groups/{g}/join", headers=auth(world.carol))

    assert client.delete(f"/api/groups/{g}/members/{world.carol}", headers=auth(world.bob)).status_code == 403
    assert client.delete(f"/api/groups/{g}/members/{world.bob}", headers=auth(world.bob)).status_code == 204


def test_admin_cannot_be_removed(client, auth, world) -> None:
    r = client.delete(f"/api/groups/{world.group_id}/members/{world.alice}", headers=auth(world.alice))
    assert r.status_code == 400


def test_remove_non_member_is_not_found(client, auth, world) -> None:
    r = client.delete(f"/api/groups/{world.group_id}/members/{world.carol}", headers=auth(world.alice))
    assert r.status_code == 404
