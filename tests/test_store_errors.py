# tests/test_store_errors.py

from __future__ import annotations

from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.database import get_db
from app.main import app


class UnreachableSession:
    """Sesión cuya base de datos no responde: cuenta cada intento."""

    def __init__(self) -> None:
        self.calls = 0

    def _fail(self, *args, **kwargs):
        self.calls += 1
        raise OperationalError("SELECT 1", {}, Exception("unable to open database file"))

    get = _fail
    execute = _fail

    def close(self) -> None:
        pass


def test_store_failure_is_service_unavailable(client, auth, world) -> None:
    broken = UnreachableSession()
    app.dependency_overrides[get_db] = lambda: broken

    r = client.get(f"/api/messages/{world.group_id}", headers=auth(world.bob))

    assert r.status_code == 503
    body = r.json()
    assert body["success"] is False
    assert body["error"]["kind"] == "store_unavailable"
    assert broken.calls == 1


def test_unique_conflict_is_validation(client, auth, world, session_factory) -> None:
    session = session_factory()

    def commit() -> None:
        raise IntegrityError("INSERT INTO group_invites", {}, Exception("UNIQUE constraint failed"))

    session.commit = commit

    def override_get_db():
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    r = client.post(
        f"/api/groups/{world.group_id}/invites",
        json={"user_id": world.carol},
        headers=auth(world.bob),
    )

    assert r.status_code == 400
    assert r.json()["error"]["kind"] == "validation"
