# tests/conftest.py

from __future__ import annotations

import os
from types import SimpleNamespace

# Antes de importar app: BD en memoria y modo DEV para /dev/login
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEV"] = "true"
os.environ["SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.main import app
from app.models.group import Group
from app.models.membership import GroupMember
from app.models.user import User


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def world(db) -> SimpleNamespace:
    """
    Un grupo "board" con admin alice y miembro bob; carol existe pero no es miembro.
    """
    alice = User(username="alice", display_name="Alice")
    bob = User(username="bob", display_name="Bob")
    carol = User(username="carol", display_name="Carol")
    db.add_all([alice, bob, carol])
    db.flush()

    group = Group(name="board", admin_id=alice.id)
    db.add(group)
    db.flush()
    db.add_all([
        GroupMember(group_id=group.id, user_id=alice.id),
        GroupMember(group_id=group.id, user_id=bob.id),
    ])
    db.commit()

    return SimpleNamespace(
        group_id=group.id,
        alice=alice.id,
        bob=bob.id,
        carol=carol.id,
    )


@pytest.fixture()
def auth():
    def _headers(user_id: int) -> dict:
        return {"Authorization": f"Bearer {create_access_token(str(user_id))}"}
    return _headers
