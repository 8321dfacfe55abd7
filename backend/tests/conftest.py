from __future__ import annotations

import os

# Settings are read at import time
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from studyplanner import models  # noqa: F401
from studyplanner.core.security import create_token
from studyplanner.db.base import Base
from studyplanner.db.session import build_engine, get_db
from studyplanner.main import create_app
from studyplanner.models.user import User


@pytest.fixture()
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine):
    with Session(engine) as session:
        yield session
        session.rollback()


@pytest.fixture()
def user(db_session: Session) -> User:
    user = User(
        email="student@example.com",
        hashed_password="hashed",
        first_name="Test",
        last_name="Student",
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def client(engine):
    app = create_app()
    testing_session = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def _get_test_db():
        db = testing_session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_token(user.id, 'access')}"}
