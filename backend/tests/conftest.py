import os

# Must be set before app modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret"

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, build_engine, get_db
from app.core.security import password_hasher, token_service
from app.main import app
from app.models.swipe import SwipeDirection, SwipeRecord
from app.models.user import User

# StaticPool keeps the single in-memory database alive across sessions
test_engine = build_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture
def make_user(db):
    """Insert a user directly, bypassing the API"""
    counter = {"n": 0}

    def _make_user(**overrides) -> User:
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "username": f"user_{n}",
            "email": f"user{n}@example.com",
            "hashed_password": password_hasher.hash("Password123!"),
            "is_premium": False,
            "unlimited_swipes": False,
            "verified_label": False,
        }
        fields.update(overrides)
        user = User(**fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def add_swipes(db, make_user):
    """Give a user n swipes on fresh targets, dated `day` (default today, UTC)"""
    def _add_swipes(user: User, n: int, day: str | None = None) -> list[User]:
        day = day or datetime.now(timezone.utc).date().isoformat()
        targets = []
        for _ in range(n):
            target = make_user()
            targets.append(target)
            user.swiped_profiles.append(
                SwipeRecord(target_user_id=target.id, direction=SwipeDirection.RIGHT, date=day)
            )
        user.last_swipe_date = datetime.fromisoformat(day).replace(hour=8, tzinfo=timezone.utc)
        db.commit()
        return targets

    return _add_swipes


@pytest.fixture
def auth_header():
    def _auth_header(user: User) -> dict:
        token = token_service.create_access_token(user.id, user.email)
        return {"Authorization": f"Bearer {token}"}

    return _auth_header
