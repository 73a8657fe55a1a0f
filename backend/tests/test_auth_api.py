import pytest

from app.core.limiter import limiter
from app.core.security import password_hasher, token_service
from app.models.user import User

VALID = {"email": "test@example.com", "username": "testuser", "password": "Password123!"}


def register(client, **overrides):
    return client.post("/api/auth/register", json={**VALID, **overrides})


class TestRegister:
    def test_register_success(self, client, db):
        response = register(client)

        assert response.status_code == 201
        assert response.json() == {"success": True, "message": "Registration successful"}

        user = db.query(User).filter(User.email == "test@example.com").one()
        assert user.username == "testuser"
        assert user.is_premium is False
        assert user.last_login is None
        assert user.swiped_profiles == []
        assert password_hasher.verify("Password123!", user.hashed_password)
        assert user.hashed_password != "Password123!"

    def test_email_and_username_are_normalized(self, client, db):
        response = register(client, email="  Mixed.Case@Example.COM ", username="  spaced_name ")

        assert response.status_code == 201
        user = db.query(User).one()
        assert user.email == "mixed.case@example.com"
        assert user.username == "spaced_name"

    def test_duplicate_email_differing_in_case(self, client):
        assert register(client).status_code == 201

        response = register(client, email="Test@Example.com", username="another")

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "DUPLICATE_FIELD"
        assert body["message"] == "This email is already registered. Please use a different email."

    def test_duplicate_username(self, client):
        assert register(client).status_code == 201

        response = register(client, email="other@example.com")

        assert response.status_code == 409
        assert "username" in response.json()["message"]

    @pytest.mark.parametrize("field,value,message", [
        ("email", "invalidemail", "Please enter a valid email"),
        ("username", "ab", "Username must be 3-30 characters and can only contain letters, numbers and underscore"),
        ("username", "bad name!", "Username must be 3-30 characters and can only contain letters, numbers and underscore"),
        ("password", "password", "Password must be 8-20 characters and contain uppercase, lowercase, number and special character"),
        ("password", "Sh0rt!", "Password must be 8-20 characters and contain uppercase, lowercase, number and special character"),
        ("password", "Password123!Password123!", "Password must be 8-20 characters and contain uppercase, lowercase, number and special character"),
    ])
    def test_invalid_fields(self, client, field, value, message):
        response = register(client, **{field: value})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "VALIDATION_ERROR"
        assert body["errors"][0]["field"] == field
        assert body["errors"][0]["msg"] == message

    def test_every_violation_is_reported(self, client):
        response = client.post("/api/auth/register", json={"email": "nope", "username": "x", "password": "weak"})

        assert response.status_code == 400
        assert {e["field"] for e in response.json()["errors"]} == {"email", "username", "password"}
        assert {e["type"] for e in response.json()["errors"]} == {
            "invalid_email", "invalid_username", "weak_password",
        }


class TestLogin:
    def test_login_success(self, client, db, make_user):
        user = make_user(email="test@example.com")

        response = client.post("/api/auth/login", json={"email": "Test@Example.com", "password": "Password123!"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Login successful"
        payload = token_service.verify(body["data"]["token"])
        assert payload.user_id == user.id
        assert payload.email == "test@example.com"

        db.expire_all()
        assert user.last_login is not None

    def test_unknown_email(self, client):
        response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "Password123!"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid credentials"

    def test_wrong_password(self, client, db, make_user):
        user = make_user(email="test@example.com")

        response = client.post("/api/auth/login", json={"email": "test@example.com", "password": "WrongPassword"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_CREDENTIALS"
        db.expire_all()
        assert user.last_login is None

    @pytest.mark.parametrize("payload,message", [
        ({"email": "invalidemail", "password": "Password123!"}, "Please enter a valid email"),
        ({"email": "test@example.com", "password": "short"}, "Password must be at least 8 characters long"),
    ])
    def test_invalid_input(self, client, payload, message):
        response = client.post("/api/auth/login", json=payload)

        assert response.status_code == 400
        assert response.json()["errors"][0]["msg"] == message

    def test_registered_user_can_login(self, client):
        assert register(client).status_code == 201

        response = client.post("/api/auth/login", json={"email": VALID["email"], "password": VALID["password"]})

        assert response.status_code == 200


def test_auth_endpoints_are_rate_limited(client, monkeypatch):
    monkeypatch.setattr(limiter, "enabled", True)
    limiter.reset()
    credentials = {"email": "nobody@example.com", "password": "Password123!"}
    try:
        for _ in range(5):
            assert client.post("/api/auth/login", json=credentials).status_code == 400

        response = client.post("/api/auth/login", json=credentials)

        assert response.status_code == 429
        assert response.json() == {
            "success": False,
            "code": "RATE_LIMITED",
            "message": "Too many attempts, please try again later",
        }
    finally:
        limiter.reset()
