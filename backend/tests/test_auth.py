"""Tests for authentication: hashing, tokens, login, registration, logout."""

import pytest
from datetime import datetime, timedelta, timezone

from clubops.core import security
from clubops.core.security import (
    blacklist_token,
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from clubops.models.club import Club, ClubRole, UserClubRole
from clubops.models.user import User


# ============== Password hashing ==============

class TestPasswordHashing:
    def test_hash_and_verify(self):
        h = get_password_hash("secret123")
        assert verify_password("secret123", h)

    def test_wrong_password_rejected(self):
        h = get_password_hash("secret123")
        assert not verify_password("wrong", h)

    def test_hash_is_unique(self):
        h1 = get_password_hash("same")
        h2 = get_password_hash("same")
        assert h1 != h2  # different salts

    def test_invalid_hash_returns_false(self):
        assert not verify_password("test", "not-a-hash")


# ============== JWT tokens ==============

class TestJWTTokens:
    def test_create_and_decode(self):
        token = create_access_token(data={"sub": "42", "email": "a@b.com"})
        payload = decode_access_token(token)
        assert payload is not None
        assert payload["sub"] == "42"
        assert payload["email"] == "a@b.com"

    def test_token_has_expiry_and_id(self):
        payload = decode_access_token(create_access_token(data={"sub": "1"}))
        assert "exp" in payload
        assert "iat" in payload
        assert "jti" in payload

    def test_expired_token_rejected(self):
        token = create_access_token(
            data={"sub": "1"},
            expires_delta=timedelta(seconds=-10),
        )
        assert decode_access_token(token) is None

    def test_invalid_token_rejected(self):
        assert decode_access_token("not.a.token") is None

    def test_tampered_token_rejected(self):
        token = create_access_token(data={"sub": "1"})
        tampered = token[:-5] + "XXXXX"
        assert decode_access_token(tampered) is None

    def test_blacklisted_token_rejected(self):
        token = create_access_token(data={"sub": "1"})
        assert blacklist_token(token)
        assert decode_access_token(token) is None

    def test_blacklisting_prunes_expired_entries(self, monkeypatch):
        past = datetime.now(timezone.utc) - timedelta(minutes=1)
        monkeypatch.setattr(security, "_memory_blacklist", {"stale-jti": past})

        token = create_access_token(data={"sub": "1"})
        assert blacklist_token(token)

        assert "stale-jti" not in security._memory_blacklist
        assert len(security._memory_blacklist) == 1
        assert decode_access_token(token) is None


# ============== Login endpoint ==============

class TestLoginEndpoint:
    def test_successful_login(self, client, test_user, test_club):
        res = client.post("/auth/login", json={
            "email": "test@example.com",
            "password": "testpass123",
        })
        assert res.status_code == 200
        data = res.json()
        assert decode_access_token(data["token"])["sub"] == str(test_user.id)
        assert data["user"]["email"] == "test@example.com"
        assert data["user"]["firstName"] == "Test"
        assert data["user"]["clubs"] == [
            {"id": test_club.id, "name": test_club.name, "role": "MANAGER"},
        ]

    def test_wrong_password_401(self, client, test_user):
        res = client.post("/auth/login", json={
            "email": "test@example.com",
            "password": "incorrect",
        })
        assert res.status_code == 401
        assert res.json() == {"error": "Invalid credentials"}

    def test_nonexistent_user_401(self, client):
        res = client.post("/auth/login", json={
            "email": "nobody@example.com",
            "password": "anything",
        })
        assert res.status_code == 401

    def test_inactive_user_401(self, client, db_session):
        user = User(
            email="inactive@example.com",
            password_hash=get_password_hash("pass"),
            is_active=False,
        )
        db_session.add(user)
        db_session.commit()

        res = client.post("/auth/login", json={
            "email": "inactive@example.com",
            "password": "pass",
        })
        assert res.status_code == 401

    def test_missing_password_400(self, client):
        res = client.post("/auth/login", json={"email": "test@example.com"})
        assert res.status_code == 400
        assert "error" in res.json()


# ============== Current user ==============

class TestMeEndpoint:
    def test_get_current_user(self, client, auth_headers, test_user):
        res = client.get("/auth/me", headers=auth_headers)
        assert res.status_code == 200
        user = res.json()["user"]
        assert user["id"] == test_user.id
        assert user["clubs"][0]["role"] == "MANAGER"

    def test_unauthenticated_rejected(self, client):
        res = client.get("/auth/me")
        assert res.status_code == 401
        assert res.json() == {"error": "Access token required"}

    def test_token_for_deleted_user_rejected(self, client):
        token = create_access_token(data={"sub": "9999"})
        res = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 401


# ============== Registration ==============

class TestRegister:
    payload = {
        "fullName": "Jane Owner",
        "clubName": "Velvet Lounge",
        "email": "jane@velvet.com",
        "phone": "555-0100",
        "password": "supersecret",
        "confirmPassword": "supersecret",
    }

    def test_register_creates_owner_and_club(self, client, db_session):
        res = client.post("/auth/register", json=self.payload)
        assert res.status_code == 201
        data = res.json()
        assert data["club"]["name"] == "Velvet Lounge"
        assert data["user"]["firstName"] == "Jane"
        assert data["user"]["lastName"] == "Owner"
        assert data["user"]["clubs"] == [
            {"id": data["club"]["id"], "name": "Velvet Lounge", "role": "OWNER"},
        ]

        membership = db_session.query(UserClubRole).join(User).filter(
            User.email == "jane@velvet.com"
        ).one()
        assert membership.role == ClubRole.OWNER
        assert db_session.get(Club, data["club"]["id"]) is not None

    def test_registered_user_can_login(self, client):
        client.post("/auth/register", json=self.payload)
        res = client.post("/auth/login", json={"email": "jane@velvet.com", "password": "supersecret"})
        assert res.status_code == 200

    def test_password_mismatch_400(self, client):
        res = client.post("/auth/register", json={**self.payload, "confirmPassword": "different1"})
        assert res.status_code == 400
        assert "Passwords do not match" in res.json()["error"]

    def test_short_password_400(self, client):
        res = client.post("/auth/register", json={**self.payload, "password": "short", "confirmPassword": "short"})
        assert res.status_code == 400

    def test_duplicate_email_409(self, client, test_user):
        res = client.post("/auth/register", json={**self.payload, "email": "test@example.com"})
        assert res.status_code == 409


# ============== Logout ==============

class TestLogout:
    def test_logout_revokes_token(self, client, auth_headers):
        res = client.post("/auth/logout", headers=auth_headers)
        assert res.status_code == 200

        res = client.get("/auth/me", headers=auth_headers)
        assert res.status_code == 401

    def test_logout_requires_token(self, client):
        res = client.post("/auth/logout")
        assert res.status_code == 401
