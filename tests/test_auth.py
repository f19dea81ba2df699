"""Tests for login, logout and bearer token handling."""

from datetime import datetime, timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.token import Token
from conftest import PASSWORD, add_user, login


class TestLogin:
    """Tests for POST /api/1.0/auth."""

    def test_login_success(self, client: TestClient, active_user):
        """Valid credentials return the user's id, username, image and a token."""
        response = client.post("/api/1.0/auth", json={"email": "user1@mail.com", "password": PASSWORD})
        assert response.status_code == 200
        data = response.json()
        assert list(data.keys()) == ["id", "username", "image", "token"]
        assert data["id"] == active_user.id
        assert data["username"] == "user1"
        assert len(data["token"]) >= 32

    def test_login_stores_token(self, client: TestClient, active_user, db_session: Session):
        """Issued token is persisted for the user."""
        token = login(client)
        stored = db_session.query(Token).filter(Token.token == token).first()
        assert stored is not None
        assert stored.user_id == active_user.id

    def test_login_unknown_email(self, client: TestClient, active_user):
        """Unknown e-mail is rejected with 401."""
        response = client.post("/api/1.0/auth", json={"email": "user1000@mail.com", "password": PASSWORD})
        assert response.status_code == 401

    def test_login_wrong_password(self, client: TestClient, active_user):
        """Wrong password is rejected with 401 and an error body."""
        response = client.post("/api/1.0/auth", json={"email": "user1@mail.com", "password": "Password1"})
        assert response.status_code == 401
        body = response.json()
        assert body["path"] == "/api/1.0/auth"
        assert body["message"] == "Incorrect credentials"

    def test_login_missing_credentials(self, client: TestClient):
        """Empty body is an authentication failure, not a crash."""
        response = client.post("/api/1.0/auth", json={})
        assert response.status_code == 401

    def test_login_inactive_user(self, client: TestClient, db_session: Session):
        """Inactive accounts get 403."""
        add_user(db_session, active=False)
        response = client.post("/api/1.0/auth", json={"email": "user1@mail.com", "password": PASSWORD})
        assert response.status_code == 403
        assert response.json()["message"] == "Account is inactive"

    def test_login_inactive_user_vietnamese(self, client: TestClient, db_session: Session):
        """Error message follows Accept-Language."""
        add_user(db_session, active=False)
        response = client.post(
            "/api/1.0/auth",
            json={"email": "user1@mail.com", "password": PASSWORD},
            headers={"Accept-Language": "vi"},
        )
        assert response.json()["message"] == "Tài khoản chưa được kích hoạt"

    def test_login_case_insensitive_email(self, client: TestClient, active_user):
        """Login works regardless of e-mail case."""
        response = client.post("/api/1.0/auth", json={"email": "USER1@MAIL.COM", "password": PASSWORD})
        assert response.status_code == 200


class TestLogout:
    """Tests for POST /api/1.0/logout."""

    def test_logout_deletes_token(self, client: TestClient, active_user, db_session: Session):
        """Logout removes the token from storage."""
        token = login(client)
        response = client.post("/api/1.0/logout", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert db_session.query(Token).filter(Token.token == token).first() is None

    def test_logout_without_token(self, client: TestClient):
        """Logout without a token still succeeds."""
        response = client.post("/api/1.0/logout")
        assert response.status_code == 200

    def test_token_unusable_after_logout(self, client: TestClient, active_user, db_session: Session):
        """A logged-out token no longer authorizes updates."""
        token = login(client)
        client.post("/api/1.0/logout", headers={"Authorization": f"Bearer {token}"})
        response = client.put(
            f"/api/1.0/users/{active_user.id}",
            json={"username": "user1-updated"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 403


class TestTokenExpiry:
    """Tests for sliding token expiry."""

    def test_token_older_than_a_week_is_rejected(self, client: TestClient, active_user, db_session: Session):
        """Tokens unused for over a week stop working."""
        token = login(client)
        stored = db_session.query(Token).filter(Token.token == token).first()
        stored.last_used_at = datetime.utcnow() - timedelta(days=7, minutes=1)
        db_session.commit()

        response = client.put(
            f"/api/1.0/users/{active_user.id}",
            json={"username": "user1-updated"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 403

    def test_use_refreshes_last_used_at(self, client: TestClient, active_user, db_session: Session):
        """Using a token moves its last_used_at forward."""
        token = login(client)
        stored = db_session.query(Token).filter(Token.token == token).first()
        stale = datetime.utcnow() - timedelta(days=6)
        stored.last_used_at = stale
        db_session.commit()

        response = client.put(
            f"/api/1.0/users/{active_user.id}",
            json={"username": "user1-updated"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 200
        db_session.refresh(stored)
        assert stored.last_used_at > stale


class TestHealthCheck:
    """Tests for health check endpoint."""

    def test_health_check(self, client: TestClient):
        """Health check returns ok status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["app"] == "hoaxify"

    def test_unknown_route_uses_error_body(self, client: TestClient):
        """Unknown routes return the common error shape."""
        response = client.get("/api/1.0/nothing-here")
        assert response.status_code == 404
        assert set(response.json().keys()) == {"path", "timestamp", "message"}


class TestRequestLimits:
    """Tests for the request size guard."""

    def test_malformed_content_length_is_rejected(self, client: TestClient):
        """A non-numeric Content-Length gets the common 400 body instead of a crash."""
        response = client.post(
            "/api/1.0/auth",
            content=b"{}",
            headers={"Content-Type": "application/json", "Content-Length": "abc"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Validation Failure"
