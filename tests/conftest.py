"""Pytest configuration and fixtures."""

from email.message import Message
from functools import lru_cache
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.database import Base, get_db
from app.models.token import Token  # noqa: F401
from app.models.user import User
from app.services.auth import hash_password

PASSWORD = "P4ssword"


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="upload_dir", autouse=True)
def upload_dir_fixture(tmp_path, monkeypatch):
    """Keep profile images written by tests inside tmp_path."""
    settings = get_settings()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "MAIL_ENABLED", True)
    return settings.profile_image_dir


@pytest.fixture(name="smtp")
def smtp_fixture():
    """Replace smtplib.SMTP for the mail service. Yields the mocked server connection."""
    with patch("app.services.email.smtplib.SMTP") as mock_smtp:
        server = MagicMock()
        mock_smtp.return_value.__enter__.return_value = server
        yield server


@pytest.fixture(name="client")
def client_fixture(db_session: Session, smtp):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from app.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@lru_cache
def hashed(password: str) -> str:
    """bcrypt is slow on purpose; hash each test password once per run."""
    return hash_password(password)


def add_user(
    db: Session,
    username: str = "user1",
    email_address: str = "user1@mail.com",
    password: str = PASSWORD,
    active: bool = True,
) -> User:
    """Insert a user directly, bypassing registration."""
    user = User(
        username=username,
        email=email_address,
        password_hash=hashed(password),
        is_active=active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(client: TestClient, email_address: str = "user1@mail.com", password: str = PASSWORD) -> str:
    """Log in through the API and return the bearer token."""
    response = client.post("/api/1.0/auth", json={"email": email_address, "password": password})
    assert response.status_code == 200
    return response.json()["token"]


def sent_messages(server: MagicMock) -> list[Message]:
    """Messages handed to the mocked SMTP connection."""
    return [c.args[0] for c in server.send_message.call_args_list]


def message_text(message: Message) -> str:
    """Headers plus every decoded body part of a sent message."""
    parts = [f"To: {message['To']}", f"Subject: {message['Subject']}"]
    for part in message.walk():
        if part.get_content_maintype() == "multipart":
            continue
        parts.append(part.get_payload(decode=True).decode(part.get_content_charset() or "utf-8"))
    return "\n".join(parts)


@pytest.fixture(name="active_user")
def active_user_fixture(db_session: Session) -> User:
    return add_user(db_session)
