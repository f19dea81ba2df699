"""Authentication service: credential checks and opaque bearer tokens."""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

import bcrypt
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import AuthenticationError, ForbiddenError
from app.models.token import Token
from app.models.user import User


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


@dataclass
class AuthResult:
    """Successful login: the user's public fields plus a fresh bearer token."""

    id: int
    username: str
    image: str | None
    token: str


class AuthService:
    """Handles login, logout and bearer token lifecycle."""

    def token_ttl(self) -> timedelta:
        return timedelta(days=get_settings().AUTH_TOKEN_TTL_DAYS)

    def authenticate(self, db: Session, email: str | None, password: str | None) -> AuthResult:
        """Check credentials and issue a token.

        Unknown e-mail and wrong password are both reported as
        AuthenticationError so callers cannot probe for registered addresses.
        Inactive accounts get ForbiddenError.
        """
        if not email or not password:
            raise AuthenticationError()

        user = db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()
        if not user or not check_password(password, user.password_hash):
            raise AuthenticationError()

        if not user.is_active:
            raise ForbiddenError("inactive_authentication_failure")

        token = self.create_token(db, user)
        return AuthResult(id=user.id, username=user.username, image=user.image, token=token)

    def create_token(self, db: Session, user: User) -> str:
        token = secrets.token_urlsafe(32)
        db.add(Token(token=token, user_id=user.id, last_used_at=datetime.utcnow()))
        db.commit()
        return token

    def verify_token(self, db: Session, token: str) -> User | None:
        """Resolve a bearer token to its active user, refreshing its last use.

        Returns None for unknown or stale tokens; never raises.
        """
        cutoff = datetime.utcnow() - self.token_ttl()
        stored = db.query(Token).filter(Token.token == token, Token.last_used_at > cutoff).first()
        if not stored:
            return None

        user = db.query(User).filter(User.id == stored.user_id, User.is_active.is_(True)).first()
        if not user:
            return None

        stored.last_used_at = datetime.utcnow()
        db.commit()
        return user

    def logout(self, db: Session, token: str) -> None:
        db.query(Token).filter(Token.token == token).delete(synchronize_session=False)
        db.commit()

    def delete_user_tokens(self, db: Session, user_id: int) -> int:
        """Drop every session of a user. Caller commits."""
        return db.query(Token).filter(Token.user_id == user_id).delete(synchronize_session=False)

    def delete_stale_tokens(self, db: Session, older_than: datetime) -> int:
        """Delete tokens not used since ``older_than``. Returns the number removed."""
        deleted = db.query(Token).filter(Token.last_used_at < older_than).delete(synchronize_session=False)
        db.commit()
        return deleted


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
