"""Password reset: token issuance, mail notification and single-use redemption."""

import logging
import secrets
from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import ForbiddenError, NotFoundError, ValidationError
from app.models.user import User
from app.services.auth import get_auth_service, hash_password
from app.services.email import get_email_service
from app.validation import is_email, validate_password

logger = logging.getLogger("hoaxify")


class PasswordResetService:
    """Issues and redeems password reset tokens.

    Issuing is two steps: the token is committed first, then mailed. A failed
    mail leaves the token in place and valid, and the caller sees
    EmailDeliveryError. Tokens expire after PASSWORD_RESET_EXPIRE_MINUTES and
    are cleared on successful use.
    """

    def request_password_reset(self, db: Session, email: str | None, locale: str) -> str:
        """Store a fresh reset token for ``email`` and mail it. Returns the token."""
        if not is_email(email):
            raise ValidationError({"email": "email_invalid"})

        address = email.strip().lower()  # type: ignore[union-attr]
        user = db.query(User).filter(func.lower(User.email) == address).first()
        if not user:
            raise NotFoundError("email_not_inuse")

        token = secrets.token_urlsafe(32)
        user.password_reset_token = token
        user.password_reset_expires_at = datetime.utcnow() + timedelta(
            minutes=get_settings().PASSWORD_RESET_EXPIRE_MINUTES
        )
        db.commit()

        get_email_service().send_password_reset(user.email, token, locale)
        logger.info("Password reset requested for user id=%d", user.id)
        return token

    def find_user_by_token(self, db: Session, token: str | None) -> User:
        """Resolve a reset token to its user.

        Unknown and expired tokens both raise ForbiddenError; an expired token
        is cleared on the way out.
        """
        if not token:
            raise ForbiddenError("unauthorized_password_reset")

        user = db.query(User).filter(User.password_reset_token == token).first()
        if not user:
            raise ForbiddenError("unauthorized_password_reset")

        if not user.password_reset_expires_at or user.password_reset_expires_at < datetime.utcnow():
            user.password_reset_token = None
            user.password_reset_expires_at = None
            db.commit()
            raise ForbiddenError("unauthorized_password_reset")

        return user

    def update_password(self, db: Session, token: str | None, new_password: str | None) -> User:
        """Set a new password using a reset token.

        The token is checked before the password policy, so a bad token is
        always ForbiddenError. A policy violation leaves the token usable.
        """
        user = self.find_user_by_token(db, token)

        password_error = validate_password(new_password)
        if password_error:
            raise ValidationError({"password": password_error})

        user.password_hash = hash_password(new_password)  # type: ignore[arg-type]
        user.password_reset_token = None
        user.password_reset_expires_at = None
        # Receiving the reset mail proves ownership of the address.
        user.is_active = True
        user.activation_token = None
        get_auth_service().delete_user_tokens(db, user.id)
        db.commit()

        logger.info("Password updated for user id=%d", user.id)
        return user


_password_reset_service: PasswordResetService | None = None


def get_password_reset_service() -> PasswordResetService:
    """Get singleton password reset service instance."""
    global _password_reset_service
    if _password_reset_service is None:
        _password_reset_service = PasswordResetService()
    return _password_reset_service
