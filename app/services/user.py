"""User service: registration, activation, listing and profile updates."""

import logging
import secrets
from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import EmailDeliveryError, ForbiddenError, InvalidTokenError, NotFoundError, ValidationError
from app.models.user import User
from app.pagination import total_pages
from app.services.auth import hash_password
from app.services.email import get_email_service
from app.services.file_storage import get_file_storage_service
from app.validation import validate_registration, validate_user_update

logger = logging.getLogger("hoaxify")


@dataclass
class UserPage:
    """One page of active users, reduced to public fields."""

    content: list[dict] = field(default_factory=list)
    page: int = 0
    size: int = 10
    total_pages: int = 0


def public_view(user: User) -> dict:
    return {"id": user.id, "username": user.username, "email": user.email}


class UserService:
    """Handles the user lifecycle from sign-up to profile edits."""

    def register(
        self, db: Session, username: str | None, email: str | None, password: str | None, locale: str
    ) -> User:
        """Create an inactive user and mail the activation link.

        The insert and the mail share one transaction: if the mail cannot be
        delivered the user is rolled back and EmailDeliveryError is raised.
        """
        errors = validate_registration(db, username, email, password)
        if errors:
            raise ValidationError(errors)

        user = User(
            username=username.strip(),  # type: ignore[union-attr]
            email=email.lower().strip(),  # type: ignore[union-attr]
            password_hash=hash_password(password),  # type: ignore[arg-type]
            is_active=False,
            activation_token=secrets.token_urlsafe(32),
        )
        db.add(user)
        try:
            db.flush()
        except IntegrityError:
            # Lost the race against a concurrent sign-up with the same address.
            db.rollback()
            raise ValidationError({"email": "email_inuse"}) from None

        try:
            get_email_service().send_account_activation(user.email, user.activation_token, locale)
        except EmailDeliveryError:
            db.rollback()
            raise

        db.commit()
        db.refresh(user)
        logger.info("Registered user %s (id=%d)", user.email, user.id)
        return user

    def activate(self, db: Session, token: str) -> User:
        user = db.query(User).filter(User.activation_token == token).first()
        if not user:
            raise InvalidTokenError("account_activation_failure")

        user.is_active = True
        user.activation_token = None
        db.commit()
        return user

    def list_users(self, db: Session, page: int, size: int, exclude_user_id: int | None = None) -> UserPage:
        """Page through active users in id order. ``page`` and ``size`` must already be normalised."""
        query = db.query(User).filter(User.is_active.is_(True))
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)

        count = query.count()
        # Pages past the end skip the query; huge offsets overflow the database integer.
        users = query.order_by(User.id).offset(page * size).limit(size).all() if page * size < count else []
        return UserPage(
            content=[public_view(u) for u in users],
            page=page,
            size=size,
            total_pages=total_pages(count, size),
        )

    def get_user(self, db: Session, user_id: int) -> User:
        """Fetch an active user. Inactive users are reported as not found."""
        user = db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()
        if not user:
            raise NotFoundError("user_not_found")
        return user

    def update_user(
        self, db: Session, user_id: int, caller: User | None, username: str | None, image: str | None
    ) -> User:
        """Update the caller's own username and, optionally, profile image.

        A new image replaces the stored file; without one the old image is kept.
        """
        if caller is None or caller.id != user_id:
            raise ForbiddenError("unauthorized_user_update")

        errors = validate_user_update(username, image)
        if errors:
            raise ValidationError(errors)

        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ForbiddenError("unauthorized_user_update")

        storage = get_file_storage_service()
        previous = user.image
        stored = storage.save_profile_image(image) if image is not None else None
        user.username = username.strip()  # type: ignore[union-attr]
        if stored:
            user.image = stored

        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            storage.delete_profile_image(stored)
            raise

        # The old file goes only once the row no longer points at it.
        if stored:
            storage.delete_profile_image(previous)
        db.refresh(user)
        return user


_user_service: UserService | None = None


def get_user_service() -> UserService:
    """Get singleton user service instance."""
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
