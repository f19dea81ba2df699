"""Request validation for registration, profile update and password reset.

Single-field validators return a message key from ``app.i18n`` or ``None``.
Composite validators collect the first failure of every field into a
``field -> message key`` mapping, so a response reports all bad fields at once.
"""

import base64
import binascii
import re

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.user import User

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 32
PASSWORD_MIN_LENGTH = 8
# bcrypt only accepts secrets up to 72 bytes.
PASSWORD_MAX_BYTES = 72
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).*$")


def validate_username(username: str | None) -> str | None:
    """Length is measured on the stripped value, which is what gets stored."""
    username = username.strip() if username else None
    if not username:
        return "username_null"
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return "username_size"
    return None


def is_email(value: str | None) -> bool:
    """Check e-mail shape only; no DNS or deliverability lookups."""
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_email_address(email: str | None) -> str | None:
    if not email:
        return "email_null"
    if not is_email(email):
        return "email_invalid"
    return None


def validate_password(password: str | None) -> str | None:
    if not password:
        return "password_null"
    if len(password) < PASSWORD_MIN_LENGTH:
        return "password_size"
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return "password_too_long"
    if not PASSWORD_PATTERN.match(password):
        return "password_pattern"
    return None


def decode_image(image: str) -> bytes:
    """Decode a base64 image, tolerating a ``data:<mime>;base64,`` prefix.

    Raises ValueError if the payload is not valid base64.
    """
    if image.startswith("data:") and "," in image:
        image = image.split(",", 1)[1]
    try:
        return base64.b64decode(image, validate=True)
    except binascii.Error as e:
        raise ValueError("image is not valid base64") from e


def validate_image(image: str | None) -> str | None:
    """Optional profile image: at most MAX_PROFILE_IMAGE_BYTES once decoded (inclusive)."""
    if image is None:
        return None
    try:
        content = decode_image(image)
    except ValueError:
        return "profile_image_invalid"
    if len(content) > get_settings().MAX_PROFILE_IMAGE_BYTES:
        return "profile_image_size"
    return None


def email_in_use(db: Session, email: str) -> bool:
    return db.query(User.id).filter(func.lower(User.email) == email.strip().lower()).first() is not None


def validate_registration(db: Session, username: str | None, email: str | None, password: str | None) -> dict[str, str]:
    """Validate a sign-up request, including the e-mail uniqueness check."""
    errors: dict[str, str] = {}

    username_error = validate_username(username)
    if username_error:
        errors["username"] = username_error

    email_error = validate_email_address(email)
    if email_error is None and email_in_use(db, email):  # type: ignore[arg-type]
        email_error = "email_inuse"
    if email_error:
        errors["email"] = email_error

    password_error = validate_password(password)
    if password_error:
        errors["password"] = password_error

    return errors


def validate_user_update(username: str | None, image: str | None) -> dict[str, str]:
    """Validate a profile update. Username is required, image is optional."""
    errors: dict[str, str] = {}

    username_error = validate_username(username)
    if username_error:
        errors["username"] = username_error

    image_error = validate_image(image)
    if image_error:
        errors["image"] = image_error

    return errors
