"""Request-scoped dependencies: locale and bearer-token authentication."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.i18n import negotiate_locale
from app.models.user import User
from app.services.auth import get_auth_service


def get_locale(request: Request) -> str:
    """Negotiate the response locale from Accept-Language."""
    return negotiate_locale(request.headers.get("Accept-Language"))


def get_bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User | None:
    """Resolve the caller from a Bearer token.

    Missing, unknown or stale tokens yield None; endpoints decide whether an
    anonymous caller is acceptable.
    """
    token = get_bearer_token(request)
    if not token:
        return None
    return get_auth_service().verify_token(db, token)
