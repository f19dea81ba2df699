"""Password reset API endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_locale
from app.i18n import translate
from app.rate_limit import limiter
from app.schemas.auth import MessageResponse
from app.schemas.password import PasswordResetRequest, PasswordUpdateRequest
from app.services.password_reset import get_password_reset_service

router = APIRouter(prefix="/api/1.0/password", tags=["Password Reset"])


@router.post("", response_model=MessageResponse)
@limiter.limit("3/minute")
def request_password_reset(
    request: Request,
    body: PasswordResetRequest,
    locale: str = Depends(get_locale),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Mail a password reset token to a registered address."""
    get_password_reset_service().request_password_reset(db, body.email, locale)
    return MessageResponse(message=translate(locale, "password_reset_request_success"))


@router.put("", response_model=MessageResponse)
@limiter.limit("5/minute")
def update_password(
    request: Request,
    body: PasswordUpdateRequest,
    locale: str = Depends(get_locale),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Set a new password with a reset token. The token is single-use."""
    get_password_reset_service().update_password(db, body.password_reset_token, body.password)
    return MessageResponse(message=translate(locale, "password_update_success"))
