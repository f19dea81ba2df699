"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_bearer_token, get_locale
from app.i18n import translate
from app.rate_limit import limiter
from app.schemas.auth import LoginRequest, LoginResponse, MessageResponse
from app.services.auth import get_auth_service

router = APIRouter(prefix="/api/1.0", tags=["Authentication"])


@router.post("/auth", response_model=LoginResponse)
@limiter.limit("10/minute")
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    """Authenticate with e-mail and password and receive a bearer token."""
    auth_service = get_auth_service()
    result = auth_service.authenticate(db, body.email, body.password)
    return LoginResponse(id=result.id, username=result.username, image=result.image, token=result.token)


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request, locale: str = Depends(get_locale), db: Session = Depends(get_db)) -> MessageResponse:
    """Invalidate the bearer token sent with the request, if any."""
    token = get_bearer_token(request)
    if token:
        get_auth_service().logout(db, token)
    return MessageResponse(message=translate(locale, "logout_success"))
