"""User API endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_locale, get_optional_user
from app.i18n import translate
from app.models.user import User
from app.pagination import parse_page, parse_size
from app.rate_limit import limiter
from app.schemas.auth import MessageResponse
from app.schemas.user import (
    RegisterRequest,
    UserPageResponse,
    UserProfileResponse,
    UserResponse,
    UserUpdateRequest,
)
from app.services.user import get_user_service

router = APIRouter(prefix="/api/1.0/users", tags=["Users"])


@router.post("", response_model=MessageResponse)
@limiter.limit("5/minute")
def register(
    request: Request,
    body: RegisterRequest,
    locale: str = Depends(get_locale),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Register a new, inactive account and mail its activation link."""
    get_user_service().register(db, body.username, body.email, body.password, locale)
    return MessageResponse(message=translate(locale, "user_create_success"))


@router.post("/token/{token}", response_model=MessageResponse)
def activate(token: str, locale: str = Depends(get_locale), db: Session = Depends(get_db)) -> MessageResponse:
    """Activate an account with the token from the activation mail."""
    get_user_service().activate(db, token)
    return MessageResponse(message=translate(locale, "account_activation_success"))


@router.get("", response_model=UserPageResponse)
def list_users(
    page: str | None = None,
    size: str | None = None,
    caller: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> UserPageResponse:
    """List active users. An authenticated caller is left out of their own listing."""
    result = get_user_service().list_users(
        db,
        page=parse_page(page),
        size=parse_size(size),
        exclude_user_id=caller.id if caller else None,
    )
    return UserPageResponse(
        content=[UserResponse(**item) for item in result.content],
        page=result.page,
        size=result.size,
        total_pages=result.total_pages,
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)) -> UserResponse:
    """Get a single active user."""
    user = get_user_service().get_user(db, user_id)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserProfileResponse)
def update_user(
    user_id: int,
    body: UserUpdateRequest | None = None,
    caller: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> UserProfileResponse:
    """Update the caller's own username and profile image."""
    body = body or UserUpdateRequest()
    user = get_user_service().update_user(db, user_id, caller, body.username, body.image)
    return UserProfileResponse.model_validate(user)
