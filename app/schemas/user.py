"""Pydantic schemas for user endpoints."""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None


class UserUpdateRequest(BaseModel):
    username: str | None = None
    image: str | None = None


class UserResponse(BaseModel):
    id: int
    username: str
    email: str

    model_config = {"from_attributes": True}


class UserProfileResponse(UserResponse):
    image: str | None = None


class UserPageResponse(BaseModel):
    content: list[UserResponse]
    page: int
    size: int
    total_pages: int = Field(alias="totalPages")

    model_config = {"populate_by_name": True}
