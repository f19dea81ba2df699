"""Pydantic schemas for password reset endpoints."""

from pydantic import BaseModel, Field


class PasswordResetRequest(BaseModel):
    email: str | None = None


class PasswordUpdateRequest(BaseModel):
    password: str | None = None
    password_reset_token: str | None = Field(default=None, alias="passwordResetToken")

    model_config = {"populate_by_name": True}
