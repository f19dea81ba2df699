"""Pydantic schemas for authentication endpoints."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class LoginResponse(BaseModel):
    id: int
    username: str
    image: str | None = None
    token: str


class MessageResponse(BaseModel):
    message: str
