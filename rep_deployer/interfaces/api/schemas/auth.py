"""Authentication related schemas."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str | None = Field(default=None, description="Keycloak username")
    password: str | None = Field(default=None, description="Keycloak password")


class LoginResponse(BaseModel):
    success: bool
    message: str | None = None
    error: str | None = None


class LogoutResponse(BaseModel):
    success: bool
    message: str


class AuthStatusResponse(BaseModel):
    authenticated: bool
    username: str | None
