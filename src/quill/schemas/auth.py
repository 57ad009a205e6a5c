"""Authentication schemas."""

from typing import Optional

from pydantic import BaseModel, EmailStr

from .user import UserResponse


class RegisterRequest(BaseModel):
    """Registration request."""
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(BaseModel):
    """Login request."""
    email: Optional[str] = None
    password: Optional[str] = None


class RefreshRequest(BaseModel):
    """Refresh request body (the cookie takes precedence)."""
    refresh_token: Optional[str] = None


class TokenResponse(BaseModel):
    """JWT token pair."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResponse(TokenResponse):
    """Token pair plus the logged-in user."""
    user: UserResponse
