"""Security utilities for authentication."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from uuid import UUID

import bcrypt
import jwt
from pydantic import BaseModel

from ..config import settings


ACCESS = "access"
REFRESH = "refresh"


class TokenPayload(BaseModel):
    """JWT token payload."""
    sub: str  # User ID
    email: str
    role: str
    type: str  # "access" or "refresh"
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    jti: str


class TokenPair(BaseModel):
    """Access/refresh token pair issued at login or rotation."""
    access_token: str
    refresh_token: str
    refresh_expires_at: datetime


def hash_password(password: str) -> str:
    """Hash password using bcrypt."""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        # Malformed hash
        return False


def _secret_for(token_type: str) -> str:
    if token_type == ACCESS:
        return settings.JWT_ACCESS_SECRET
    if token_type == REFRESH:
        return settings.JWT_REFRESH_SECRET
    raise ValueError(f"Unknown token type: {token_type}")


def _lifetime_for(token_type: str) -> timedelta:
    if token_type == ACCESS:
        return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)


def create_jwt_token(
    user_id: UUID,
    email: str,
    role: str,
    token_type: str = ACCESS,
    expires_delta: Optional[timedelta] = None,
) -> Tuple[str, datetime]:
    """
    Create JWT token.

    Args:
        user_id: User UUID
        email: User email
        role: User role (admin, super-admin)
        token_type: "access" or "refresh"
        expires_delta: Override the configured lifetime

    Returns:
        (encoded token, expiry datetime)
    """
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta if expires_delta is not None else _lifetime_for(token_type))

    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "type": token_type,
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
        "jti": uuid.uuid4().hex,
    }

    token = jwt.encode(payload, _secret_for(token_type), algorithm=settings.JWT_ALGORITHM)
    return token, exp


def create_access_token(user_id: UUID, email: str, role: str) -> str:
    """Create a short-lived access token."""
    token, _ = create_jwt_token(user_id, email, role, token_type=ACCESS)
    return token


def create_token_pair(user_id: UUID, email: str, role: str) -> TokenPair:
    """Issue a fresh access token and refresh token."""
    access_token, _ = create_jwt_token(user_id, email, role, token_type=ACCESS)
    refresh_token, refresh_exp = create_jwt_token(user_id, email, role, token_type=REFRESH)
    return TokenPair(
        access_token=access_token,
        refresh_token=refresh_token,
        refresh_expires_at=refresh_exp,
    )


def decode_token(token: str, expected_type: str = ACCESS) -> Optional[TokenPayload]:
    """
    Verify JWT token and return payload if valid.

    Args:
        token: JWT token string
        expected_type: Expected token type ("access" or "refresh")

    Returns:
        TokenPayload if valid, None if invalid, expired or of another type
    """
    try:
        payload = jwt.decode(
            token,
            _secret_for(expected_type),
            algorithms=[settings.JWT_ALGORITHM],
        )
        token_payload = TokenPayload(**payload)
    except (jwt.ExpiredSignatureError, jwt.InvalidTokenError):
        return None
    except ValueError:
        # Signed by us but missing claims
        return None

    if token_payload.type != expected_type:
        return None
    return token_payload


def extract_bearer_token(auth_header: Optional[str]) -> Optional[str]:
    """Return the token of a ``Bearer <token>`` header, else None."""
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    token = auth_header[len("Bearer "):].strip()
    return token or None
