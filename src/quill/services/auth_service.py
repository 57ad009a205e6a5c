"""Authentication service with server-side refresh token rotation."""

from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from loguru import logger

from ..repositories.user_repository import UserRepository
from ..repositories.refresh_token_repository import RefreshTokenRepository
from ..core.security import (
    REFRESH,
    TokenPair,
    create_token_pair,
    decode_token,
    hash_password,
    verify_password,
)
from ..core.exceptions import (
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    InvalidTokenError,
    ResourceNotFoundError,
    ValidationError,
)
from ..database import User

ROLES = ("admin", "super-admin")
MIN_PASSWORD_LENGTH = 8


class AuthService:
    """Registration, login, token refresh and logout."""

    def __init__(
        self,
        user_repo: UserRepository,
        refresh_token_repo: RefreshTokenRepository,
    ):
        self.user_repo = user_repo
        self.refresh_token_repo = refresh_token_repo

    async def register(
        self,
        email: Optional[str],
        password: Optional[str],
        role: Optional[str] = None,
    ) -> User:
        """Create a new admin account."""
        email = (email or "").strip().lower()
        if not email or not password:
            raise ValidationError("Email and password are required")

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )

        role = role or "admin"
        if role not in ROLES:
            raise ValidationError(f"Invalid role: {role}")

        if await self.user_repo.email_exists(email):
            raise EmailAlreadyExistsError()

        user = await self.user_repo.create(
            email=email,
            password_hash=hash_password(password),
            role=role,
        )
        await self.user_repo.commit()
        logger.info(f"Registered user {user.email} ({user.role})")
        return user

    async def login(self, email: Optional[str], password: Optional[str]) -> Tuple[User, TokenPair]:
        """
        Check credentials and issue a token pair.

        Raises:
            ValidationError: email or password missing
            InvalidCredentialsError: unknown email or wrong password
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.user_repo.get_by_email(email)
        if not user:
            raise InvalidCredentialsError(reason="User not found")
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError(reason="Invalid password")

        await self.refresh_token_repo.purge_expired(user.id)
        tokens = await self._issue_tokens(user)

        user = await self.user_repo.update(user.id, last_login=datetime.utcnow())
        await self.user_repo.commit()
        return user, tokens

    async def refresh(self, refresh_token: Optional[str]) -> Tuple[User, TokenPair]:
        """
        Rotate a refresh token.

        The presented token is removed from the store and a new pair is
        issued. A token that is not in the store (already rotated, logged
        out, purged, or taken by a concurrent refresh) is rejected.
        """
        if not refresh_token:
            raise InvalidTokenError("Refresh token is required")

        payload = decode_token(refresh_token, expected_type=REFRESH)
        if not payload:
            raise InvalidTokenError("Invalid refresh token")

        user_id = UUID(payload.sub)
        if not await self.refresh_token_repo.revoke(user_id, refresh_token):
            logger.warning(f"Rejected refresh token not in store for user {user_id}")
            raise InvalidTokenError("Invalid refresh token")

        user = await self.user_repo.get(user_id)
        if not user:
            raise InvalidTokenError("User not found")

        tokens = await self._issue_tokens(user)
        await self.refresh_token_repo.commit()
        return user, tokens

    async def logout(self, user_id: UUID, refresh_token: Optional[str]) -> bool:
        """Remove one of the user's refresh tokens. Returns True if it was live."""
        if not refresh_token:
            return False
        revoked = await self.refresh_token_repo.revoke(user_id, refresh_token)
        await self.refresh_token_repo.commit()
        return revoked

    async def get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get(user_id)
        if not user:
            raise ResourceNotFoundError("User")
        return user

    async def _issue_tokens(self, user: User) -> TokenPair:
        tokens = create_token_pair(user.id, user.email, user.role)
        # Stored naive UTC like every other timestamp column
        await self.refresh_token_repo.create(
            user_id=user.id,
            token=tokens.refresh_token,
            expires_at=tokens.refresh_expires_at.replace(tzinfo=None),
        )
        return tokens
