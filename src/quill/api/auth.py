"""Authentication API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Request, Response, status

from ..config import settings
from ..core.exceptions import (
    InvalidCredentialsError,
    NotAuthenticatedError,
    PermissionDeniedError,
)
from ..core.security import TokenPair, TokenPayload
from ..database import User
from ..dependencies import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    get_auth_service,
    get_current_user_payload,
    get_optional_user,
)
from ..schemas.auth import LoginRequest, LoginResponse, RefreshRequest, RegisterRequest, TokenResponse
from ..schemas.common import ApiResponse
from ..schemas.user import UserResponse
from ..services import AuthService
from ..services.activity_logger import ActivityAction, ActivityResource, record_activity


router = APIRouter(prefix="/auth", tags=["Authentication"])


def set_auth_cookies(response: Response, tokens: TokenPair) -> None:
    """Set both tokens as httpOnly cookies."""
    response.set_cookie(
        ACCESS_COOKIE,
        tokens.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
    response.set_cookie(
        REFRESH_COOKIE,
        tokens.refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_auth_cookies(response: Response) -> None:
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            name,
            path="/",
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite="lax",
        )


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: Request,
    body: RegisterRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new admin user.

    Open to anyone while ALLOW_PUBLIC_REGISTRATION is set, otherwise
    super-admins only.
    """
    if not settings.ALLOW_PUBLIC_REGISTRATION:
        if current_user is None:
            raise NotAuthenticatedError()
        if current_user.role != "super-admin":
            raise PermissionDeniedError("Only super-admins can register users")

    user = await auth_service.register(
        email=body.email,
        password=body.password,
        role=body.role,
    )

    record_activity(
        request,
        ActivityAction.REGISTER_USER,
        ActivityResource.USER,
        resource_id=user.id,
        details={
            "role": user.role,
            "registered_by": current_user.email if current_user else None,
        },
        user=user,
    )
    return ApiResponse(
        data=UserResponse.model_validate(user),
        message="User registered successfully",
    )


@router.post("/login", response_model=ApiResponse[LoginResponse])
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Login with email and password.

    Returns the token pair and sets it as cookies.
    """
    try:
        user, tokens = await auth_service.login(body.email, body.password)
    except InvalidCredentialsError as e:
        record_activity(
            request,
            ActivityAction.LOGIN_FAILED,
            ActivityResource.AUTH,
            details={"email": body.email, "reason": e.reason},
            email=body.email,
        )
        raise

    set_auth_cookies(response, tokens)
    record_activity(
        request,
        ActivityAction.LOGIN_SUCCESS,
        ActivityResource.AUTH,
        resource_id=user.id,
        user=user,
    )
    return ApiResponse(
        data=LoginResponse(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            user=UserResponse.model_validate(user),
        ),
        message="Login successful",
    )


@router.post("/refresh", response_model=ApiResponse[TokenResponse])
async def refresh(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = Body(None),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Rotate the refresh token.

    The token comes from the ``refreshToken`` cookie, else from the body.
    """
    refresh_token = request.cookies.get(REFRESH_COOKIE)
    if not refresh_token and body is not None:
        refresh_token = body.refresh_token

    _, tokens = await auth_service.refresh(refresh_token)

    set_auth_cookies(response, tokens)
    return ApiResponse(
        data=TokenResponse(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
        ),
        message="Token refreshed successfully",
    )


@router.post("/logout", response_model=ApiResponse)
async def logout(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = Body(None),
    current_user: Optional[User] = Depends(get_optional_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Revoke the refresh token and clear the auth cookies. Always succeeds."""
    refresh_token = request.cookies.get(REFRESH_COOKIE)
    if not refresh_token and body is not None:
        refresh_token = body.refresh_token

    if refresh_token and current_user is not None:
        await auth_service.logout(current_user.id, refresh_token)
        record_activity(request, ActivityAction.LOGOUT, ActivityResource.AUTH, user=current_user)

    clear_auth_cookies(response)
    return ApiResponse(message="Logged out successfully")


@router.get("/me", response_model=ApiResponse[UserResponse])
async def me(
    payload: TokenPayload = Depends(get_current_user_payload),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Current authenticated user."""
    user = await auth_service.get_user(UUID(payload.sub))
    return ApiResponse(data=UserResponse.model_validate(user))
