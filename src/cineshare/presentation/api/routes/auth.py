"""
Authentication API routes.

Endpoints:
- POST /auth/register - Create account, returns tokens
- POST /auth/login - Email/password sign-in
- POST /auth/refresh - Rotate refresh token
- POST /auth/logout - Revoke refresh token
- GET /auth/me - Current user
"""

from fastapi import APIRouter, Depends, Response, status
from shared.reporter import Emoji
from sqlalchemy.ext.asyncio import AsyncSession

from cineshare.application.use_cases import LoginUserCommand, RegisterUserCommand
from cineshare.di import Container
from cineshare.domain.auth import AuthenticatedUser
from cineshare.presentation.api.dependencies import (
    get_container,
    get_db_session,
    require_user,
)
from cineshare.presentation.schemas.auth_schemas import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def register(
    request: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
    container: Container = Depends(get_container),
) -> TokenResponse:
    """
    Create an account and sign it in.

    Raises:
        ValidationError: 422 listing every failing field
        ConflictError: 409 if email or username is taken
    """
    use_case = container.get_register_user_use_case(session)
    result = await use_case.execute(
        RegisterUserCommand(
            email=request.email,
            username=request.username,
            password=request.password,
            display_name=request.displayName,
        )
    )

    container.reporter.info(
        f"{Emoji.AUTH.ISSUED} User registered: {result.user.username}",
        context="AuthAPI",
    )
    return TokenResponse(**result.to_response())


@router.post("/login", response_model=TokenResponse, summary="Sign in")
async def login(
    request: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
    container: Container = Depends(get_container),
) -> TokenResponse:
    use_case = container.get_login_user_use_case(session)
    result = await use_case.execute(
        LoginUserCommand(email=request.email, password=request.password)
    )

    container.reporter.info(
        f"{Emoji.AUTH.ISSUED} User signed in: {result.user.username}",
        context="AuthAPI",
        verbose_level=2,
    )
    return TokenResponse(**result.to_response())


@router.post("/refresh", response_model=TokenResponse, summary="Refresh tokens")
async def refresh(
    request: RefreshRequest,
    session: AsyncSession = Depends(get_db_session),
    container: Container = Depends(get_container),
) -> TokenResponse:
    """
    Exchange a refresh token for a new pair.

    The presented refresh token stops working once exchanged.
    """
    use_case = container.get_refresh_session_use_case(session)
    result = await use_case.execute(request.refreshToken)

    container.reporter.debug(
        f"{Emoji.AUTH.REFRESHED} Tokens refreshed for {result.user.id}",
        context="AuthAPI",
    )
    return TokenResponse(**result.to_response())


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Sign out",
)
async def logout(
    current_user: AuthenticatedUser = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
    container: Container = Depends(get_container),
) -> Response:
    use_case = container.get_logout_user_use_case(session)
    await use_case.execute(current_user.id)

    container.reporter.info(
        f"{Emoji.AUTH.REVOKED} Refresh token revoked for {current_user.id}",
        context="AuthAPI",
        verbose_level=2,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserResponse, summary="Current user")
async def me(
    current_user: AuthenticatedUser = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
    container: Container = Depends(get_container),
) -> UserResponse:
    use_case = container.get_current_user_use_case(session)
    user = await use_case.execute(current_user.id)
    return UserResponse(**user.to_public_dict())
