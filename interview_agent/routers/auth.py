"""Authentication router."""
import logging

from fastapi import APIRouter, Depends, status

from interview_agent.config import Settings
from interview_agent.errors import AuthError, ForbiddenError
from interview_agent.models.user import UserModel
from interview_agent.schemas.auth import (
    AccessTokenResponse,
    LoginRequest,
    PreferencesUpdateRequest,
    ProfileResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from interview_agent.schemas.common import ApiResponse, ok
from interview_agent.services.interview_store import InterviewStore
from interview_agent.services.user_store import UserStore
from interview_agent.utils.dependencies import (
    get_app_settings,
    get_current_active_user,
    get_interview_store,
    get_user_store,
)
from interview_agent.utils.security import create_access_token, create_refresh_token, decode_token


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def issue_tokens(user: UserModel, settings: Settings) -> TokenResponse:
    claims = {"sub": str(user.id), "email": user.email}
    return TokenResponse(
        user=UserResponse.from_user(user),
        token=create_access_token(claims, settings),
        refresh_token=create_refresh_token(claims, settings),
        expires_in=settings.access_token_expire_minutes * 60,
    )


@router.post(
    "/register",
    response_model=ApiResponse[TokenResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: RegisterRequest,
    users: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_app_settings),
):
    """Create an account and sign it in."""
    user = await users.create(name=request.name, email=request.email, password=request.password)
    logger.info("Registered user %s", user.id)
    return ok(issue_tokens(user, settings), message="User registered successfully")


@router.post("/login", response_model=ApiResponse[TokenResponse], response_model_exclude_none=True)
async def login(
    request: LoginRequest,
    users: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_app_settings),
):
    """Login with email and password."""
    user = await users.find_by_email(request.email, active_only=False)
    if user is None or not users.verify_password(user, request.password):
        raise AuthError("Invalid email or password")
    if not user.is_active:
        raise ForbiddenError("User account is inactive")

    user = await users.update_last_login(user)
    return ok(issue_tokens(user, settings), message="Login successful")


@router.post("/refresh", response_model=ApiResponse[AccessTokenResponse], response_model_exclude_none=True)
async def refresh_token(
    request: RefreshTokenRequest,
    users: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_app_settings),
):
    """Exchange a refresh token for a new access token."""
    payload = decode_token(request.refresh_token, settings, expected_type="refresh")
    user = await users.get_by_id(payload["sub"])
    if user is None or not user.is_active:
        raise AuthError("Invalid refresh token")

    return ok(AccessTokenResponse(
        token=create_access_token({"sub": str(user.id), "email": user.email}, settings),
        expires_in=settings.access_token_expire_minutes * 60,
    ))


@router.get("/me", response_model=ApiResponse[ProfileResponse], response_model_exclude_none=True)
async def get_profile(
    current_user: UserModel = Depends(get_current_active_user),
    interviews: InterviewStore = Depends(get_interview_store),
):
    """Current user with aggregate interview statistics."""
    stats = await interviews.get_user_stats(current_user.id)
    return ok(ProfileResponse(user=UserResponse.from_user(current_user), stats=stats))


@router.put("/preferences", response_model=ApiResponse[UserResponse], response_model_exclude_none=True)
async def update_preferences(
    request: PreferencesUpdateRequest,
    current_user: UserModel = Depends(get_current_active_user),
    users: UserStore = Depends(get_user_store),
):
    changes = request.model_dump(exclude_none=True)
    user = await users.update_preferences(current_user, changes)
    return ok(UserResponse.from_user(user), message="Preferences updated")
