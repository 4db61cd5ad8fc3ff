"""Request dependencies: settings, stores, AI service and the current user."""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from motor.motor_asyncio import AsyncIOMotorDatabase

from interview_agent.config import Settings
from interview_agent.database import get_db
from interview_agent.errors import AuthError
from interview_agent.models.user import UserModel
from interview_agent.services.ai_service import InterviewAIService
from interview_agent.services.interview_store import InterviewStore
from interview_agent.services.user_store import UserStore
from interview_agent.utils.security import decode_token


# Missing credentials are reported by get_current_user so they get the 401 envelope
security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_ai_service(request: Request) -> InterviewAIService:
    return request.app.state.ai_service


def get_interview_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> InterviewStore:
    return InterviewStore(db)


def get_user_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> UserStore:
    return UserStore(db)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_app_settings),
) -> UserModel:
    """Get current authenticated user from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise AuthError("No token provided")

    payload = decode_token(credentials.credentials, settings)

    users = UserStore(await get_db(request))
    user = await users.get_by_id(payload["sub"])
    if user is None:
        raise AuthError("User not found")
    return user


async def get_current_active_user(
    current_user: UserModel = Depends(get_current_user)
) -> UserModel:
    """Get current active user; a deactivated account's token no longer authenticates."""
    if not current_user.is_active:
        raise AuthError("User account is inactive")
    return current_user
