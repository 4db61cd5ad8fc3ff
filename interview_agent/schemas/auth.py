"""Authentication request/response schemas."""
from pydantic import BeforeValidator, EmailStr, Field, StringConstraints, field_validator
from typing import Annotated, List, Optional
from datetime import datetime

from interview_agent.models.user import SkillLevel, UserModel
from interview_agent.schemas.common import CamelModel
from interview_agent.schemas.interview import UserStats
from interview_agent.utils.security import MAX_PASSWORD_BYTES


def _normalize_email(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


NormalizedEmail = Annotated[EmailStr, BeforeValidator(_normalize_email)]


class RegisterRequest(CamelModel):
    """Registration request schema."""

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
    email: NormalizedEmail
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, v: str) -> str:
        if len(v.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(CamelModel):
    """Login request schema."""

    email: NormalizedEmail
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(CamelModel):
    """Refresh token request schema."""

    refresh_token: str


class PreferencesUpdateRequest(CamelModel):
    target_companies: Optional[List[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]]] = None
    skill_level: Optional[SkillLevel] = None
    preferred_topics: Optional[List[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]]] = None


class PreferencesResponse(CamelModel):
    target_companies: List[str]
    skill_level: str
    preferred_topics: List[str]


class UserResponse(CamelModel):
    """User response schema; the password hash never leaves the service."""

    id: str
    name: str
    email: EmailStr
    registration_date: datetime
    last_login: datetime
    total_interviews: int
    average_score: float
    is_active: bool
    preferences: PreferencesResponse
    created_at: datetime

    @classmethod
    def from_user(cls, user: UserModel) -> "UserResponse":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            registration_date=user.registration_date,
            last_login=user.last_login,
            total_interviews=user.total_interviews,
            average_score=user.average_score,
            is_active=user.is_active,
            preferences=PreferencesResponse(**user.preferences.model_dump()),
            created_at=user.created_at,
        )


class TokenResponse(CamelModel):
    """Token response schema."""

    user: UserResponse
    token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class AccessTokenResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    expires_in: int


class ProfileResponse(CamelModel):
    user: UserResponse
    stats: UserStats
