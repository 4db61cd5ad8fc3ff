"""User database models."""
from pydantic import BaseModel, EmailStr, Field, ConfigDict, StringConstraints, field_validator
from typing import List, Literal, Optional, Annotated
from datetime import datetime
from bson import ObjectId


class PyObjectId(ObjectId):
    """Custom ObjectId type for Pydantic v2."""

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        from pydantic_core import core_schema
        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(ObjectId),
                core_schema.chain_schema([
                    core_schema.str_schema(),
                    core_schema.no_info_plain_validator_function(cls.validate),
                ]),
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(str, when_used="json"),
        )

    @classmethod
    def validate(cls, v):
        if isinstance(v, ObjectId):
            return v
        if isinstance(v, str) and ObjectId.is_valid(v):
            return ObjectId(v)
        raise ValueError("Invalid ObjectId")


SkillLevel = Literal["Beginner", "Intermediate", "Advanced"]
TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class UserPreferences(BaseModel):
    """Practice preferences stored on the account."""

    target_companies: List[TrimmedStr] = Field(default_factory=list)
    skill_level: SkillLevel = "Beginner"
    preferred_topics: List[TrimmedStr] = Field(default_factory=list)


class UserModel(BaseModel):
    """User database model.

    ``total_interviews`` and ``average_score`` are derived values; they are
    rewritten from the user's interview records by
    ``UserStore.recompute_summary`` and never incremented in place.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
    email: EmailStr
    password_hash: str
    registration_date: datetime = Field(default_factory=datetime.utcnow)
    last_login: datetime = Field(default_factory=datetime.utcnow)
    total_interviews: int = Field(0, ge=0)
    average_score: float = Field(0.0, ge=0, le=10)
    is_active: bool = True
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v
