"""Persistence for user accounts and their derived score summary."""
import logging
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from interview_agent.errors import AuthError, ConflictError
from interview_agent.models.user import UserModel
from interview_agent.services.interview_store import InterviewStore, round_one, to_object_id
from interview_agent.utils.security import hash_password, verify_password


logger = logging.getLogger(__name__)


class UserStore:
    """Reads and writes the ``users`` collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.users
        self.interviews = InterviewStore(db)

    async def create(self, name: str, email: str, password: str) -> UserModel:
        existing = await self.collection.find_one({"email": email.lower()})
        if existing:
            raise ConflictError("email already exists")

        user = UserModel(name=name, email=email, password_hash=hash_password(password))
        result = await self.collection.insert_one(user.model_dump(by_alias=True, exclude={"id"}))
        user.id = result.inserted_id
        return user

    async def get_by_id(self, user_id: Any) -> Optional[UserModel]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        data = await self.collection.find_one({"_id": oid})
        return UserModel(**data) if data else None

    async def find_by_email(self, email: str, active_only: bool = True) -> Optional[UserModel]:
        """Case-insensitive lookup, by default among active accounts only."""
        query: Dict[str, Any] = {"email": email.strip().lower()}
        if active_only:
            query["is_active"] = True
        data = await self.collection.find_one(query)
        return UserModel(**data) if data else None

    async def update_last_login(self, user: UserModel) -> UserModel:
        now = datetime.utcnow()
        await self.collection.update_one({"_id": user.id}, {"$set": {"last_login": now, "updated_at": now}})
        user.last_login = now
        user.updated_at = now
        return user

    async def update_preferences(self, user: UserModel, changes: Dict[str, Any]) -> UserModel:
        preferences = user.preferences.model_copy(update=changes)
        await self.collection.update_one(
            {"_id": user.id},
            {"$set": {"preferences": preferences.model_dump(), "updated_at": datetime.utcnow()}},
        )
        user.preferences = preferences
        return user

    async def recompute_summary(self, user_id: ObjectId) -> Tuple[int, float]:
        """Rewrite total_interviews/average_score from every stored record.

        This is a full recompute with no transaction around it, so two
        concurrent writers for one user can leave it stale until the next
        call.
        """
        scores = await self.interviews.list_scores(user_id)
        total = len(scores)
        average = round_one(sum(scores) / total) if total else 0.0

        await self.collection.update_one(
            {"_id": user_id},
            {"$set": {"total_interviews": total, "average_score": average, "updated_at": datetime.utcnow()}},
        )
        return total, average

    @staticmethod
    def verify_password(user: UserModel, candidate: str) -> bool:
        """Check a password; a comparison error never counts as a match."""
        try:
            return verify_password(candidate, user.password_hash)
        except (ValueError, TypeError) as exc:
            logger.error("Password comparison failed for user %s: %s", user.id, exc)
            raise AuthError("Password comparison failed") from exc
