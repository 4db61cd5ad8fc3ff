"""Persistence and aggregate queries for interview records."""
import math
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError as PydanticValidationError

from interview_agent.errors import NotFoundError, ValidationError, field_errors
from interview_agent.models.interview import InterviewRecord
from interview_agent.schemas.interview import (
    HistoryItem,
    HistoryResponse,
    Pagination,
    ProgressPoint,
    RecentInterview,
    TopicPerformance,
    UserStats,
)


PROGRESS_WINDOW = 10
RECENT_FIELDS = {"topic": 1, "question": 1, "score": 1, "feedback": 1, "created_at": 1}
HISTORY_FIELDS = {**RECENT_FIELDS, "answer": 1}


def round_one(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def to_object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


class InterviewStore:
    """Reads and writes the ``interviews`` collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.interviews

    async def create(self, data: Dict[str, Any]) -> InterviewRecord:
        """Validate and persist a new record, returning it with its id."""
        try:
            record = InterviewRecord.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError("Validation Error", errors=field_errors(exc)) from exc

        result = await self.collection.insert_one(record.model_dump(by_alias=True, exclude={"id"}))
        record.id = result.inserted_id
        return record

    async def get_one(self, user_id: ObjectId, record_id: str) -> InterviewRecord:
        oid = to_object_id(record_id)
        data = None
        if oid is not None:
            data = await self.collection.find_one({"_id": oid, "user_id": user_id})
        if not data:
            raise NotFoundError("Interview not found")
        return InterviewRecord(**data)

    async def delete_one(self, user_id: ObjectId, record_id: str) -> InterviewRecord:
        """Delete a record owned by ``user_id``.

        The caller is responsible for recomputing the owner's summary.
        """
        oid = to_object_id(record_id)
        data = None
        if oid is not None:
            data = await self.collection.find_one_and_delete({"_id": oid, "user_id": user_id})
        if not data:
            raise NotFoundError("Interview not found")
        return InterviewRecord(**data)

    async def get_user_stats(self, user_id: ObjectId) -> UserStats:
        pipeline = [
            {"$match": {"user_id": user_id}},
            {
                "$group": {
                    "_id": None,
                    "total_interviews": {"$sum": 1},
                    "average_score": {"$avg": "$score"},
                    "max_score": {"$max": "$score"},
                    "min_score": {"$min": "$score"},
                    "attempts": {
                        "$push": {"topic": "$topic", "score": "$score", "created_at": "$created_at"}
                    },
                }
            },
        ]
        results = await self.collection.aggregate(pipeline).to_list(length=1)
        # Some backends emit a group with null aggregates for an empty match
        if not results or not results[0]["total_interviews"]:
            return UserStats()

        result = results[0]
        attempts = result["attempts"]

        by_topic: Dict[str, List[float]] = {}
        for attempt in attempts:
            by_topic.setdefault(attempt["topic"], []).append(attempt["score"])
        topic_performance = [
            TopicPerformance(name=topic, value=round_one(sum(scores) / len(scores)), count=len(scores))
            for topic, scores in by_topic.items()
        ]

        # Oldest first, keeping only the latest window
        recent = sorted(attempts, key=lambda a: a["created_at"])[-PROGRESS_WINDOW:]
        progress_data = [
            ProgressPoint(attempt=index, score=attempt["score"], date=attempt["created_at"].date().isoformat())
            for index, attempt in enumerate(recent, start=1)
        ]

        return UserStats(
            total_interviews=result["total_interviews"],
            average_score=round_one(result["average_score"]),
            max_score=result["max_score"],
            min_score=result["min_score"],
            topic_performance=topic_performance,
            progress_data=progress_data,
        )

    async def get_recent_interviews(self, user_id: ObjectId, limit: int = 5) -> List[RecentInterview]:
        cursor = self.collection.find(
            {"user_id": user_id}, RECENT_FIELDS, sort=[("created_at", -1)], limit=limit
        )
        docs = await cursor.to_list(length=limit)
        return [
            RecentInterview(
                id=str(doc["_id"]),
                topic=doc["topic"],
                question=doc["question"],
                score=doc["score"],
                feedback=doc["feedback"],
                created_at=doc["created_at"],
            )
            for doc in docs
        ]

    async def list_history(
        self,
        user_id: ObjectId,
        topic_id: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> HistoryResponse:
        """Newest-first page of a user's records, optionally for one topic id."""
        query: Dict[str, Any] = {"user_id": user_id}
        if topic_id:
            query["topic_id"] = topic_id

        cursor = self.collection.find(
            query,
            HISTORY_FIELDS,
            sort=[("created_at", -1)],
            skip=(page - 1) * limit,
            limit=limit,
        )
        docs = await cursor.to_list(length=limit)
        total = await self.collection.count_documents(query)

        return HistoryResponse(
            interviews=[
                HistoryItem(
                    id=str(doc["_id"]),
                    topic=doc["topic"],
                    question=doc["question"],
                    answer=doc["answer"],
                    score=doc["score"],
                    feedback=doc["feedback"],
                    created_at=doc["created_at"],
                )
                for doc in docs
            ],
            pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
        )

    async def list_session(self, user_id: ObjectId, session_id: str) -> List[InterviewRecord]:
        cursor = self.collection.find({"user_id": user_id, "session_id": session_id}, sort=[("created_at", 1)])
        return [InterviewRecord(**doc) async for doc in cursor]

    async def list_scores(self, user_id: ObjectId) -> List[float]:
        cursor = self.collection.find({"user_id": user_id}, {"score": 1})
        return [doc["score"] async for doc in cursor]
