from pydantic import Field, StringConstraints
from typing import Annotated, List
from datetime import datetime

from interview_agent.models.interview import (
    ANSWER_MAX_LENGTH,
    QUESTION_MAX_LENGTH,
    TOPIC_MAX_LENGTH,
    Difficulty,
    InterviewRecord,
)
from interview_agent.schemas.common import CamelModel


Required = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class StartInterviewRequest(CamelModel):
    topic: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TOPIC_MAX_LENGTH)]
    topic_id: Required


class QuestionRequest(CamelModel):
    topic: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TOPIC_MAX_LENGTH)]


class AnswerRequest(CamelModel):
    question: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=QUESTION_MAX_LENGTH)]
    answer: Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=ANSWER_MAX_LENGTH)]
    topic: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TOPIC_MAX_LENGTH)]
    topic_id: Required
    session_id: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    difficulty: Difficulty = "Medium"
    duration: int = Field(0, ge=0)


class StartInterviewResponse(CamelModel):
    question: str
    session_id: str
    topic: str
    topic_id: str


class QuestionResponse(CamelModel):
    question: str


class AnswerResponse(CamelModel):
    feedback: str
    score: float
    interview_id: str


class InterviewResponse(CamelModel):
    """Full interview record as returned by single fetch."""

    id: str
    user_id: str
    topic: str
    topic_id: str
    question: str
    answer: str
    feedback: str
    score: float
    difficulty: str
    duration: int
    is_completed: bool
    session_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: InterviewRecord) -> "InterviewResponse":
        return cls(
            id=str(record.id),
            user_id=str(record.user_id),
            topic=record.topic,
            topic_id=record.topic_id,
            question=record.question,
            answer=record.answer,
            feedback=record.feedback,
            score=record.score,
            difficulty=record.difficulty,
            duration=record.duration,
            is_completed=record.is_completed,
            session_id=record.session_id,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class RecentInterview(CamelModel):
    """Summary shape; the answer text is left out."""

    id: str
    topic: str
    question: str
    score: float
    feedback: str
    created_at: datetime


class HistoryItem(RecentInterview):
    answer: str


class TopicPerformance(CamelModel):
    name: str
    value: float
    count: int


class ProgressPoint(CamelModel):
    attempt: int
    score: float
    date: str


class UserStats(CamelModel):
    total_interviews: int = 0
    average_score: float = 0
    max_score: float = 0
    min_score: float = 0
    topic_performance: List[TopicPerformance] = Field(default_factory=list)
    progress_data: List[ProgressPoint] = Field(default_factory=list)


class ProgressResponse(UserStats):
    recent_interviews: List[RecentInterview] = Field(default_factory=list)


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class HistoryResponse(CamelModel):
    interviews: List[HistoryItem]
    pagination: Pagination


class SessionSummaryResponse(CamelModel):
    session_id: str
    count: int
    average_score: float
    interviews: List[InterviewResponse]
