"""Interview record models."""
from pydantic import BaseModel, Field, ConfigDict, StringConstraints
from typing import Literal, Optional, Annotated
from datetime import datetime
from interview_agent.models.user import PyObjectId


TOPIC_MAX_LENGTH = 100
QUESTION_MAX_LENGTH = 1000
ANSWER_MAX_LENGTH = 5000
FEEDBACK_MAX_LENGTH = 2000

Difficulty = Literal["Easy", "Medium", "Hard"]

TopicText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TOPIC_MAX_LENGTH)]
QuestionText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=QUESTION_MAX_LENGTH)]
AnswerText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=ANSWER_MAX_LENGTH)]
FeedbackText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=FEEDBACK_MAX_LENGTH)]
SessionId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class InterviewRecord(BaseModel):
    """One answered and scored question."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    user_id: PyObjectId
    topic: TopicText
    topic_id: TopicText
    question: QuestionText
    answer: AnswerText
    feedback: FeedbackText
    score: float = Field(..., ge=0, le=10)
    difficulty: Difficulty = "Medium"
    duration: int = Field(0, ge=0, description="Seconds spent answering")
    is_completed: bool = True
    session_id: SessionId

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
