"""Interview router.

Every route requires a bearer token. The server keeps no session object:
``sessionId`` only groups records, and the five-questions-per-run cap is
enforced by the client, not here.
"""
import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from interview_agent.errors import GenerationError
from interview_agent.models.user import UserModel
from interview_agent.schemas.common import ApiResponse, ok
from interview_agent.schemas.interview import (
    AnswerRequest,
    AnswerResponse,
    HistoryResponse,
    InterviewResponse,
    ProgressResponse,
    QuestionRequest,
    QuestionResponse,
    SessionSummaryResponse,
    StartInterviewRequest,
    StartInterviewResponse,
)
from interview_agent.services.ai_service import InterviewAIService
from interview_agent.services.interview_store import InterviewStore, round_one
from interview_agent.services.user_store import UserStore
from interview_agent.utils.dependencies import (
    get_ai_service,
    get_current_active_user,
    get_interview_store,
    get_user_store,
)
from interview_agent.utils.topics import Topic, get_all_topics


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interviews", tags=["Interviews"])

RECENT_INTERVIEWS_LIMIT = 5


@router.get("/topics", response_model=ApiResponse[List[Topic]], response_model_exclude_none=True)
async def list_topics(current_user: UserModel = Depends(get_current_active_user)):
    """Static topic catalog."""
    return ok(get_all_topics())


@router.post("/start", response_model=ApiResponse[StartInterviewResponse], response_model_exclude_none=True)
async def start_interview(
    request: StartInterviewRequest,
    current_user: UserModel = Depends(get_current_active_user),
    ai: InterviewAIService = Depends(get_ai_service),
):
    """Generate the first question and hand out a new session id."""
    try:
        question = await ai.generate_question(request.topic)
    except GenerationError as exc:
        raise GenerationError("Failed to start interview", detail=exc.message) from exc

    session_id = str(uuid.uuid4())
    logger.info("Started interview session %s on %s for user %s", session_id, request.topic_id, current_user.id)
    return ok(StartInterviewResponse(
        question=question,
        session_id=session_id,
        topic=request.topic,
        topic_id=request.topic_id,
    ))


@router.post("/question", response_model=ApiResponse[QuestionResponse], response_model_exclude_none=True)
async def generate_question(
    request: QuestionRequest,
    current_user: UserModel = Depends(get_current_active_user),
    ai: InterviewAIService = Depends(get_ai_service),
):
    try:
        question = await ai.generate_question(request.topic)
    except GenerationError as exc:
        raise GenerationError("Failed to generate question", detail=exc.message) from exc
    return ok(QuestionResponse(question=question))


@router.post("/answer", response_model=ApiResponse[AnswerResponse], response_model_exclude_none=True)
async def submit_answer(
    request: AnswerRequest,
    current_user: UserModel = Depends(get_current_active_user),
    ai: InterviewAIService = Depends(get_ai_service),
    interviews: InterviewStore = Depends(get_interview_store),
    users: UserStore = Depends(get_user_store),
):
    """Score an answer, store it and refresh the user's summary."""
    try:
        result = await ai.generate_feedback(request.question, request.answer, request.topic)
    except GenerationError as exc:
        raise GenerationError("Failed to process answer", detail=exc.message) from exc

    record = await interviews.create({
        "user_id": current_user.id,
        "topic": request.topic,
        "topic_id": request.topic_id,
        "question": request.question,
        "answer": request.answer,
        "feedback": result.feedback,
        "score": result.score,
        "difficulty": request.difficulty,
        "duration": request.duration,
        "session_id": request.session_id,
    })

    # Written separately from the record; a failure here leaves the summary stale until the next recompute
    await users.recompute_summary(current_user.id)

    return ok(AnswerResponse(feedback=record.feedback, score=record.score, interview_id=str(record.id)))


@router.get("/progress", response_model=ApiResponse[ProgressResponse], response_model_exclude_none=True)
async def get_progress(
    current_user: UserModel = Depends(get_current_active_user),
    interviews: InterviewStore = Depends(get_interview_store),
):
    """Aggregate statistics plus the latest few records."""
    stats = await interviews.get_user_stats(current_user.id)
    recent = await interviews.get_recent_interviews(current_user.id, RECENT_INTERVIEWS_LIMIT)
    return ok(ProgressResponse(**stats.model_dump(), recent_interviews=recent))


@router.get("/history", response_model=ApiResponse[HistoryResponse], response_model_exclude_none=True)
async def get_history(
    current_user: UserModel = Depends(get_current_active_user),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    topic: Optional[str] = Query(None, description="Topic id filter"),
    interviews: InterviewStore = Depends(get_interview_store),
):
    history = await interviews.list_history(current_user.id, topic_id=topic, page=page, limit=limit)
    return ok(history)


@router.get(
    "/session/{session_id}",
    response_model=ApiResponse[SessionSummaryResponse],
    response_model_exclude_none=True,
)
async def get_session_summary(
    session_id: str,
    current_user: UserModel = Depends(get_current_active_user),
    interviews: InterviewStore = Depends(get_interview_store),
):
    """All answers of one interview run, oldest first."""
    records = await interviews.list_session(current_user.id, session_id)
    average = round_one(sum(r.score for r in records) / len(records)) if records else 0.0
    return ok(SessionSummaryResponse(
        session_id=session_id,
        count=len(records),
        average_score=average,
        interviews=[InterviewResponse.from_record(r) for r in records],
    ))


@router.get("/{interview_id}", response_model=ApiResponse[InterviewResponse], response_model_exclude_none=True)
async def get_interview(
    interview_id: str,
    current_user: UserModel = Depends(get_current_active_user),
    interviews: InterviewStore = Depends(get_interview_store),
):
    record = await interviews.get_one(current_user.id, interview_id)
    return ok(InterviewResponse.from_record(record))


@router.delete("/{interview_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
async def delete_interview(
    interview_id: str,
    current_user: UserModel = Depends(get_current_active_user),
    interviews: InterviewStore = Depends(get_interview_store),
    users: UserStore = Depends(get_user_store),
):
    await interviews.delete_one(current_user.id, interview_id)
    await users.recompute_summary(current_user.id)
    return ok(message="Interview deleted successfully")
