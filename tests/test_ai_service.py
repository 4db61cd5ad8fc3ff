from types import SimpleNamespace

import httpx
import openai
import pytest

from interview_agent.errors import GenerationError
from interview_agent.services.ai_service import (
    DEFAULT_SCORE,
    FALLBACK_FEEDBACK,
    InterviewAIService,
    parse_feedback,
)


OPENAI_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


class FakeCompletions:
    def __init__(self, content="", error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def make_service(settings, content="", error=None):
    completions = FakeCompletions(content, error)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return InterviewAIService(settings, client=client), completions


def status_error(cls, status_code, body=None):
    response = httpx.Response(status_code, request=OPENAI_REQUEST)
    return cls("error", response=response, body=body)


class TestParseFeedback:
    def test_well_formed_reply(self):
        result = parse_feedback("Score: 8\nFeedback: Clear explanation of polymorphism with a good example.")
        assert result.score == 8.0
        assert result.feedback == "Clear explanation of polymorphism with a good example."

    def test_score_is_case_insensitive_and_keeps_decimals(self):
        result = parse_feedback("score: 7.5\nfeedback: Mostly right, but the JVM part was vague.")
        assert result.score == 7.5

    def test_score_above_range_is_clamped(self):
        result = parse_feedback("Score: 15\nFeedback: Excellent work across the whole answer.")
        assert result.score == 10.0

    def test_missing_score_uses_default(self):
        result = parse_feedback("Feedback: Reasonable attempt, add a concrete example next time.")
        assert result.score == DEFAULT_SCORE

    def test_missing_feedback_label_uses_whole_reply(self):
        text = "Score: 6 The answer covers the basics but misses edge cases."
        result = parse_feedback(text)
        assert result.score == 6.0
        assert result.feedback == text

    def test_short_feedback_falls_back(self):
        result = parse_feedback("Score: 4\nFeedback: ok")
        assert result.score == 4.0
        assert result.feedback == FALLBACK_FEEDBACK

    def test_empty_reply(self):
        result = parse_feedback("")
        assert result.score == DEFAULT_SCORE
        assert result.feedback == FALLBACK_FEEDBACK

    def test_long_feedback_is_truncated(self):
        result = parse_feedback("Score: 9\nFeedback: " + "a" * 2500)
        assert len(result.feedback) == 2000
        assert result.feedback.endswith("...")


async def test_generate_question_uses_question_parameters(settings):
    service, completions = make_service(settings, content="  What is a HashMap?  ")

    question = await service.generate_question("Java Programming")

    assert question == "What is a HashMap?"
    call = completions.calls[0]
    assert call["model"] == settings.openai_model
    assert call["max_tokens"] == 200
    assert call["temperature"] == 0.7
    assert call["messages"][0]["role"] == "system"
    assert "Java Programming" in call["messages"][1]["content"]


async def test_empty_question_is_an_error(settings):
    service, _ = make_service(settings, content="   ")
    with pytest.raises(GenerationError, match="Empty question generated"):
        await service.generate_question("Java Programming")


async def test_generate_feedback_parses_reply(settings):
    service, completions = make_service(settings, content="Score: 7\nFeedback: Good structure, mention trade-offs.")

    result = await service.generate_feedback("What is a HashMap?", "A key value store.", "Java Programming")

    assert result.score == 7.0
    assert result.feedback == "Good structure, mention trade-offs."
    call = completions.calls[0]
    assert call["max_tokens"] == 500
    assert call["temperature"] == 0.3
    assert "A key value store." in call["messages"][1]["content"]


@pytest.mark.parametrize(
    "error, message",
    [
        (
            status_error(openai.RateLimitError, 429, {"code": "insufficient_quota"}),
            "OpenAI API quota exceeded. Please check your billing.",
        ),
        (status_error(openai.RateLimitError, 429), "Failed to generate question. Please try again."),
        (
            status_error(openai.AuthenticationError, 401),
            "Invalid OpenAI API key. Please check your configuration.",
        ),
        (openai.APIConnectionError(request=OPENAI_REQUEST), "AI service is unreachable. Please try again."),
        (status_error(openai.InternalServerError, 500), "Failed to generate question. Please try again."),
    ],
)
async def test_provider_errors_are_mapped(settings, error, message):
    service, _ = make_service(settings, error=error)
    with pytest.raises(GenerationError) as exc_info:
        await service.generate_question("Java Programming")
    assert exc_info.value.message == message


async def test_unconfigured_service_refuses_to_generate(settings):
    service = InterviewAIService(settings)
    assert not service.is_configured
    with pytest.raises(GenerationError, match="not configured"):
        await service.generate_feedback("Q?", "An answer that is long enough.", "HR & Behavioral")


async def test_validate_api_key_reports_failure(settings):
    service, _ = make_service(settings, error=status_error(openai.AuthenticationError, 401))
    assert await service.validate_api_key() is False

    service, _ = make_service(settings, content="pong")
    assert await service.validate_api_key() is True
