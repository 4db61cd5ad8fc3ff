"""Question generation and answer scoring backed by an OpenAI chat model."""
import logging
import re
from dataclasses import dataclass
from typing import Optional

import openai
from openai import AsyncOpenAI

from interview_agent.config import Settings
from interview_agent.errors import GenerationError
from interview_agent.models.interview import FEEDBACK_MAX_LENGTH
from interview_agent.utils.prompt_generator import (
    FEEDBACK_SYSTEM_PROMPT,
    QUESTION_SYSTEM_PROMPT,
    build_feedback_prompt,
    build_question_prompt,
)


logger = logging.getLogger(__name__)

SCORE_PATTERN = re.compile(r"Score:\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
FEEDBACK_PATTERN = re.compile(r"Feedback:\s*(.*)", re.IGNORECASE | re.DOTALL)

DEFAULT_SCORE = 5.0
MIN_FEEDBACK_LENGTH = 10
FALLBACK_FEEDBACK = (
    "Your answer shows understanding of the topic. Consider providing more detailed "
    "explanations and examples to strengthen your response."
)


@dataclass(frozen=True)
class FeedbackResult:
    score: float
    feedback: str


def parse_feedback(text: str) -> FeedbackResult:
    """Turn the model's ``Score: N`` / ``Feedback: ...`` reply into a result.

    Never fails on malformed text: a missing score becomes 5, a missing
    feedback body falls back to the whole reply, the score is clamped to
    0..10 and too-short feedback is replaced by a canned encouragement.
    """
    text = (text or "").strip()

    score_match = SCORE_PATTERN.search(text)
    feedback_match = FEEDBACK_PATTERN.search(text)

    score = float(score_match.group(1)) if score_match else DEFAULT_SCORE
    feedback = feedback_match.group(1).strip() if feedback_match else text

    score = min(max(score, 0.0), 10.0)
    if len(feedback) < MIN_FEEDBACK_LENGTH:
        feedback = FALLBACK_FEEDBACK
    if len(feedback) > FEEDBACK_MAX_LENGTH:
        feedback = feedback[:FEEDBACK_MAX_LENGTH - 3].rstrip() + "..."

    return FeedbackResult(score=score, feedback=feedback)


class InterviewAIService:
    """Talks to the completion API; one instance is shared by all requests."""

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self.model = settings.openai_model
        if client is None and settings.openai_api_key:
            client = AsyncOpenAI(api_key=settings.openai_api_key)
        self.client = client

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    async def close(self):
        if self.client is not None:
            await self.client.close()

    async def validate_api_key(self) -> bool:
        """Ping the API once; problems are logged, never raised."""
        if not self.is_configured:
            logger.warning("⚠️ OPENAI_API_KEY not set. AI features will be disabled.")
            return False
        try:
            await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": "ping"}],
                max_tokens=1,
            )
        except openai.OpenAIError as exc:
            logger.warning("⚠️ OpenAI validation warning: %s", exc)
            logger.warning("   AI endpoints may return errors until a valid key is provided.")
            return False
        logger.info("✅ OpenAI API key validated successfully")
        return True

    async def generate_question(self, topic: str) -> str:
        """Generate one interview question for a topic title."""
        content = await self._complete(
            system_prompt=QUESTION_SYSTEM_PROMPT,
            prompt=build_question_prompt(topic),
            action="question",
            max_tokens=200,
            temperature=0.7,
            presence_penalty=0.1,
            frequency_penalty=0.1,
        )
        if not content:
            raise GenerationError("Empty question generated")
        return content

    async def generate_feedback(self, question: str, answer: str, topic: str) -> FeedbackResult:
        """Score an answer and produce written feedback."""
        content = await self._complete(
            system_prompt=FEEDBACK_SYSTEM_PROMPT,
            prompt=build_feedback_prompt(question, answer, topic),
            action="feedback",
            max_tokens=500,
            temperature=0.3,
            presence_penalty=0.1,
        )
        return parse_feedback(content)

    async def _complete(self, system_prompt: str, prompt: str, action: str, **params) -> str:
        if not self.is_configured:
            raise GenerationError("AI service is not configured")

        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                **params,
            )
        except openai.RateLimitError as exc:
            logger.error("OpenAI %s generation error: %s", action, exc)
            if exc.code == "insufficient_quota":
                raise GenerationError("OpenAI API quota exceeded. Please check your billing.") from exc
            raise GenerationError(f"Failed to generate {action}. Please try again.") from exc
        except openai.AuthenticationError as exc:
            logger.error("OpenAI %s generation error: %s", action, exc)
            raise GenerationError("Invalid OpenAI API key. Please check your configuration.") from exc
        except openai.APIConnectionError as exc:
            logger.error("OpenAI %s generation error: %s", action, exc)
            raise GenerationError("AI service is unreachable. Please try again.") from exc
        except openai.OpenAIError as exc:
            logger.error("OpenAI %s generation error: %s", action, exc)
            raise GenerationError(f"Failed to generate {action}. Please try again.") from exc

        if not completion.choices:
            return ""
        return (completion.choices[0].message.content or "").strip()
