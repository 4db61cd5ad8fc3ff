import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from interview_agent.config import Settings
from interview_agent.database import Database
from interview_agent.main import create_app
from interview_agent.services.ai_service import parse_feedback
from interview_agent.utils import security


class FakeAIService:
    """Stands in for InterviewAIService; feedback still goes through parse_feedback."""

    is_configured = True

    def __init__(self):
        self.reply = "Score: 7\nFeedback: Solid answer with a clear structure and a good example."
        self.error = None
        self.question_topics = []
        self.feedback_calls = []

    async def generate_question(self, topic):
        if self.error:
            raise self.error
        self.question_topics.append(topic)
        return f"Question {len(self.question_topics)} about {topic}?"

    async def generate_feedback(self, question, answer, topic):
        if self.error:
            raise self.error
        self.feedback_calls.append((question, answer, topic))
        return parse_feedback(self.reply)

    async def validate_api_key(self):
        return True

    async def close(self):
        pass


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    monkeypatch.setattr(security, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        jwt_secret_key="test-secret-key-with-enough-length",
        environment="test",
        validate_openai_on_startup=False,
        rate_limit_max_requests=1000,
        openai_api_key="",
    )


@pytest.fixture
def mongo_db():
    return AsyncMongoMockClient()["test_interview_agent"]


@pytest.fixture
def database(settings, mongo_db):
    database = Database(settings)
    database.db = mongo_db
    return database


@pytest.fixture
def ai_service():
    return FakeAIService()


@pytest.fixture
def app(settings, database, ai_service):
    return create_app(settings, database=database, ai_service=ai_service)


@pytest.fixture
def client(app):
    return TestClient(app)


def register(client, email="alice@example.com", name="Alice", password="secret123"):
    response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def auth_headers(client):
    data = register(client)
    return {"Authorization": f"Bearer {data['token']}"}
