import pytest
from fastapi.testclient import TestClient

from conftest import register
from interview_agent.errors import GenerationError
from interview_agent.main import create_app


JAVA = {"topic": "Java Programming", "topicId": "java"}
ANSWER = "Polymorphism lets one interface stand for many concrete implementations."


def answer(client, headers, question="What is polymorphism?", session_id="session-1", **overrides):
    payload = {**JAVA, "question": question, "answer": ANSWER, "sessionId": session_id, **overrides}
    return client.post("/api/interviews/answer", json=payload, headers=headers)


def test_topics(client, auth_headers):
    response = client.get("/api/interviews/topics", headers=auth_headers)

    assert response.status_code == 200
    topics = response.json()["data"]
    assert len(topics) == 6
    assert topics[0]["id"] == "java"
    assert topics[0]["questionCount"] == 15


def test_start_interview(client, auth_headers, ai_service):
    response = client.post("/api/interviews/start", json=JAVA, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["question"] == "Question 1 about Java Programming?"
    assert data["topic"] == "Java Programming"
    assert data["topicId"] == "java"
    assert len(data["sessionId"]) == 36
    assert ai_service.question_topics == ["Java Programming"]


def test_each_start_gets_a_new_session(client, auth_headers):
    first = client.post("/api/interviews/start", json=JAVA, headers=auth_headers).json()["data"]
    second = client.post("/api/interviews/start", json=JAVA, headers=auth_headers).json()["data"]
    assert first["sessionId"] != second["sessionId"]


def test_start_with_unknown_topic_still_generates(client, auth_headers, ai_service):
    response = client.post(
        "/api/interviews/start",
        json={"topic": "Kotlin Coroutines", "topicId": "kotlin"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert ai_service.question_topics == ["Kotlin Coroutines"]


def test_next_question(client, auth_headers):
    response = client.post("/api/interviews/question", json={"topic": "System Design"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {"question": "Question 1 about System Design?"}


def test_start_requires_topic_id(client, auth_headers):
    response = client.post("/api/interviews/start", json={"topic": "Java Programming"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "topicId"


def test_generation_failure(client, auth_headers, ai_service):
    ai_service.error = GenerationError("AI service is unreachable. Please try again.")

    response = client.post("/api/interviews/start", json=JAVA, headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Failed to start interview",
        "error": "AI service is unreachable. Please try again.",
    }


def test_answer_failure_stores_nothing(client, auth_headers, ai_service):
    ai_service.error = GenerationError("Invalid OpenAI API key. Please check your configuration.")

    response = answer(client, auth_headers)

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to process answer"
    progress = client.get("/api/interviews/progress", headers=auth_headers).json()["data"]
    assert progress["totalInterviews"] == 0


def test_generation_detail_hidden_in_production(settings, database, ai_service):
    settings.environment = "production"
    client = TestClient(create_app(settings, database=database, ai_service=ai_service))
    headers = {"Authorization": f"Bearer {register(client)['token']}"}
    ai_service.error = GenerationError("AI service is unreachable. Please try again.")

    response = client.post("/api/interviews/question", json={"topic": "HR & Behavioral"}, headers=headers)

    assert response.status_code == 500
    assert "error" not in response.json()


def test_answer_is_scored_and_stored(client, auth_headers, ai_service):
    response = answer(client, auth_headers, difficulty="Hard", duration=95)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["score"] == 7.0
    assert data["feedback"] == "Solid answer with a clear structure and a good example."
    assert ai_service.feedback_calls == [("What is polymorphism?", ANSWER, "Java Programming")]

    record = client.get(f"/api/interviews/{data['interviewId']}", headers=auth_headers).json()["data"]
    assert record["question"] == "What is polymorphism?"
    assert record["answer"] == ANSWER
    assert record["score"] == 7.0
    assert record["difficulty"] == "Hard"
    assert record["duration"] == 95
    assert record["sessionId"] == "session-1"
    assert record["isCompleted"] is True

    me = client.get("/api/auth/me", headers=auth_headers).json()["data"]
    assert me["user"]["totalInterviews"] == 1
    assert me["user"]["averageScore"] == 7.0


def test_unparseable_reply_still_scores(client, auth_headers, ai_service):
    ai_service.reply = "I cannot grade this."

    data = answer(client, auth_headers).json()["data"]

    assert data["score"] == 5.0
    assert data["feedback"] == "I cannot grade this."


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"answer": "too short"}, "answer"),
        ({"answer": "x" * 5001}, "answer"),
        ({"question": "q" * 1001}, "question"),
        ({"sessionId": ""}, "sessionId"),
        ({"difficulty": "Impossible"}, "difficulty"),
        ({"duration": -1}, "duration"),
    ],
)
def test_answer_validation(client, auth_headers, ai_service, overrides, field):
    response = answer(client, auth_headers, **overrides)

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert field in {e["field"] for e in body["errors"]}
    assert ai_service.feedback_calls == []


def test_progress(client, auth_headers, ai_service):
    for score in (6, 8):
        ai_service.reply = f"Score: {score}\nFeedback: Feedback for a score of {score} out of ten."
        answer(client, auth_headers)
    ai_service.reply = "Score: 9\nFeedback: Great behavioural answer using the STAR method."
    answer(client, auth_headers, topic="HR & Behavioral", topicId="hr")

    data = client.get("/api/interviews/progress", headers=auth_headers).json()["data"]

    assert data["totalInterviews"] == 3
    assert data["averageScore"] == 7.7
    assert data["maxScore"] == 9
    assert data["minScore"] == 6
    assert sorted((t["name"], t["value"], t["count"]) for t in data["topicPerformance"]) == [
        ("HR & Behavioral", 9.0, 1),
        ("Java Programming", 7.0, 2),
    ]
    assert len(data["progressData"]) == 3
    assert len(data["recentInterviews"]) == 3
    assert "answer" not in data["recentInterviews"][0]


def test_progress_without_records(client, auth_headers):
    data = client.get("/api/interviews/progress", headers=auth_headers).json()["data"]
    assert data["totalInterviews"] == 0
    assert data["averageScore"] == 0
    assert data["topicPerformance"] == []
    assert data["progressData"] == []
    assert data["recentInterviews"] == []


def test_history_pagination(client, auth_headers):
    for i in range(25):
        answer(client, auth_headers, question=f"Question number {i}?")

    response = client.get("/api/interviews/history", params={"page": 2, "limit": 10}, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["interviews"]) == 10
    assert data["pagination"] == {"page": 2, "limit": 10, "total": 25, "pages": 3}
    assert data["interviews"][0]["answer"] == ANSWER


def test_history_topic_filter(client, auth_headers):
    answer(client, auth_headers)
    answer(client, auth_headers, topic="Database Management", topicId="database")

    data = client.get("/api/interviews/history", params={"topic": "database"}, headers=auth_headers).json()["data"]

    assert [i["topic"] for i in data["interviews"]] == ["Database Management"]
    assert data["pagination"]["total"] == 1


@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}])
def test_history_rejects_bad_paging(client, auth_headers, params):
    response = client.get("/api/interviews/history", params=params, headers=auth_headers)
    assert response.status_code == 400


def test_session_summary(client, auth_headers, ai_service):
    ai_service.reply = "Score: 6\nFeedback: Covers the basics, add an example next time."
    answer(client, auth_headers, session_id="run-a")
    ai_service.reply = "Score: 9\nFeedback: Excellent depth and a clear real-world example."
    answer(client, auth_headers, session_id="run-a")
    answer(client, auth_headers, session_id="run-b")

    data = client.get("/api/interviews/session/run-a", headers=auth_headers).json()["data"]

    assert data["sessionId"] == "run-a"
    assert data["count"] == 2
    assert data["averageScore"] == 7.5
    assert [i["score"] for i in data["interviews"]] == [6.0, 9.0]


def test_records_are_private(client, auth_headers):
    interview_id = answer(client, auth_headers).json()["data"]["interviewId"]
    other = {"Authorization": f"Bearer {register(client, email='bob@example.com', name='Bob')['token']}"}

    assert client.get(f"/api/interviews/{interview_id}", headers=other).status_code == 404
    assert client.delete(f"/api/interviews/{interview_id}", headers=other).status_code == 404
    history = client.get("/api/interviews/history", headers=other).json()["data"]
    assert history["interviews"] == []


def test_delete_recomputes_summary(client, auth_headers, ai_service):
    ai_service.reply = "Score: 4\nFeedback: The answer needs more structure and detail."
    first = answer(client, auth_headers).json()["data"]["interviewId"]
    ai_service.reply = "Score: 8\nFeedback: Strong answer with a concrete example."
    answer(client, auth_headers)

    response = client.delete(f"/api/interviews/{first}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Interview deleted successfully"}
    user = client.get("/api/auth/me", headers=auth_headers).json()["data"]["user"]
    assert user["totalInterviews"] == 1
    assert user["averageScore"] == 8.0


@pytest.mark.parametrize("interview_id", ["65f0c0ffee0000000000beef", "not-an-id"])
def test_missing_interview(client, auth_headers, interview_id):
    for method in ("GET", "DELETE"):
        response = client.request(method, f"/api/interviews/{interview_id}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Interview not found"}


@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", "/api/interviews/topics"),
        ("POST", "/api/interviews/start"),
        ("POST", "/api/interviews/question"),
        ("POST", "/api/interviews/answer"),
        ("GET", "/api/interviews/progress"),
        ("GET", "/api/interviews/history"),
        ("GET", "/api/interviews/session/run-a"),
        ("GET", "/api/interviews/65f0c0ffee0000000000beef"),
        ("DELETE", "/api/interviews/65f0c0ffee0000000000beef"),
    ],
)
def test_routes_require_token(client, ai_service, method, path):
    response = client.request(method, path, json={})

    assert response.status_code == 401
    assert response.json()["message"] == "No token provided"
    assert ai_service.question_topics == []


async def test_deactivated_user_token_is_rejected(client, auth_headers, mongo_db):
    await mongo_db.users.update_one({"email": "alice@example.com"}, {"$set": {"is_active": False}})

    response = client.get("/api/interviews/progress", headers=auth_headers)

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "User account is inactive"}
