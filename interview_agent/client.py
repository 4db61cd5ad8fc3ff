"""Terminal client: topic selection, a five-question practice run and a dashboard.

The interview run is tracked entirely here. The API only correlates
answers through the session id it hands out on start.
"""
import argparse
import getpass
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx
from dotenv import load_dotenv

from interview_agent.services.interview_store import round_one


DEFAULT_BASE_URL = "http://localhost:5000"
QUESTIONS_PER_INTERVIEW = 5


class ApiClientError(Exception):
    def __init__(self, status_code: int, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        super().__init__(f"{status_code}: {message}")


class ApiClient:
    """Thin wrapper over the HTTP API that unwraps the response envelope."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.token = token
        self.http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self.http.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        response = self.http.request(method, path, headers=headers, **kwargs)
        try:
            body = response.json()
        except ValueError:
            raise ApiClientError(response.status_code, response.text or "Invalid response from server")

        if response.is_error or not body.get("success", False):
            raise ApiClientError(response.status_code, body.get("message", "Request failed"), body.get("errors"))
        return body.get("data") if "data" in body else body

    def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/api/auth/register", json={"name": name, "email": email, "password": password})
        self.token = data["token"]
        return data

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return data

    def topics(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/interviews/topics")

    def start_interview(self, topic: str, topic_id: str) -> Dict[str, Any]:
        return self._request("POST", "/api/interviews/start", json={"topic": topic, "topicId": topic_id})

    def next_question(self, topic: str) -> str:
        return self._request("POST", "/api/interviews/question", json={"topic": topic})["question"]

    def submit_answer(
        self,
        question: str,
        answer: str,
        topic: str,
        topic_id: str,
        session_id: str,
        duration: int = 0,
    ) -> Dict[str, Any]:
        return self._request("POST", "/api/interviews/answer", json={
            "question": question,
            "answer": answer,
            "topic": topic,
            "topicId": topic_id,
            "sessionId": session_id,
            "duration": duration,
        })

    def progress(self) -> Dict[str, Any]:
        return self._request("GET", "/api/interviews/progress")

    def history(self, page: int = 1, limit: int = 10, topic: Optional[str] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if topic:
            params["topic"] = topic
        return self._request("GET", "/api/interviews/history", params=params)

    def session_summary(self, session_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/interviews/session/{session_id}")

    def get_interview(self, interview_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/interviews/{interview_id}")

    def delete_interview(self, interview_id: str) -> None:
        self._request("DELETE", f"/api/interviews/{interview_id}")


class RunState(str, Enum):
    NOT_STARTED = "not_started"
    AWAITING_ANSWER = "awaiting_answer"
    SCORED = "scored"
    COMPLETED = "completed"


class InvalidTransition(Exception):
    pass


@dataclass
class Exchange:
    question: str
    answer: str
    score: float
    feedback: str
    interview_id: str


@dataclass
class InterviewRun:
    """One practice interview: up to ``max_questions`` scored exchanges."""

    api: ApiClient
    topic: str
    topic_id: str
    max_questions: int = QUESTIONS_PER_INTERVIEW
    state: RunState = RunState.NOT_STARTED
    session_id: Optional[str] = None
    current_question: Optional[str] = None
    exchanges: List[Exchange] = field(default_factory=list)

    def _require(self, expected: RunState, action: str):
        if self.state != expected:
            raise InvalidTransition(f"Cannot {action} while {self.state.value}")

    def start(self) -> str:
        self._require(RunState.NOT_STARTED, "start")
        data = self.api.start_interview(self.topic, self.topic_id)
        self.session_id = data["sessionId"]
        self.current_question = data["question"]
        self.state = RunState.AWAITING_ANSWER
        return self.current_question

    def submit(self, answer: str, duration: int = 0) -> Exchange:
        self._require(RunState.AWAITING_ANSWER, "submit an answer")
        data = self.api.submit_answer(
            self.current_question, answer, self.topic, self.topic_id, self.session_id, duration
        )
        exchange = Exchange(
            question=self.current_question,
            answer=answer,
            score=data["score"],
            feedback=data["feedback"],
            interview_id=data["interviewId"],
        )
        self.exchanges.append(exchange)
        self.state = RunState.SCORED
        return exchange

    @property
    def has_more_questions(self) -> bool:
        return len(self.exchanges) < self.max_questions

    def advance(self) -> Optional[str]:
        """Fetch the next question, or complete the run once the cap is hit."""
        self._require(RunState.SCORED, "advance")
        if not self.has_more_questions:
            self.state = RunState.COMPLETED
            self.current_question = None
            return None
        self.current_question = self.api.next_question(self.topic)
        self.state = RunState.AWAITING_ANSWER
        return self.current_question

    @property
    def average_score(self) -> float:
        if not self.exchanges:
            return 0.0
        return round_one(sum(e.score for e in self.exchanges) / len(self.exchanges))


def _bar(value: float, width: int = 10) -> str:
    filled = max(0, min(width, int(round(value))))
    return "█" * filled + "░" * (width - filled)


def render_dashboard(progress: Dict[str, Any]) -> str:
    """Plain-text version of the dashboard charts."""
    lines = [
        "=" * 60,
        "INTERVIEW DASHBOARD",
        "=" * 60,
        f"Total interviews: {progress.get('totalInterviews', 0)}",
        f"Average score:    {progress.get('averageScore', 0)}/10",
        f"Best score:       {progress.get('maxScore', 0)}/10",
        f"Lowest score:     {progress.get('minScore', 0)}/10",
    ]

    topics = progress.get("topicPerformance") or []
    lines.append("")
    lines.append("Topic performance:")
    if not topics:
        lines.append("  No interviews yet. Start practicing!")
    for topic in topics:
        lines.append(f"  {topic['name'][:28]:<28} {_bar(topic['value'])} {topic['value']:>4} ({topic['count']})")

    points = progress.get("progressData") or []
    if points:
        lines.append("")
        lines.append("Recent progress:")
        for point in points:
            lines.append(f"  #{point['attempt']:<3} {point['date']}  {_bar(point['score'])} {point['score']}")

    recent = progress.get("recentInterviews") or []
    if recent:
        lines.append("")
        lines.append("Recent interviews:")
        for item in recent:
            question = item["question"] if len(item["question"]) <= 50 else item["question"][:47] + "..."
            lines.append(f"  [{item['score']:>4}] {item['topic']}: {question}")

    return "\n".join(lines)


def _authenticate(api: ApiClient, args: argparse.Namespace):
    email = args.email or os.getenv("INTERVIEW_API_EMAIL") or input("Email: ")
    password = args.password or os.getenv("INTERVIEW_API_PASSWORD") or getpass.getpass("Password: ")
    api.login(email, password)


def _practice(api: ApiClient, topic_id: str):
    topic = next((t for t in api.topics() if t["id"] == topic_id), None)
    if topic is None:
        print(f"Unknown topic '{topic_id}'. Run the 'topics' command to list them.")
        return 1

    run = InterviewRun(api=api, topic=topic["title"], topic_id=topic["id"])
    question = run.start()
    while question is not None:
        print(f"\nQuestion {len(run.exchanges) + 1}/{run.max_questions}: {question}")
        answer = input("> ").strip()
        try:
            exchange = run.submit(answer)
        except ApiClientError as exc:
            print(f"  {exc.message}")
            for error in exc.errors:
                print(f"  - {error.get('field')}: {error.get('message')}")
            continue
        print(f"\nScore: {exchange.score}/10\nFeedback: {exchange.feedback}")
        question = run.advance()

    print(f"\nInterview complete! Average score: {run.average_score}/10")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(prog="interview-agent-client", description="Practice mock interviews.")
    parser.add_argument("--url", default=os.getenv("INTERVIEW_API_URL", DEFAULT_BASE_URL))
    parser.add_argument("--email")
    parser.add_argument("--password")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("topics", help="List interview topics")
    practice = commands.add_parser("practice", help="Run a five-question interview")
    practice.add_argument("--topic", required=True, help="Topic id, e.g. java")
    commands.add_parser("dashboard", help="Show statistics")
    history = commands.add_parser("history", help="List past answers")
    history.add_argument("--page", type=int, default=1)
    history.add_argument("--limit", type=int, default=10)
    history.add_argument("--topic")

    args = parser.parse_args(argv)

    with ApiClient(args.url) as api:
        try:
            _authenticate(api, args)
            if args.command == "topics":
                for topic in api.topics():
                    print(f"{topic['id']:<15} {topic['title']:<30} {topic['difficulty']}")
            elif args.command == "practice":
                return _practice(api, args.topic)
            elif args.command == "dashboard":
                print(render_dashboard(api.progress()))
            elif args.command == "history":
                data = api.history(args.page, args.limit, args.topic)
                pagination = data["pagination"]
                for item in data["interviews"]:
                    print(f"{item['createdAt'][:10]}  [{item['score']:>4}] {item['topic']}: {item['question']}")
                print(f"Page {pagination['page']} of {pagination['pages']} ({pagination['total']} total)")
        except ApiClientError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return 1
        except httpx.HTTPError as exc:
            print(f"Could not reach the API: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
