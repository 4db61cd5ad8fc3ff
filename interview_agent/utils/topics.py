"""Static interview topic catalog."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Topic(BaseModel):
    """A predefined interview subject area."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: str
    color: str
    question_count: int
    difficulty: str
    keywords: List[str]


TOPICS = (
    Topic(
        id="java",
        title="Java Programming",
        description="Core Java concepts, OOP principles, and advanced topics",
        color="bg-gradient-to-br from-orange-500 to-red-600",
        question_count=15,
        difficulty="Intermediate",
        keywords=["OOP", "Collections", "Multithreading", "JVM", "Exception Handling"],
    ),
    Topic(
        id="hr",
        title="HR & Behavioral",
        description="Behavioral questions, situational scenarios, and soft skills",
        color="bg-gradient-to-br from-green-500 to-emerald-600",
        question_count=20,
        difficulty="Mixed",
        keywords=["Leadership", "Teamwork", "Communication", "Problem Solving", "Adaptability"],
    ),
    Topic(
        id="dsa",
        title="Data Structures & Algorithms",
        description="Arrays, trees, graphs, sorting, searching, and complexity analysis",
        color="bg-gradient-to-br from-blue-500 to-cyan-600",
        question_count=25,
        difficulty="Advanced",
        keywords=["Arrays", "Trees", "Graphs", "Sorting", "Dynamic Programming"],
    ),
    Topic(
        id="communication",
        title="Communication Skills",
        description="Presentation skills, public speaking, and professional communication",
        color="bg-gradient-to-br from-purple-500 to-pink-600",
        question_count=12,
        difficulty="Beginner",
        keywords=["Presentation", "Public Speaking", "Active Listening", "Feedback"],
    ),
    Topic(
        id="database",
        title="Database Management",
        description="SQL queries, database design, normalization, and DBMS concepts",
        color="bg-gradient-to-br from-indigo-500 to-purple-600",
        question_count=18,
        difficulty="Intermediate",
        keywords=["SQL", "Normalization", "Indexing", "Transactions", "Performance"],
    ),
    Topic(
        id="system-design",
        title="System Design",
        description="Scalability, architecture patterns, and distributed systems",
        color="bg-gradient-to-br from-teal-500 to-blue-600",
        question_count=10,
        difficulty="Advanced",
        keywords=["Scalability", "Load Balancing", "Microservices", "Caching", "Databases"],
    ),
)


def get_all_topics() -> List[Topic]:
    return list(TOPICS)


def get_topic_by_id(topic_id: str) -> Optional[Topic]:
    return next((topic for topic in TOPICS if topic.id == topic_id), None)


def is_valid_topic_id(topic_id: str) -> bool:
    return get_topic_by_id(topic_id) is not None
