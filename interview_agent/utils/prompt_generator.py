"""Prompt templates for question generation and answer scoring."""


QUESTION_SYSTEM_PROMPT = (
    "You are an experienced technical interviewer conducting placement interviews for college students. "
    "Generate clear, relevant questions that test practical knowledge and problem-solving skills. "
    "Focus on questions that allow candidates to demonstrate their understanding and thinking process."
)

FEEDBACK_SYSTEM_PROMPT = (
    "You are an experienced technical interviewer providing constructive feedback to help candidates improve. "
    "Be fair, encouraging, and specific in your evaluation. "
    "Focus on both technical accuracy and communication skills. Provide actionable advice for improvement."
)

GENERIC_GUIDELINE = "Focus on practical knowledge and real-world applications."

TOPIC_GUIDELINES = {
    "Java Programming": [
        "Object-oriented programming concepts (inheritance, polymorphism, encapsulation)",
        "Core Java features (collections, exception handling, multithreading)",
        "JVM concepts and memory management",
        "Design patterns and best practices",
    ],
    "HR & Behavioral": [
        "Behavioral scenarios and STAR method responses",
        "Leadership and teamwork experiences",
        "Problem-solving and conflict resolution",
        "Career goals and motivation",
    ],
    "Data Structures & Algorithms": [
        "Array and string manipulation problems",
        "Tree and graph traversal algorithms",
        "Sorting and searching techniques",
        "Time and space complexity analysis",
    ],
    "Communication Skills": [
        "Presentation and public speaking scenarios",
        "Professional communication situations",
        "Active listening and feedback",
        "Cross-cultural communication",
    ],
    "Database Management": [
        "SQL query writing and optimization",
        "Database design and normalization",
        "ACID properties and transactions",
        "Indexing and performance tuning",
    ],
    "System Design": [
        "Scalability and load balancing",
        "Database design for large systems",
        "Caching strategies and CDNs",
        "Microservices architecture",
    ],
}


def get_topic_guidelines(topic: str) -> str:
    """Bullet list of focus areas for a topic title, or a generic instruction."""
    areas = TOPIC_GUIDELINES.get(topic)
    if not areas:
        return GENERIC_GUIDELINE
    return "\n".join(f"- {area}" for area in areas)


def build_question_prompt(topic: str) -> str:
    return f"""Generate a professional interview question for the topic: {topic}.

The question should be:
- Appropriate for a college placement interview
- Clear and specific
- Designed to assess practical knowledge and understanding
- Not too basic, but not extremely advanced
- Focused on real-world application

Topic areas to consider for {topic}:
{get_topic_guidelines(topic)}

Return only the question without any additional text, formatting, or explanations."""


def build_feedback_prompt(question: str, answer: str, topic: str) -> str:
    return f"""As an expert interviewer, evaluate this interview response:

Topic: {topic}
Question: {question}
Answer: {answer}

Please provide:
1. A score from 0-10 (where 10 is excellent)
2. Constructive feedback focusing on:
   - Technical accuracy and depth
   - Communication clarity and structure
   - Completeness of the answer
   - Practical understanding
   - Areas for improvement
   - Specific suggestions for enhancement

Evaluation criteria:
- 9-10: Excellent answer with deep understanding and clear communication
- 7-8: Good answer with solid understanding, minor improvements needed
- 5-6: Average answer with basic understanding, needs development
- 3-4: Below average, significant gaps in knowledge or communication
- 0-2: Poor answer with major issues

Format your response exactly as:
Score: [0-10]
Feedback: [Your detailed, constructive feedback]

Keep feedback encouraging but honest, and provide specific, actionable suggestions for improvement."""
