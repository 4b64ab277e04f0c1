import pytest
from datetime import datetime, timedelta, timezone

from quizboard.core.models import Attempt, Question
from quizboard.core.quiz_manager import QuizManager
from quizboard.core.services.quiz_repository import InMemoryQuizRepository
from quizboard.storage import (
    SqlAlchemyQuizRepository,
    build_engine,
    build_session_factory,
    create_schema,
)

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_question(question_id, correct_answer="A", quiz_id="quiz-1"):
    return Question(
        id=question_id,
        quiz_id=quiz_id,
        question_text=f"Question {question_id}?",
        option_a="alpha",
        option_b="beta",
        option_c="gamma",
        option_d="delta",
        correct_answer=correct_answer,
    )


def make_attempt(user_name, score, total, quiz_id="quiz-1", attempt_id=None, offset=0):
    return Attempt(
        id=attempt_id or f"{quiz_id}-{user_name}-{offset}",
        quiz_id=quiz_id,
        user_name=user_name,
        score=score,
        total_questions=total,
        created_at=BASE_TIME + timedelta(minutes=offset),
    )


@pytest.fixture
def repository():
    """Empty in-memory repository."""
    return InMemoryQuizRepository()


@pytest.fixture
def go_basics(repository):
    """'Go Basics' quiz with two questions whose answers are A and C."""
    quiz = repository.create_quiz("Go Basics", "Test your knowledge of Go fundamentals")
    q1 = repository.create_question(
        quiz.id, "Which keyword declares a constant?", "const", "var", "let", "final", "A"
    )
    q2 = repository.create_question(
        quiz.id, "What is the zero value of a pointer?", "0", "null", "nil", "undefined", "C"
    )
    return quiz, [q1, q2]


@pytest.fixture
def manager(repository):
    return QuizManager(repository)


@pytest.fixture
def sql_repository():
    """SQLAlchemy repository on a fresh in-memory SQLite database."""
    engine = build_engine("sqlite://")
    create_schema(engine)
    yield SqlAlchemyQuizRepository(build_session_factory(engine))
    engine.dispose()
