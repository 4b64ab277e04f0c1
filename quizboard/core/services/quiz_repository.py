"""Repository contract for quizzes, questions and attempts, plus an in-memory store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from uuid import uuid4

from quizboard.constants.quiz_constants import OPTION_LETTERS
from quizboard.core.errors import LookupFailure, ValidationError
from quizboard.core.models import Attempt, PublicQuestion, Question, Quiz
from quizboard.core.services.concealment import conceal_all


class QuizRepository(ABC):
    """Interface for durable storage of quizzes, questions and attempts.

    Missing entities raise :class:`LookupFailure`; backend failures raise
    :class:`RepositoryError`.
    """

    @abstractmethod
    def list_quizzes(self) -> list[Quiz]:
        pass

    @abstractmethod
    def get_quiz_by_id(self, quiz_id: str) -> Quiz:
        pass

    @abstractmethod
    def create_quiz(self, title: str, description: str = "") -> Quiz:
        pass

    @abstractmethod
    def update_quiz(self, quiz_id: str, title: str, description: str = "") -> Quiz:
        pass

    @abstractmethod
    def delete_quiz(self, quiz_id: str) -> None:
        """Delete a quiz together with its questions and attempts."""

    @abstractmethod
    def get_questions_by_quiz_id(self, quiz_id: str) -> list[PublicQuestion]:
        """Return the quiz's questions in display order, without answers."""

    @abstractmethod
    def get_question_by_id(self, question_id: str) -> Question:
        """Return the full question, answer key included. Grading only."""

    @abstractmethod
    def create_question(
        self,
        quiz_id: str,
        question_text: str,
        option_a: str,
        option_b: str,
        option_c: str,
        option_d: str,
        correct_answer: str,
    ) -> Question:
        pass

    @abstractmethod
    def delete_question(self, question_id: str) -> None:
        pass

    @abstractmethod
    def create_quiz_attempt(
        self, quiz_id: str, user_name: str, score: int, total_questions: int
    ) -> Attempt:
        pass

    @abstractmethod
    def get_quiz_attempts_by_quiz_id(self, quiz_id: str) -> list[Attempt]:
        """Return the quiz's attempts in insertion order."""

    @abstractmethod
    def delete_quiz_attempt(self, attempt_id: str) -> None:
        pass


class InMemoryQuizRepository(QuizRepository):
    """Process-local repository, used for tests and database-less runs."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._quizzes: dict[str, Quiz] = {}
        self._questions: dict[str, Question] = {}
        self._attempts: dict[str, Attempt] = {}

    def list_quizzes(self) -> list[Quiz]:
        with self._lock:
            return list(self._quizzes.values())

    def get_quiz_by_id(self, quiz_id: str) -> Quiz:
        with self._lock:
            return self._require_quiz(quiz_id)

    def create_quiz(self, title: str, description: str = "") -> Quiz:
        cleaned_title, cleaned_description = validate_quiz_fields(title, description)
        quiz = Quiz(
            id=_new_id(),
            title=cleaned_title,
            description=cleaned_description,
            created_at=_now(),
        )
        with self._lock:
            self._quizzes[quiz.id] = quiz
        return quiz

    def update_quiz(self, quiz_id: str, title: str, description: str = "") -> Quiz:
        cleaned_title, cleaned_description = validate_quiz_fields(title, description)
        with self._lock:
            current = self._require_quiz(quiz_id)
            updated = replace(current, title=cleaned_title, description=cleaned_description)
            self._quizzes[quiz_id] = updated
            return updated

    def delete_quiz(self, quiz_id: str) -> None:
        with self._lock:
            self._require_quiz(quiz_id)
            del self._quizzes[quiz_id]
            self._questions = {
                key: q for key, q in self._questions.items() if q.quiz_id != quiz_id
            }
            self._attempts = {
                key: a for key, a in self._attempts.items() if a.quiz_id != quiz_id
            }

    def get_questions_by_quiz_id(self, quiz_id: str) -> list[PublicQuestion]:
        with self._lock:
            owned = [q for q in self._questions.values() if q.quiz_id == quiz_id]
        return conceal_all(owned)

    def get_question_by_id(self, question_id: str) -> Question:
        with self._lock:
            question = self._questions.get(question_id)
        if question is None:
            raise LookupFailure("Question", question_id)
        return question

    def create_question(
        self,
        quiz_id: str,
        question_text: str,
        option_a: str,
        option_b: str,
        option_c: str,
        option_d: str,
        correct_answer: str,
    ) -> Question:
        text, options, letter = validate_question_fields(
            question_text, [option_a, option_b, option_c, option_d], correct_answer
        )
        with self._lock:
            self._require_quiz(quiz_id)
            question = Question(
                id=_new_id(),
                quiz_id=quiz_id,
                question_text=text,
                option_a=options[0],
                option_b=options[1],
                option_c=options[2],
                option_d=options[3],
                correct_answer=letter,
            )
            self._questions[question.id] = question
        return question

    def delete_question(self, question_id: str) -> None:
        with self._lock:
            if self._questions.pop(question_id, None) is None:
                raise LookupFailure("Question", question_id)

    def create_quiz_attempt(
        self, quiz_id: str, user_name: str, score: int, total_questions: int
    ) -> Attempt:
        with self._lock:
            self._require_quiz(quiz_id)
            attempt = Attempt(
                id=_new_id(),
                quiz_id=quiz_id,
                user_name=user_name,
                score=score,
                total_questions=total_questions,
                created_at=_now(),
            )
            self._attempts[attempt.id] = attempt
        return attempt

    def get_quiz_attempts_by_quiz_id(self, quiz_id: str) -> list[Attempt]:
        with self._lock:
            return [a for a in self._attempts.values() if a.quiz_id == quiz_id]

    def delete_quiz_attempt(self, attempt_id: str) -> None:
        with self._lock:
            if self._attempts.pop(attempt_id, None) is None:
                raise LookupFailure("Attempt", attempt_id)

    def _require_quiz(self, quiz_id: str) -> Quiz:
        quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise LookupFailure("Quiz", quiz_id)
        return quiz


def validate_quiz_fields(title: str, description: str | None) -> tuple[str, str]:
    cleaned_title = (title or "").strip()
    if not cleaned_title:
        raise ValidationError("Quiz title must not be empty.")
    return cleaned_title, (description or "").strip()


def validate_question_fields(
    question_text: str, options: list[str], correct_answer: str
) -> tuple[str, list[str], str]:
    """Validate and normalize a question before storage."""
    cleaned_text = (question_text or "").strip()
    if not cleaned_text:
        raise ValidationError("Question text must not be empty.")
    if len(options) != len(OPTION_LETTERS):
        raise ValidationError("Each question must have exactly four options.")
    cleaned_options = [(option or "").strip() for option in options]
    if any(not option for option in cleaned_options):
        raise ValidationError("Option text cannot be empty.")
    if correct_answer not in OPTION_LETTERS:
        raise ValidationError("Correct answer must be one of A, B, C, or D.")
    return cleaned_text, cleaned_options, correct_answer


def _new_id() -> str:
    return uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)
