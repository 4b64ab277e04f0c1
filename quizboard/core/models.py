"""Domain models for the quizboard engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(slots=True, frozen=True)
class Quiz:
    """Named collection of multiple-choice questions."""

    id: str
    title: str
    description: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class Question:
    """Full multiple-choice question, including the answer key.

    Only grading code may hold this type. Anything shown to a participant
    goes through :func:`quizboard.core.services.concealment.conceal` first.
    """

    id: str
    quiz_id: str
    question_text: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_answer: str


@dataclass(slots=True, frozen=True)
class PublicQuestion:
    """Participant-safe question view without the correct answer."""

    id: str
    quiz_id: str
    question_text: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str

    @property
    def options(self) -> list[str]:
        return [self.option_a, self.option_b, self.option_c, self.option_d]


@dataclass(slots=True, frozen=True)
class Attempt:
    """Immutable record of one completed run through a quiz."""

    id: str
    quiz_id: str
    user_name: str
    score: int
    total_questions: int
    created_at: datetime

    @property
    def percentage(self) -> float:
        return percentage_of(self.score, self.total_questions)


@dataclass(slots=True, frozen=True)
class QuestionResult:
    """Correctness of a single graded question."""

    question_id: str
    is_correct: bool


@dataclass(slots=True, frozen=True)
class ScoreResult:
    """Outcome of a scoring pass, results aligned with the question order."""

    score: int
    results: list[QuestionResult] = field(default_factory=list)

    @property
    def total_questions(self) -> int:
        return len(self.results)


class Badge(str, Enum):
    """Top-three markers on a leaderboard."""

    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"


@dataclass(slots=True, frozen=True)
class LeaderboardEntry:
    """One row of a per-quiz leaderboard."""

    position: int
    attempt: Attempt
    percentage: float
    badge: Badge | None = None


@dataclass(slots=True, frozen=True)
class PlayerStanding:
    """Aggregated totals for one player across all quizzes."""

    name: str
    total_score: int
    total_questions_answered: int
    quizzes_taken: int

    @property
    def percentage(self) -> float:
        return percentage_of(self.total_score, self.total_questions_answered)


@dataclass(slots=True, frozen=True)
class QuizPopularity:
    quiz_id: str
    title: str
    attempt_count: int


@dataclass(slots=True, frozen=True)
class GlobalStats:
    """Dataset-wide totals.

    ``average_score_percentage`` and ``average_attempts_per_quiz`` are ``None``
    when no attempts exist; check ``has_attempts`` before reading them.
    """

    quiz_count: int
    unique_player_count: int
    total_attempts: int
    average_score_percentage: float | None
    average_attempts_per_quiz: float | None
    most_popular_quizzes: list[QuizPopularity] = field(default_factory=list)

    @property
    def has_attempts(self) -> bool:
        return self.total_attempts > 0


@dataclass(slots=True, frozen=True)
class QuizSummary:
    quiz: Quiz
    question_count: int
    attempt_count: int


@dataclass(slots=True, frozen=True)
class HistoryEntry:
    quiz_id: str
    quiz_title: str
    score: int
    total_questions: int
    created_at: datetime

    @property
    def percentage(self) -> float:
        return percentage_of(self.score, self.total_questions)


@dataclass(slots=True, frozen=True)
class PlayerHistory:
    """All attempts made by one player, with overall totals."""

    user_name: str
    entries: list[HistoryEntry]
    total_score: int
    total_questions: int

    @property
    def overall_percentage(self) -> float | None:
        if self.total_questions <= 0:
            return None
        return self.total_score / self.total_questions * 100


def percentage_of(score: int, total: int) -> float:
    """Return ``score / total * 100``, or 0.0 when there is nothing to divide by."""
    if total <= 0:
        return 0.0
    return score / total * 100
