"""Facade over the quiz services shared by the HTTP API and the console."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import logging

from quizboard.constants.quiz_constants import GLOBAL_LEADERBOARD_LIMIT
from quizboard.core.errors import RepositoryError, ValidationError
from quizboard.core.models import (
    Attempt,
    GlobalStats,
    LeaderboardEntry,
    PlayerHistory,
    PlayerStanding,
    PublicQuestion,
    Question,
    QuestionResult,
    Quiz,
    QuizSummary,
)
from quizboard.core.services.attempt_recorder import AttemptRecorder
from quizboard.core.services.leaderboard import aggregate_global, rank_quiz_attempts
from quizboard.core.services.quiz_repository import QuizRepository
from quizboard.core.services.scoring import resolve_full_questions, score
from quizboard.core.services.statistics import player_history, summarize

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SubmissionOutcome:
    """Persisted attempt plus the per-question breakdown shown to the player."""

    attempt: Attempt
    results: list[QuestionResult]


class QuizManager:
    """Facade for quiz services: Repository, Scoring, Recorder, Leaderboard and Statistics.

    Holds no state besides the repository, so one instance can serve
    concurrent callers.
    """

    def __init__(self, repository: QuizRepository) -> None:
        self._repository = repository
        self._recorder = AttemptRecorder(repository)

    @property
    def repository(self) -> QuizRepository:
        return self._repository

    # --- Quiz authoring ---

    def list_quizzes(self) -> list[Quiz]:
        return self._repository.list_quizzes()

    def get_quiz(self, quiz_id: str) -> Quiz:
        return self._repository.get_quiz_by_id(quiz_id)

    def create_quiz(self, title: str, description: str = "") -> Quiz:
        return self._repository.create_quiz(title, description)

    def update_quiz(self, quiz_id: str, title: str, description: str = "") -> Quiz:
        return self._repository.update_quiz(quiz_id, title, description)

    def delete_quiz(self, quiz_id: str) -> None:
        self._repository.delete_quiz(quiz_id)

    def create_question(
        self,
        quiz_id: str,
        question_text: str,
        options: Sequence[str],
        correct_answer: str,
    ) -> Question:
        if len(options) != 4:
            raise ValidationError("Each question must have exactly four options.")
        return self._repository.create_question(
            quiz_id, question_text, options[0], options[1], options[2], options[3], correct_answer
        )

    def list_quiz_summaries(self) -> list[QuizSummary]:
        """Every quiz with its question and attempt counts.

        Counts that cannot be fetched are reported as zero.
        """
        summaries: list[QuizSummary] = []
        for quiz in self._repository.list_quizzes():
            try:
                question_count = len(self._repository.get_questions_by_quiz_id(quiz.id))
            except RepositoryError as exc:
                logger.warning("Could not count questions for quiz %s: %s", quiz.id, exc)
                question_count = 0
            try:
                attempt_count = len(self._repository.get_quiz_attempts_by_quiz_id(quiz.id))
            except RepositoryError as exc:
                logger.warning("Could not count attempts for quiz %s: %s", quiz.id, exc)
                attempt_count = 0
            summaries.append(
                QuizSummary(quiz=quiz, question_count=question_count, attempt_count=attempt_count)
            )
        return summaries

    # --- Taking a quiz ---

    def get_public_questions(self, quiz_id: str) -> list[PublicQuestion]:
        return self._repository.get_questions_by_quiz_id(quiz_id)

    def submit_attempt(
        self, quiz_id: str, user_name: str, answers: Mapping[str, str]
    ) -> SubmissionOutcome:
        """Grade ``answers`` for ``quiz_id`` and record the attempt.

        Questions that cannot be re-fetched with their answer key are left
        out of both the score and the recorded question count.
        """
        if not quiz_id or not user_name or not user_name.strip():
            raise ValidationError("quiz_id and user_name are required")

        questions = self._repository.get_questions_by_quiz_id(quiz_id)
        if not questions:
            raise ValidationError("No questions found for this quiz")

        gradable = resolve_full_questions(questions, self._repository.get_question_by_id)
        if not gradable:
            raise ValidationError("None of the quiz questions could be graded")

        outcome = score(gradable, answers)
        attempt = self._recorder.record(
            quiz_id=quiz_id,
            user_name=user_name,
            score=outcome.score,
            total_questions=outcome.total_questions,
        )
        return SubmissionOutcome(attempt=attempt, results=outcome.results)

    # --- Rankings ---

    def get_quiz_leaderboard(self, quiz_id: str) -> list[LeaderboardEntry]:
        return rank_quiz_attempts(self._repository.get_quiz_attempts_by_quiz_id(quiz_id))

    def get_global_leaderboard(
        self, limit: int | None = GLOBAL_LEADERBOARD_LIMIT
    ) -> list[PlayerStanding]:
        quizzes = self._repository.list_quizzes()
        attempts_per_quiz = self._collect_attempts(quizzes)
        every_attempt = [a for attempts in attempts_per_quiz.values() for a in attempts]
        return aggregate_global(every_attempt, limit=limit)

    def get_global_stats(self) -> GlobalStats:
        quizzes = self._repository.list_quizzes()
        return summarize(quizzes, self._collect_attempts(quizzes))

    def get_player_history(self, user_name: str) -> PlayerHistory:
        cleaned = (user_name or "").strip()
        if not cleaned:
            raise ValidationError("Name cannot be empty")
        quizzes = self._repository.list_quizzes()
        return player_history(cleaned, quizzes, self._collect_attempts(quizzes))

    def _collect_attempts(self, quizzes: Sequence[Quiz]) -> dict[str, list[Attempt]]:
        """Fetch attempts quiz by quiz, leaving out quizzes whose fetch fails."""
        collected: dict[str, list[Attempt]] = {}
        for quiz in quizzes:
            try:
                collected[quiz.id] = self._repository.get_quiz_attempts_by_quiz_id(quiz.id)
            except RepositoryError as exc:
                logger.warning("Skipping attempts for quiz %s: %s", quiz.id, exc)
        return collected
