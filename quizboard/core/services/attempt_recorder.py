"""Validation and persistence of scored attempts."""

from __future__ import annotations

import logging

from quizboard.core.errors import ValidationError
from quizboard.core.models import Attempt
from quizboard.core.services.quiz_repository import QuizRepository

logger = logging.getLogger(__name__)


class AttemptRecorder:
    """Turns a scoring outcome into a persisted, immutable attempt."""

    def __init__(self, repository: QuizRepository) -> None:
        self._repository = repository

    def record(self, quiz_id: str, user_name: str, score: int, total_questions: int) -> Attempt:
        """Validate the attempt shape and insert it as a new row.

        Every call creates a new attempt, including repeats by the same user.
        Storage failures propagate to the caller.
        """
        cleaned_name = self._validate(quiz_id, user_name, score, total_questions)
        attempt = self._repository.create_quiz_attempt(
            quiz_id=quiz_id,
            user_name=cleaned_name,
            score=score,
            total_questions=total_questions,
        )
        logger.info(
            "Recorded attempt %s for %s on quiz %s: %d/%d",
            attempt.id,
            attempt.user_name,
            attempt.quiz_id,
            attempt.score,
            attempt.total_questions,
        )
        return attempt

    @staticmethod
    def _validate(quiz_id: str, user_name: str, score: int, total_questions: int) -> str:
        if not quiz_id or not str(quiz_id).strip():
            raise ValidationError("quiz_id is required.")
        cleaned_name = (user_name or "").strip()
        if not cleaned_name:
            raise ValidationError("user_name must not be empty.")
        if not _is_int(total_questions) or total_questions < 1:
            raise ValidationError("An attempt must cover at least one question.")
        if not _is_int(score) or not 0 <= score <= total_questions:
            raise ValidationError(
                f"Score must be between 0 and {total_questions}, got {score!r}."
            )
        return cleaned_name


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
