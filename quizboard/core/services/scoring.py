"""Grading of submitted answers against a quiz's answer key."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
import logging

from quizboard.core.errors import RepositoryError
from quizboard.core.models import PublicQuestion, Question, QuestionResult, ScoreResult

logger = logging.getLogger(__name__)


def score(questions: Sequence[Question], answers: Mapping[str, str]) -> ScoreResult:
    """Score ``answers`` (question id -> letter) against ``questions``.

    Produces exactly one result per question, in the order supplied. A missing
    answer counts as incorrect. Letters are compared exactly, so ``"a"`` does
    not match ``"A"`` and an unexpected stored answer never matches.
    """
    total = 0
    results: list[QuestionResult] = []
    for question in questions:
        submitted = answers.get(question.id)
        is_correct = submitted is not None and submitted == question.correct_answer
        if is_correct:
            total += 1
        results.append(QuestionResult(question_id=question.id, is_correct=is_correct))
    return ScoreResult(score=total, results=results)


def resolve_full_questions(
    questions: Iterable[PublicQuestion],
    fetch: Callable[[str], Question],
) -> list[Question]:
    """Re-fetch each question with its answer key, skipping failed lookups.

    A question that cannot be fetched is dropped from the returned list so the
    rest of the attempt can still be graded.
    """
    resolved: list[Question] = []
    for question in questions:
        try:
            resolved.append(fetch(question.id))
        except RepositoryError as exc:
            logger.warning("Skipping question %s during grading: %s", question.id, exc)
    return resolved
