"""Projection of full questions into participant-safe views."""

from __future__ import annotations

from collections.abc import Iterable

from quizboard.core.models import PublicQuestion, Question


def conceal(question: Question) -> PublicQuestion:
    """Return ``question`` without its correct answer."""
    return PublicQuestion(
        id=question.id,
        quiz_id=question.quiz_id,
        question_text=question.question_text,
        option_a=question.option_a,
        option_b=question.option_b,
        option_c=question.option_c,
        option_d=question.option_d,
    )


def conceal_all(questions: Iterable[Question]) -> list[PublicQuestion]:
    return [conceal(question) for question in questions]
