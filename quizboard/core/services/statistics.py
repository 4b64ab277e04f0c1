"""Dataset-wide statistics and per-player history."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from quizboard.constants.quiz_constants import POPULAR_QUIZ_LIMIT
from quizboard.core.models import (
    Attempt,
    GlobalStats,
    HistoryEntry,
    PlayerHistory,
    Quiz,
    QuizPopularity,
)


def summarize(
    quizzes: Sequence[Quiz],
    attempts_per_quiz: Mapping[str, Sequence[Attempt]],
    popular_limit: int = POPULAR_QUIZ_LIMIT,
) -> GlobalStats:
    """Summarize attempts across every quiz.

    ``attempts_per_quiz`` maps quiz ids to their attempts. A quiz missing from
    the mapping contributes nothing to the totals and counts as having zero
    attempts in the popularity ranking.
    """
    total_attempts = 0
    total_score = 0
    total_questions = 0
    players: set[str] = set()
    popularity: list[QuizPopularity] = []

    for quiz in quizzes:
        attempts = attempts_per_quiz.get(quiz.id, ())
        for attempt in attempts:
            total_attempts += 1
            total_score += attempt.score
            total_questions += attempt.total_questions
            players.add(attempt.user_name)
        popularity.append(
            QuizPopularity(quiz_id=quiz.id, title=quiz.title, attempt_count=len(attempts))
        )

    average_score: float | None = None
    average_attempts: float | None = None
    if total_attempts > 0:
        if total_questions > 0:
            average_score = total_score / total_questions * 100
        average_attempts = total_attempts / len(quizzes)

    popularity.sort(key=lambda item: -item.attempt_count)
    return GlobalStats(
        quiz_count=len(quizzes),
        unique_player_count=len(players),
        total_attempts=total_attempts,
        average_score_percentage=average_score,
        average_attempts_per_quiz=average_attempts,
        most_popular_quizzes=popularity[:popular_limit],
    )


def player_history(
    user_name: str,
    quizzes: Sequence[Quiz],
    attempts_per_quiz: Mapping[str, Sequence[Attempt]],
) -> PlayerHistory:
    """Collect every attempt by ``user_name``, in quiz order then attempt order."""
    entries: list[HistoryEntry] = []
    for quiz in quizzes:
        for attempt in attempts_per_quiz.get(quiz.id, ()):
            if attempt.user_name != user_name:
                continue
            entries.append(
                HistoryEntry(
                    quiz_id=quiz.id,
                    quiz_title=quiz.title,
                    score=attempt.score,
                    total_questions=attempt.total_questions,
                    created_at=attempt.created_at,
                )
            )
    return PlayerHistory(
        user_name=user_name,
        entries=entries,
        total_score=sum(entry.score for entry in entries),
        total_questions=sum(entry.total_questions for entry in entries),
    )
