"""Per-quiz and global leaderboards derived from attempt records."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from quizboard.constants.quiz_constants import GLOBAL_LEADERBOARD_LIMIT
from quizboard.core.models import Attempt, Badge, LeaderboardEntry, PlayerStanding, percentage_of

_BADGES: tuple[Badge, ...] = (Badge.GOLD, Badge.SILVER, Badge.BRONZE)


@dataclass(slots=True)
class _StandingAccumulator:
    """Mutable per-player totals used while folding attempts."""

    name: str
    total_score: int = 0
    total_questions: int = 0
    quizzes_taken: int = 0

    def add(self, attempt: Attempt) -> None:
        self.total_score += attempt.score
        self.total_questions += attempt.total_questions
        self.quizzes_taken += 1

    def to_standing(self) -> PlayerStanding:
        return PlayerStanding(
            name=self.name,
            total_score=self.total_score,
            total_questions_answered=self.total_questions,
            quizzes_taken=self.quizzes_taken,
        )


def badge_for_position(index: int) -> Badge | None:
    """Badge for the zero-based list ``index``; only the first three get one."""
    if 0 <= index < len(_BADGES):
        return _BADGES[index]
    return None


def rank_quiz_attempts(attempts: Sequence[Attempt]) -> list[LeaderboardEntry]:
    """Build a quiz leaderboard in the order the attempts were supplied.

    The repository order is the ranking; attempts are not re-sorted by score.
    """
    return [
        LeaderboardEntry(
            position=index + 1,
            attempt=attempt,
            percentage=percentage_of(attempt.score, attempt.total_questions),
            badge=badge_for_position(index),
        )
        for index, attempt in enumerate(attempts)
    ]


def find_attempt_position(entries: Sequence[LeaderboardEntry], attempt_id: str) -> int | None:
    """Return the 1-based leaderboard position of ``attempt_id``, if present."""
    for entry in entries:
        if entry.attempt.id == attempt_id:
            return entry.position
    return None


def aggregate_global(
    attempts: Iterable[Attempt],
    limit: int | None = GLOBAL_LEADERBOARD_LIMIT,
) -> list[PlayerStanding]:
    """Group attempts by player and rank players by overall ratio.

    Players with equal ratios keep the order in which they first appear in
    ``attempts``. The full ranking is computed before ``limit`` is applied;
    pass ``None`` to get every player.
    """
    accumulators: dict[str, _StandingAccumulator] = {}
    for attempt in attempts:
        entry = accumulators.get(attempt.user_name)
        if entry is None:
            entry = _StandingAccumulator(name=attempt.user_name)
            accumulators[attempt.user_name] = entry
        entry.add(attempt)

    standings = sorted(
        (entry.to_standing() for entry in accumulators.values()),
        key=lambda standing: -_ratio(standing),
    )
    if limit is None:
        return standings
    return standings[:limit]


def _ratio(standing: PlayerStanding) -> float:
    if standing.total_questions_answered <= 0:
        return 0.0
    return standing.total_score / standing.total_questions_answered
