"""Relational repository backed by SQLAlchemy."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from quizboard.core.errors import LookupFailure, RepositoryError
from quizboard.core.models import Attempt, PublicQuestion, Question, Quiz
from quizboard.core.services.concealment import conceal_all
from quizboard.core.services.quiz_repository import (
    QuizRepository,
    validate_question_fields,
    validate_quiz_fields,
)
from quizboard.storage.models import AttemptRow, QuestionRow, QuizRow


class SqlAlchemyQuizRepository(QuizRepository):
    """Stores quizzes in any database SQLAlchemy can reach.

    Each operation runs in its own session. Identifiers are integer primary
    keys exposed as strings.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            raise RepositoryError(str(exc)) from exc
        finally:
            db.close()

    def list_quizzes(self) -> list[Quiz]:
        with self._session() as db:
            rows = db.scalars(select(QuizRow).order_by(QuizRow.id.asc())).all()
            return [_to_quiz(row) for row in rows]

    def get_quiz_by_id(self, quiz_id: str) -> Quiz:
        with self._session() as db:
            return _to_quiz(_require(db, QuizRow, "Quiz", quiz_id))

    def create_quiz(self, title: str, description: str = "") -> Quiz:
        cleaned_title, cleaned_description = validate_quiz_fields(title, description)
        with self._session() as db:
            row = QuizRow(title=cleaned_title, description=cleaned_description, created_at=_now())
            db.add(row)
            db.commit()
            db.refresh(row)
            return _to_quiz(row)

    def update_quiz(self, quiz_id: str, title: str, description: str = "") -> Quiz:
        cleaned_title, cleaned_description = validate_quiz_fields(title, description)
        with self._session() as db:
            row = _require(db, QuizRow, "Quiz", quiz_id)
            row.title = cleaned_title
            row.description = cleaned_description
            db.commit()
            db.refresh(row)
            return _to_quiz(row)

    def delete_quiz(self, quiz_id: str) -> None:
        with self._session() as db:
            row = _require(db, QuizRow, "Quiz", quiz_id)
            db.delete(row)
            db.commit()

    def get_questions_by_quiz_id(self, quiz_id: str) -> list[PublicQuestion]:
        pk = _parse_pk(quiz_id)
        if pk is None:
            return []
        with self._session() as db:
            rows = db.scalars(
                select(QuestionRow).where(QuestionRow.quiz_id == pk).order_by(QuestionRow.id.asc())
            ).all()
            return conceal_all(_to_question(row) for row in rows)

    def get_question_by_id(self, question_id: str) -> Question:
        with self._session() as db:
            return _to_question(_require(db, QuestionRow, "Question", question_id))

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
        with self._session() as db:
            quiz = _require(db, QuizRow, "Quiz", quiz_id)
            row = QuestionRow(
                quiz_id=quiz.id,
                question_text=text,
                option_a=options[0],
                option_b=options[1],
                option_c=options[2],
                option_d=options[3],
                correct_answer=letter,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return _to_question(row)

    def delete_question(self, question_id: str) -> None:
        with self._session() as db:
            db.delete(_require(db, QuestionRow, "Question", question_id))
            db.commit()

    def create_quiz_attempt(
        self, quiz_id: str, user_name: str, score: int, total_questions: int
    ) -> Attempt:
        with self._session() as db:
            quiz = _require(db, QuizRow, "Quiz", quiz_id)
            row = AttemptRow(
                quiz_id=quiz.id,
                user_name=user_name,
                score=score,
                total_questions=total_questions,
                created_at=_now(),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return _to_attempt(row)

    def get_quiz_attempts_by_quiz_id(self, quiz_id: str) -> list[Attempt]:
        pk = _parse_pk(quiz_id)
        if pk is None:
            return []
        with self._session() as db:
            rows = db.scalars(
                select(AttemptRow).where(AttemptRow.quiz_id == pk).order_by(AttemptRow.id.asc())
            ).all()
            return [_to_attempt(row) for row in rows]

    def delete_quiz_attempt(self, attempt_id: str) -> None:
        with self._session() as db:
            db.delete(_require(db, AttemptRow, "Attempt", attempt_id))
            db.commit()


_MAX_PK = 2**63 - 1


def _parse_pk(value: str) -> int | None:
    """Integer key for ``value``; only plain ASCII digits within BIGINT range qualify."""
    if not isinstance(value, str) or not (value.isascii() and value.isdigit()):
        return None
    pk = int(value)
    return pk if pk <= _MAX_PK else None


def _require(db: Session, model: type, entity: str, entity_id: str):
    pk = _parse_pk(entity_id)
    row = db.get(model, pk) if pk is not None else None
    if row is None:
        raise LookupFailure(entity, entity_id)
    return row


def _to_quiz(row: QuizRow) -> Quiz:
    return Quiz(
        id=str(row.id),
        title=row.title,
        description=row.description or "",
        created_at=_as_utc(row.created_at),
    )


def _to_question(row: QuestionRow) -> Question:
    return Question(
        id=str(row.id),
        quiz_id=str(row.quiz_id),
        question_text=row.question_text,
        option_a=row.option_a,
        option_b=row.option_b,
        option_c=row.option_c,
        option_d=row.option_d,
        correct_answer=row.correct_answer,
    )


def _to_attempt(row: AttemptRow) -> Attempt:
    return Attempt(
        id=str(row.id),
        quiz_id=str(row.quiz_id),
        user_name=row.user_name,
        score=row.score,
        total_questions=row.total_questions,
        created_at=_as_utc(row.created_at),
    )


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops the offset; stored values are always UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
