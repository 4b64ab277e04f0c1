"""Utilities for exporting stored quizzes to the plain-text import format."""

from __future__ import annotations

from pathlib import Path

from quizboard.constants.quiz_constants import OPTION_LETTERS
from quizboard.core.models import Question, Quiz
from quizboard.core.services.quiz_repository import QuizRepository


def export_quiz_to_file(file_path: Path, quiz_id: str, repository: QuizRepository) -> Path:
    """Write quiz ``quiz_id`` to ``file_path`` and return the resolved path.

    Reads each question in full form, so the file carries the answer key.
    """
    quiz = repository.get_quiz_by_id(quiz_id)
    questions = [
        repository.get_question_by_id(question.id)
        for question in repository.get_questions_by_quiz_id(quiz_id)
    ]
    if not questions:
        raise ValueError("Cannot export an empty quiz.")

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(serialize_quiz(quiz, questions), encoding="utf-8")
    return file_path


def serialize_quiz(quiz: Quiz, questions: list[Question]) -> str:
    header = [f"TITLE: {quiz.title}"]
    if quiz.description:
        header.append(f"DESCRIPTION: {quiz.description}")
    blocks = ["\n".join(header)] + [_serialize_question(question) for question in questions]
    return "\n\n---\n\n".join(blocks) + "\n"


def _serialize_question(question: Question) -> str:
    lines: list[str] = []

    question_lines = question.question_text.splitlines() or [question.question_text]
    lines.append(f"Q: {question_lines[0]}")
    lines.extend(question_lines[1:])

    options = (question.option_a, question.option_b, question.option_c, question.option_d)
    for letter, option_text in zip(OPTION_LETTERS, options):
        option_lines = option_text.splitlines() or [option_text]
        lines.append(f"{letter}: {option_lines[0]}")
        lines.extend(option_lines[1:])

    lines.append(f"CORRECT: {question.correct_answer}")
    return "\n".join(lines)
