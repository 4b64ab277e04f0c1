"""Utilities for importing quizzes from a human-friendly text file.

File format: a header naming the quiz, then question blocks separated by
blank lines or '---':

    TITLE: Go Basics
    DESCRIPTION: Test your knowledge of Go fundamentals   (optional)

    Q: Question text. Additional lines until the next marker are treated as
       part of the question.
    A: First option text
    B: Second option text
    C: Third option text
    D: Fourth option text
    CORRECT: A|B|C|D

Example:

    TITLE: Arithmetic
    Q: What is 2 + 2?
    A: 3
    B: 4
    C: 5
    D: 22
    CORRECT: B
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path

from quizboard.constants.quiz_constants import OPTION_LETTERS
from quizboard.core.errors import QuizImportError, RepositoryError
from quizboard.core.models import Quiz
from quizboard.core.services.quiz_repository import QuizRepository

logger = logging.getLogger(__name__)

_SAMPLE_QUIZ_DIR = Path(__file__).resolve().parent.parent / "data" / "quizzes"


@dataclass(slots=True)
class QuestionDraft:
    """Question parsed from a file, not yet stored."""

    question_text: str
    options: list[str]
    correct_answer: str


@dataclass(slots=True)
class ImportedQuiz:
    """Container for imported quiz metadata and questions."""

    title: str
    description: str = ""
    questions: list[QuestionDraft] = field(default_factory=list)
    source_path: Path | None = None


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    text = file_path.read_text(encoding="utf-8")
    imported = parse_quiz_text(text)
    imported.source_path = file_path
    return imported


def import_quiz_file(file_path: Path, repository: QuizRepository) -> Quiz:
    """Parse ``file_path`` and store the quiz and its questions."""
    imported = load_quiz_from_file(file_path)
    quiz = repository.create_quiz(imported.title, imported.description)
    try:
        for draft in imported.questions:
            repository.create_question(
                quiz.id,
                draft.question_text,
                draft.options[0],
                draft.options[1],
                draft.options[2],
                draft.options[3],
                draft.correct_answer,
            )
    except RepositoryError:
        logger.warning("Import of %s failed; removing partial quiz %s", file_path, quiz.id)
        repository.delete_quiz(quiz.id)
        raise
    logger.info(
        "Imported quiz '%s' (%d questions) from %s", quiz.title, len(imported.questions), file_path
    )
    return quiz


def sample_quiz_files() -> list[Path]:
    """Quiz files bundled with the package, in name order."""
    return sorted(_SAMPLE_QUIZ_DIR.glob("*.txt"))


def parse_quiz_text(text: str) -> ImportedQuiz:
    blocks = _split_blocks(text)
    title: str | None = None
    description = ""
    questions: list[QuestionDraft] = []

    for block in blocks:
        first_line = block.splitlines()[0].strip().upper()
        if first_line.startswith(("TITLE:", "DESCRIPTION:")):
            if questions:
                raise QuizImportError("TITLE and DESCRIPTION must come before the questions.")
            lines = block.splitlines()
            while lines:
                key, _, value = lines[0].strip().partition(":")
                if key.strip().upper() == "TITLE":
                    title = value.strip()
                elif key.strip().upper() == "DESCRIPTION":
                    description = value.strip()
                else:
                    break
                lines.pop(0)
            block = "\n".join(lines).strip()
            if not block:
                continue
        questions.append(_parse_block(block))

    if not title:
        raise QuizImportError("Quiz file must start with a TITLE: line.")
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    return ImportedQuiz(title=title, description=description, questions=questions)


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


def _parse_block(block: str) -> QuestionDraft:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in OPTION_LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(f"Encountered text outside of a known section: '{line}'.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError("Question text missing (Q: ...)")
    if len(options) != len(OPTION_LETTERS):
        raise QuizImportError("Each question must define exactly four options (A-D).")

    option_list = [options[letter].strip() for letter in OPTION_LETTERS]
    if any(not opt for opt in option_list):
        raise QuizImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuizImportError(f"Question '{question_text}' has no CORRECT: line.")
    if correct_letter not in OPTION_LETTERS:
        raise QuizImportError("CORRECT must be one of A, B, C, or D.")

    return QuestionDraft(
        question_text=question_text,
        options=option_list,
        correct_answer=correct_letter,
    )
