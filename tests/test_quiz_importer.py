"""
Tests for the quiz text format: parsing, importing and exporting.
"""

import pytest

from quizboard.core.errors import QuizImportError, RepositoryError
from quizboard.core.quiz_exporter import export_quiz_to_file, serialize_quiz
from quizboard.core.quiz_importer import (
    import_quiz_file,
    load_quiz_from_file,
    parse_quiz_text,
    sample_quiz_files,
)
from quizboard.core.services.quiz_repository import InMemoryQuizRepository

ARITHMETIC = """\
TITLE: Arithmetic
DESCRIPTION: Warm-up sums

Q: What is 2 + 2?
A: 3
B: 4
C: 5
D: 22
CORRECT: B

---

Q: What is 3 * 3?
Show your working.
A: 6
B: 9
C: 33
D: 0
CORRECT: b
"""


class TestParseQuizText:
    def test_parse_when_well_formed_then_reads_header_and_questions(self):
        imported = parse_quiz_text(ARITHMETIC)

        assert imported.title == "Arithmetic"
        assert imported.description == "Warm-up sums"
        assert len(imported.questions) == 2
        assert imported.questions[0].options == ["3", "4", "5", "22"]
        assert imported.questions[0].correct_answer == "B"

    def test_parse_when_question_spans_lines_then_joined(self):
        second = parse_quiz_text(ARITHMETIC).questions[1]

        assert second.question_text == "What is 3 * 3?\nShow your working."
        assert second.correct_answer == "B"

    def test_parse_when_header_shares_block_with_question_then_both_read(self):
        imported = parse_quiz_text("TITLE: Tight\nQ: One?\nA: a\nB: b\nC: c\nD: d\nCORRECT: D\n")

        assert imported.title == "Tight"
        assert imported.questions[0].correct_answer == "D"

    def test_parse_when_title_missing_then_raises(self):
        with pytest.raises(QuizImportError, match="TITLE"):
            parse_quiz_text("Q: One?\nA: a\nB: b\nC: c\nD: d\nCORRECT: A\n")

    def test_parse_when_no_questions_then_raises(self):
        with pytest.raises(QuizImportError, match="any questions"):
            parse_quiz_text("TITLE: Empty\n")

    def test_parse_when_option_missing_then_raises(self):
        with pytest.raises(QuizImportError, match="four options"):
            parse_quiz_text("TITLE: T\n\nQ: One?\nA: a\nB: b\nC: c\nCORRECT: A\n")

    def test_parse_when_correct_line_missing_then_raises(self):
        with pytest.raises(QuizImportError, match="CORRECT"):
            parse_quiz_text("TITLE: T\n\nQ: One?\nA: a\nB: b\nC: c\nD: d\n")

    def test_parse_when_correct_letter_invalid_then_raises(self):
        with pytest.raises(QuizImportError, match="one of A, B, C, or D"):
            parse_quiz_text("TITLE: T\n\nQ: One?\nA: a\nB: b\nC: c\nD: d\nCORRECT: E\n")

    def test_parse_when_title_follows_questions_then_raises(self):
        text = "TITLE: T\n\nQ: One?\nA: a\nB: b\nC: c\nD: d\nCORRECT: A\n\nTITLE: Late\n"
        with pytest.raises(QuizImportError):
            parse_quiz_text(text)

    def test_parse_when_stray_text_then_raises(self):
        with pytest.raises(QuizImportError, match="outside of a known section"):
            parse_quiz_text("TITLE: T\n\nstray\nQ: One?\nA: a\nB: b\nC: c\nD: d\nCORRECT: A\n")


class TestImportAndExport:
    def test_import_when_file_valid_then_quiz_and_questions_stored(self, tmp_path, repository):
        path = tmp_path / "arithmetic.txt"
        path.write_text(ARITHMETIC, encoding="utf-8")

        quiz = import_quiz_file(path, repository)

        assert repository.get_quiz_by_id(quiz.id).description == "Warm-up sums"
        stored = repository.get_questions_by_quiz_id(quiz.id)
        assert [q.option_b for q in stored] == ["4", "9"]
        assert repository.get_question_by_id(stored[1].id).correct_answer == "B"

    def test_import_when_storage_fails_midway_then_partial_quiz_removed(self, tmp_path):
        class FailingSecondQuestion(InMemoryQuizRepository):
            def __init__(self):
                super().__init__()
                self.created_questions = 0

            def create_question(self, *args, **kwargs):
                self.created_questions += 1
                if self.created_questions == 2:
                    raise RepositoryError("disk full")
                return super().create_question(*args, **kwargs)

        path = tmp_path / "arithmetic.txt"
        path.write_text(ARITHMETIC, encoding="utf-8")
        repository = FailingSecondQuestion()

        with pytest.raises(RepositoryError):
            import_quiz_file(path, repository)
        assert repository.list_quizzes() == []

    def test_load_when_called_then_records_source_path(self, tmp_path):
        path = tmp_path / "arithmetic.txt"
        path.write_text(ARITHMETIC, encoding="utf-8")

        assert load_quiz_from_file(path).source_path == path

    def test_sample_files_when_loaded_then_all_parse(self):
        files = sample_quiz_files()

        assert len(files) == 5
        for path in files:
            imported = load_quiz_from_file(path)
            assert imported.title
            assert len(imported.questions) >= 8

    def test_export_when_reimported_then_content_matches(self, tmp_path, repository, go_basics):
        quiz, _ = go_basics

        written = export_quiz_to_file(tmp_path / "out" / "go.txt", quiz.id, repository)
        again = load_quiz_from_file(written)

        assert again.title == quiz.title
        assert [d.correct_answer for d in again.questions] == ["A", "C"]

    def test_export_when_quiz_has_no_questions_then_raises(self, tmp_path, repository):
        quiz = repository.create_quiz("Empty", "")
        with pytest.raises(ValueError, match="empty quiz"):
            export_quiz_to_file(tmp_path / "empty.txt", quiz.id, repository)

    def test_serialize_when_no_description_then_header_is_title_only(self, repository, go_basics):
        quiz, questions = go_basics
        bare = repository.update_quiz(quiz.id, quiz.title, "")

        text = serialize_quiz(bare, questions)

        assert text.startswith(f"TITLE: {quiz.title}\n\n---\n\n")
        assert "DESCRIPTION" not in text
