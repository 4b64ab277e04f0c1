"""
Contract Tests for QuizRepository implementations

Every test runs against both the in-memory store and the SQLAlchemy store.
"""

from datetime import timedelta

import pytest

from quizboard.core.errors import LookupFailure, RepositoryError, ValidationError
from quizboard.core.models import PublicQuestion, Question


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    if request.param == "memory":
        return request.getfixturevalue("repository")
    return request.getfixturevalue("sql_repository")


def _add_question(repo, quiz_id, text="What?", correct="A"):
    return repo.create_question(quiz_id, text, "one", "two", "three", "four", correct)


class TestQuizzes:
    def test_create_quiz_when_valid_then_listed(self, repo):
        quiz = repo.create_quiz("  Go Basics  ", "Fundamentals")

        assert quiz.title == "Go Basics"
        assert quiz.created_at is not None
        assert repo.list_quizzes() == [quiz]
        assert repo.get_quiz_by_id(quiz.id) == quiz

    def test_create_quiz_when_title_blank_then_raises(self, repo):
        with pytest.raises(ValidationError, match="title"):
            repo.create_quiz("   ", "")

    def test_list_quizzes_when_several_then_creation_order(self, repo):
        titles = ["First", "Second", "Third"]
        for title in titles:
            repo.create_quiz(title, "")
        assert [q.title for q in repo.list_quizzes()] == titles

    def test_get_quiz_when_missing_then_raises_lookup_failure(self, repo):
        with pytest.raises(LookupFailure):
            repo.get_quiz_by_id("999999")

    def test_update_quiz_when_valid_then_title_and_description_change(self, repo):
        quiz = repo.create_quiz("Old", "old description")

        updated = repo.update_quiz(quiz.id, "New", "new description")

        assert updated.id == quiz.id
        assert repo.get_quiz_by_id(quiz.id).title == "New"
        assert repo.get_quiz_by_id(quiz.id).description == "new description"

    def test_delete_quiz_when_called_then_cascades(self, repo):
        quiz = repo.create_quiz("Doomed", "")
        question = _add_question(repo, quiz.id)
        repo.create_quiz_attempt(quiz.id, "alice", 1, 1)

        repo.delete_quiz(quiz.id)

        assert repo.list_quizzes() == []
        assert repo.get_questions_by_quiz_id(quiz.id) == []
        assert repo.get_quiz_attempts_by_quiz_id(quiz.id) == []
        with pytest.raises(LookupFailure):
            repo.get_question_by_id(question.id)


class TestQuestions:
    def test_get_questions_when_listed_then_public_projection_in_creation_order(self, repo):
        quiz = repo.create_quiz("Quiz", "")
        created = [_add_question(repo, quiz.id, text=f"Q{i}") for i in range(3)]

        listed = repo.get_questions_by_quiz_id(quiz.id)

        assert all(isinstance(q, PublicQuestion) for q in listed)
        assert [q.id for q in listed] == [q.id for q in created]

    def test_get_question_by_id_when_grading_then_includes_answer(self, repo):
        quiz = repo.create_quiz("Quiz", "")
        created = _add_question(repo, quiz.id, correct="D")

        full = repo.get_question_by_id(created.id)

        assert isinstance(full, Question)
        assert full.correct_answer == "D"

    def test_get_questions_when_other_quiz_then_not_included(self, repo):
        quiz = repo.create_quiz("Quiz", "")
        other = repo.create_quiz("Other", "")
        _add_question(repo, other.id)

        assert repo.get_questions_by_quiz_id(quiz.id) == []

    @pytest.mark.parametrize("letter", ["E", "a", "", "AB"])
    def test_create_question_when_bad_letter_then_raises(self, repo, letter):
        quiz = repo.create_quiz("Quiz", "")
        with pytest.raises(ValidationError, match="Correct answer"):
            _add_question(repo, quiz.id, correct=letter)

    def test_create_question_when_option_blank_then_raises(self, repo):
        quiz = repo.create_quiz("Quiz", "")
        with pytest.raises(ValidationError, match="Option text"):
            repo.create_question(quiz.id, "Q?", "a", " ", "c", "d", "A")

    def test_create_question_when_quiz_missing_then_raises_lookup_failure(self, repo):
        with pytest.raises(LookupFailure):
            _add_question(repo, "424242")

    def test_delete_question_when_called_then_removed(self, repo):
        quiz = repo.create_quiz("Quiz", "")
        question = _add_question(repo, quiz.id)

        repo.delete_question(question.id)

        assert repo.get_questions_by_quiz_id(quiz.id) == []

    def test_delete_question_when_missing_then_raises_lookup_failure(self, repo):
        with pytest.raises(LookupFailure):
            repo.delete_question("123456")


class TestAttempts:
    def test_attempts_when_listed_then_insertion_order(self, repo):
        quiz = repo.create_quiz("Quiz", "")
        names = ["carol", "alice", "bob"]
        for score, name in enumerate(names):
            repo.create_quiz_attempt(quiz.id, name, score, 3)

        attempts = repo.get_quiz_attempts_by_quiz_id(quiz.id)

        assert [a.user_name for a in attempts] == names
        assert [a.score for a in attempts] == [0, 1, 2]

    def test_create_attempt_when_quiz_missing_then_raises_lookup_failure(self, repo):
        with pytest.raises(LookupFailure):
            repo.create_quiz_attempt("777777", "alice", 0, 1)

    def test_delete_attempt_when_called_then_removed(self, repo):
        quiz = repo.create_quiz("Quiz", "")
        attempt = repo.create_quiz_attempt(quiz.id, "alice", 1, 1)

        repo.delete_quiz_attempt(attempt.id)

        assert repo.get_quiz_attempts_by_quiz_id(quiz.id) == []

    def test_timestamps_when_read_back_then_utc_aware(self, repo):
        quiz = repo.create_quiz("Quiz", "")
        repo.create_quiz_attempt(quiz.id, "alice", 1, 1)

        [stored_quiz] = repo.list_quizzes()
        [attempt] = repo.get_quiz_attempts_by_quiz_id(quiz.id)

        for stamp in (stored_quiz.created_at, attempt.created_at):
            assert stamp.utcoffset() == timedelta(0)

    def test_attempt_when_created_then_is_immutable(self, repo):
        quiz = repo.create_quiz("Quiz", "")
        attempt = repo.create_quiz_attempt(quiz.id, "alice", 1, 1)

        with pytest.raises(AttributeError):
            attempt.score = 5  # type: ignore


class TestSqlRepositoryErrors:
    def test_non_numeric_id_when_looked_up_then_raises_lookup_failure(self, sql_repository):
        with pytest.raises(LookupFailure):
            sql_repository.get_quiz_by_id("not-a-number")
        assert sql_repository.get_questions_by_quiz_id("not-a-number") == []

    @pytest.mark.parametrize("variant", ["9" * 30, str(2**63), " 1 ", "1_0", "+1", "-1", "١"])
    def test_malformed_or_out_of_range_id_when_looked_up_then_raises_lookup_failure(
        self, sql_repository, variant
    ):
        quiz = sql_repository.create_quiz("Only", "")
        assert quiz.id == "1"

        with pytest.raises(LookupFailure):
            sql_repository.get_quiz_by_id(variant)
        with pytest.raises(LookupFailure):
            sql_repository.create_quiz_attempt(variant, "alice", 0, 1)
        assert sql_repository.get_quiz_attempts_by_quiz_id(variant) == []
        assert sql_repository.get_questions_by_quiz_id(variant) == []

    def test_backend_failure_when_querying_then_wrapped_in_repository_error(self):
        from sqlalchemy.exc import OperationalError

        from quizboard.storage import SqlAlchemyQuizRepository

        class BrokenSession:
            def scalars(self, *args, **kwargs):
                raise OperationalError("SELECT", {}, Exception("database is locked"))

            def rollback(self):
                pass

            def close(self):
                pass

        repo = SqlAlchemyQuizRepository(lambda: BrokenSession())

        with pytest.raises(RepositoryError):
            repo.list_quizzes()
