"""Interactive console front end for browsing, taking and ranking quizzes."""

from __future__ import annotations

from collections.abc import Callable
import logging
import time

from quizboard.constants.about import APP_NAME
from quizboard.constants.quiz_constants import ANONYMOUS_PLAYER_NAME, OPTION_LETTERS
from quizboard.core.errors import QuizError
from quizboard.core.models import Badge, Quiz
from quizboard.core.quiz_manager import QuizManager
from quizboard.core.services.leaderboard import badge_for_position, find_attempt_position

logger = logging.getLogger(__name__)

_MEDALS = {Badge.GOLD: "🥇", Badge.SILVER: "🥈", Badge.BRONZE: "🥉"}
_NAME_WIDTH = 25


class ConsoleMenu:
    """Menu loop driving a :class:`QuizManager` from stdin/stdout."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._manager = quiz_manager
        self._input = input_func
        self._print = output_func
        self._clock = clock
        self._actions: dict[str, Callable[[], None]] = {
            "1": self.browse_quizzes,
            "2": self.take_quiz,
            "3": self.view_leaderboard,
            "4": self.view_history,
            "5": self.view_global_stats,
        }

    def run(self) -> None:
        while True:
            self._print_main_menu()
            choice = self._ask("Enter your choice: ")
            if choice == "6":
                self._print("\nThanks for playing! Goodbye!")
                return
            action = self._actions.get(choice)
            if action is None:
                self._print("\nInvalid choice. Please try again.")
                continue
            try:
                action()
            except QuizError as exc:
                logger.debug("Menu action %s failed", choice, exc_info=True)
                self._print(f"Error: {exc}")

    def _print_main_menu(self) -> None:
        self._print("\n" + "=" * 50)
        self._print(f" {APP_NAME.upper()}")
        self._print("=" * 50)
        self._print("1.  Browse available quizzes")
        self._print("2.  Take a quiz")
        self._print("3.  View leaderboard")
        self._print("4.  View my history")
        self._print("5.  Global statistics")
        self._print("6.  Exit")
        self._print("=" * 50)

    # --- Menu actions ---

    def browse_quizzes(self) -> None:
        summaries = self._manager.list_quiz_summaries()
        if not summaries:
            self._print("\nNo quizzes available yet.")
            return

        self._print("\nAvailable Quizzes:")
        self._print("=" * 50)
        for index, summary in enumerate(summaries, start=1):
            quiz = summary.quiz
            self._print(f"\n{index}. {quiz.title}")
            if quiz.description:
                self._print(f"    {quiz.description}")
            self._print(f"    Questions: {summary.question_count}")
            self._print(f"    Attempts: {summary.attempt_count}")
            self._print(f"    Created: {quiz.created_at:%b %d, %Y}")
        self._print("=" * 50)

    def take_quiz(self) -> None:
        summaries = self._manager.list_quiz_summaries()
        if not summaries:
            self._print("\nNo quizzes available yet.")
            return

        self._print("\nAvailable Quizzes:")
        self._print("-" * 50)
        for index, summary in enumerate(summaries, start=1):
            self._print(f"{index}. {summary.quiz.title} ({summary.question_count} questions)")

        quiz = self._select_quiz([s.quiz for s in summaries], allow_all=False)
        if quiz is None:
            return

        questions = self._manager.get_public_questions(quiz.id)
        if not questions:
            self._print("\nThis quiz has no questions yet!")
            return

        user_name = self._ask("\nEnter your name: ") or ANONYMOUS_PLAYER_NAME

        self._print(f"\nStarting Quiz: {quiz.title}")
        self._print(f"Total Questions: {len(questions)}")
        self._print("=" * 50)

        started = self._clock()
        answers: dict[str, str] = {}
        for number, question in enumerate(questions, start=1):
            self._print(f"\nQuestion {number} of {len(questions)}")
            self._print("-" * 50)
            self._print(question.question_text)
            for letter, option in zip(OPTION_LETTERS, question.options):
                self._print(f"  {letter}) {option}")
            answers[question.id] = self._ask_letter()

        outcome = self._manager.submit_attempt(quiz.id, user_name, answers)
        elapsed = self._clock() - started

        self._print("")
        for number, result in enumerate(outcome.results, start=1):
            verdict = "Correct!" if result.is_correct else "Wrong!"
            self._print(f"Question {number}: {verdict}")

        attempt = outcome.attempt
        self._print("\n" + "=" * 50)
        self._print(" QUIZ COMPLETED!")
        self._print("=" * 50)
        self._print(f" Player: {attempt.user_name}")
        self._print(
            f" Score: {attempt.score}/{attempt.total_questions} ({attempt.percentage:.1f}%)"
        )
        self._print(f" Time: {format_duration(elapsed)}")
        self._print(f" {performance_message(attempt.percentage)}")

        entries = self._manager.get_quiz_leaderboard(quiz.id)
        position = find_attempt_position(entries, attempt.id)
        if position is not None:
            self._print(f" Your rank: #{position} out of {len(entries)} attempts")
        self._print("=" * 50)

    def view_leaderboard(self) -> None:
        quizzes = self._manager.list_quizzes()
        if not quizzes:
            self._print("\nNo quizzes available yet.")
            return

        self._print("Select a quiz to view leaderboard:")
        self._print("-" * 50)
        for index, quiz in enumerate(quizzes, start=1):
            self._print(f"{index}. {quiz.title}")

        quiz = self._select_quiz(quizzes, allow_all=True)
        if quiz is None:
            return

        entries = self._manager.get_quiz_leaderboard(quiz.id)
        if not entries:
            self._print("No attempts yet for this quiz!")
            return

        self._print(f"\nLEADERBOARD - {quiz.title}")
        self._print("=" * 70)
        self._print(f"{'Rank':<5} {'Player':<25} {'Score':<12} {'Percentage':<15} {'Date':<10}")
        self._print("-" * 70)
        for entry in entries:
            attempt = entry.attempt
            self._print(
                f"{'#' + str(entry.position):<5} "
                f"{truncate(attempt.user_name, _NAME_WIDTH):<25} "
                f"{f'{attempt.score}/{attempt.total_questions}':<12} "
                f"{f'{entry.percentage:.1f}%':<15} "
                f"{attempt.created_at:%b %d}     "
                f"{_medal(entry.badge)}".rstrip()
            )
        self._print("=" * 70)

    def view_global_leaderboard(self) -> None:
        standings = self._manager.get_global_leaderboard()
        self._print("\nGLOBAL LEADERBOARD")
        self._print("=" * 75)
        self._print(f"{'Rank':<5} {'Player':<25} {'Score':<12} {'Avg %':<15} {'Quizzes':<10}")
        self._print("-" * 75)
        for index, standing in enumerate(standings):
            totals = f"{standing.total_score}/{standing.total_questions_answered}"
            self._print(
                f"{'#' + str(index + 1):<5} "
                f"{truncate(standing.name, _NAME_WIDTH):<25} "
                f"{totals:<12} "
                f"{f'{standing.percentage:.1f}%':<15} "
                f"{standing.quizzes_taken:<10} "
                f"{_medal(badge_for_position(index))}".rstrip()
            )
        self._print("=" * 75)

    def view_history(self) -> None:
        user_name = self._ask("Enter your name: ")
        if not user_name:
            self._print("Name cannot be empty")
            return

        history = self._manager.get_player_history(user_name)
        if not history.entries:
            self._print(f"\nNo attempts found for '{user_name}'")
            return

        self._print(f"\nQUIZ HISTORY - {user_name}")
        self._print("=" * 70)
        self._print(f"{'Quiz':<30} {'Score':<12} {'Percentage':<15} {'Date':<12}")
        self._print("-" * 70)
        for entry in history.entries:
            self._print(
                f"{truncate(entry.quiz_title, 30):<30} "
                f"{f'{entry.score}/{entry.total_questions}':<12} "
                f"{f'{entry.percentage:.1f}%':<15} "
                f"{entry.created_at:%b %d, %Y}"
            )
        self._print("-" * 70)
        overall = history.overall_percentage
        overall_text = f"{overall:.1f}%" if overall is not None else "N/A"
        self._print(
            f"{'OVERALL':<30} "
            f"{f'{history.total_score}/{history.total_questions}':<12} "
            f"{overall_text:<15}"
        )
        self._print("=" * 70)
        self._print(f"Total quizzes taken: {len(history.entries)}")

    def view_global_stats(self) -> None:
        stats = self._manager.get_global_stats()
        self._print("\nGLOBAL STATISTICS")
        self._print("=" * 50)
        self._print(f" Total Quizzes: {stats.quiz_count}")
        self._print(f" Unique Players: {stats.unique_player_count}")
        self._print(f" Total Attempts: {stats.total_attempts}")
        if stats.has_attempts:
            if stats.average_score_percentage is not None:
                self._print(f" Average Score: {stats.average_score_percentage:.1f}%")
            self._print(f" Average Attempts per Quiz: {stats.average_attempts_per_quiz:.1f}")
        self._print("=" * 50)

        self._print("\nMOST POPULAR QUIZZES:")
        self._print("-" * 50)
        for index, item in enumerate(stats.most_popular_quizzes, start=1):
            self._print(f"{index}. {item.title} ({item.attempt_count} attempts)")
        self._print("=" * 50)

    # --- Input helpers ---

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def _ask_letter(self) -> str:
        while True:
            answer = self._ask("\nYour answer (A/B/C/D): ").upper()
            if answer in OPTION_LETTERS:
                return answer
            self._print("Invalid answer. Please enter A, B, C, or D.")

    def _select_quiz(self, quizzes: list[Quiz], allow_all: bool) -> Quiz | None:
        """Prompt for a quiz number; 0 shows the global leaderboard when allowed."""
        prompt = (
            "\nSelect a quiz (enter number, or 0 for all): "
            if allow_all
            else "\nSelect a quiz (enter number): "
        )
        raw = self._ask(prompt)
        try:
            choice = int(raw)
        except ValueError:
            choice = -1
        lowest = 0 if allow_all else 1
        if not lowest <= choice <= len(quizzes):
            self._print("Error: invalid quiz selection")
            return None
        if choice == 0:
            self.view_global_leaderboard()
            return None
        return quizzes[choice - 1]


def run_console(quiz_manager: QuizManager) -> None:
    ConsoleMenu(quiz_manager).run()


def performance_message(percentage: float) -> str:
    if percentage == 100:
        return "Perfect score! Outstanding!"
    if percentage >= 80:
        return "Great job! Excellent performance!"
    if percentage >= 60:
        return "Good effort! Keep it up!"
    return "Keep practicing! You'll improve!"


def format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def truncate(text: str, width: int) -> str:
    if len(text) > width:
        return text[: width - 3] + "..."
    return text


def _medal(badge: Badge | None) -> str:
    return _MEDALS.get(badge, "") if badge else ""
