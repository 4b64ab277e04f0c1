"""FastAPI server exposing quiz, attempt and leaderboard endpoints."""

from __future__ import annotations

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
import uvicorn

from quizboard.constants.about import APP_NAME, APP_VERSION
from quizboard.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quizboard.core.errors import LookupFailure, RepositoryError, ValidationError
from quizboard.core.markdown_renderer import MarkdownRenderer
from quizboard.core.models import (
    Attempt,
    GlobalStats,
    LeaderboardEntry,
    PlayerHistory,
    PlayerStanding,
    PublicQuestion,
    Question,
    Quiz,
)
from quizboard.core.quiz_manager import QuizManager
from quizboard.core.services.leaderboard import badge_for_position


class QuizPayload(BaseModel):
    """Payload schema for creating or editing a quiz."""

    title: str
    description: str = ""


class QuestionPayload(BaseModel):
    """Payload schema for adding a question to a quiz."""

    quiz_id: str
    question_text: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_answer: str


class AttemptPayload(BaseModel):
    """Payload schema for a completed attempt."""

    quiz_id: str
    user_name: str
    answers: dict[str, str] = Field(default_factory=dict)


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _quiz_json(quiz: Quiz) -> dict[str, object]:
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "created_at": quiz.created_at.isoformat(),
    }


def _public_question_json(question: PublicQuestion, renderer: MarkdownRenderer) -> dict[str, object]:
    return {
        "id": question.id,
        "quiz_id": question.quiz_id,
        "question_text": question.question_text,
        "question_html": renderer.render_fragment(question.question_text),
        "option_a": question.option_a,
        "option_b": question.option_b,
        "option_c": question.option_c,
        "option_d": question.option_d,
    }


def _created_question_json(question: Question) -> dict[str, object]:
    return {
        "id": question.id,
        "quiz_id": question.quiz_id,
        "question_text": question.question_text,
        "option_a": question.option_a,
        "option_b": question.option_b,
        "option_c": question.option_c,
        "option_d": question.option_d,
        "correct_answer": question.correct_answer,
    }


def _attempt_json(attempt: Attempt) -> dict[str, object]:
    return {
        "id": attempt.id,
        "quiz_id": attempt.quiz_id,
        "user_name": attempt.user_name,
        "score": attempt.score,
        "total_questions": attempt.total_questions,
        "created_at": attempt.created_at.isoformat(),
    }


def _leaderboard_entry_json(entry: LeaderboardEntry) -> dict[str, object]:
    return {
        "position": entry.position,
        "percentage": round(entry.percentage, 1),
        "badge": entry.badge.value if entry.badge else None,
        **_attempt_json(entry.attempt),
    }


def _standing_json(index: int, standing: PlayerStanding) -> dict[str, object]:
    badge = badge_for_position(index)
    return {
        "position": index + 1,
        "name": standing.name,
        "total_score": standing.total_score,
        "total_questions_answered": standing.total_questions_answered,
        "quizzes_taken": standing.quizzes_taken,
        "percentage": round(standing.percentage, 1),
        "badge": badge.value if badge else None,
    }


def _stats_json(stats: GlobalStats) -> dict[str, object]:
    return {
        "quiz_count": stats.quiz_count,
        "unique_player_count": stats.unique_player_count,
        "total_attempts": stats.total_attempts,
        "has_attempts": stats.has_attempts,
        "average_score_percentage": stats.average_score_percentage,
        "average_attempts_per_quiz": stats.average_attempts_per_quiz,
        "most_popular_quizzes": [
            {"quiz_id": item.quiz_id, "title": item.title, "attempt_count": item.attempt_count}
            for item in stats.most_popular_quizzes
        ],
    }


def _history_json(history: PlayerHistory) -> dict[str, object]:
    return {
        "user_name": history.user_name,
        "entries": [
            {
                "quiz_id": entry.quiz_id,
                "quiz_title": entry.quiz_title,
                "score": entry.score,
                "total_questions": entry.total_questions,
                "percentage": round(entry.percentage, 1),
                "created_at": entry.created_at.isoformat(),
            }
            for entry in history.entries
        ],
        "total_score": history.total_score,
        "total_questions": history.total_questions,
        "overall_percentage": history.overall_percentage,
    }


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)
    renderer = MarkdownRenderer()

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(LookupFailure)
    async def handle_lookup_failure(request: Request, exc: LookupFailure) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RepositoryError)
    async def handle_repository_error(request: Request, exc: RepositoryError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": "Storage failure"})

    @app.get("/health")
    def health_check() -> dict[str, object]:
        return {"status": "healthy", "service": APP_NAME.lower()}

    @app.get("/quizzes")
    def list_quizzes(manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, object]]:
        return [_quiz_json(quiz) for quiz in manager.list_quizzes()]

    @app.post("/quizzes", status_code=201)
    def create_quiz(
        payload: QuizPayload, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> dict[str, object]:
        return _quiz_json(manager.create_quiz(payload.title, payload.description))

    @app.get("/quizzes/{quiz_id}")
    def get_quiz(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return _quiz_json(manager.get_quiz(quiz_id))

    @app.put("/quizzes/{quiz_id}")
    def update_quiz(
        quiz_id: str, payload: QuizPayload, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> dict[str, object]:
        return _quiz_json(manager.update_quiz(quiz_id, payload.title, payload.description))

    @app.delete("/quizzes/{quiz_id}", status_code=204)
    def delete_quiz(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> None:
        manager.delete_quiz(quiz_id)

    @app.get("/quizzes/{quiz_id}/questions")
    def get_quiz_questions(
        quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> list[dict[str, object]]:
        manager.get_quiz(quiz_id)
        return [
            _public_question_json(question, renderer)
            for question in manager.get_public_questions(quiz_id)
        ]

    @app.post("/questions", status_code=201)
    def create_question(
        payload: QuestionPayload, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> dict[str, object]:
        question = manager.create_question(
            payload.quiz_id,
            payload.question_text,
            [payload.option_a, payload.option_b, payload.option_c, payload.option_d],
            payload.correct_answer,
        )
        return _created_question_json(question)

    @app.post("/attempts", status_code=201)
    def create_attempt(
        payload: AttemptPayload, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> dict[str, object]:
        outcome = manager.submit_attempt(payload.quiz_id, payload.user_name, payload.answers)
        return {
            "attempt": _attempt_json(outcome.attempt),
            "results": [
                {"question_id": result.question_id, "correct": result.is_correct}
                for result in outcome.results
            ],
        }

    @app.get("/leaderboard")
    def global_leaderboard(
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[dict[str, object]]:
        standings = manager.get_global_leaderboard()
        return [_standing_json(index, standing) for index, standing in enumerate(standings)]

    @app.get("/leaderboard/{quiz_id}")
    def quiz_leaderboard(
        quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> list[dict[str, object]]:
        return [_leaderboard_entry_json(entry) for entry in manager.get_quiz_leaderboard(quiz_id)]

    @app.get("/stats")
    def global_stats(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return _stats_json(manager.get_global_stats())

    @app.get("/players/{user_name}/history")
    def player_history(
        user_name: str, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> dict[str, object]:
        return _history_json(manager.get_player_history(user_name))

    return app


def run_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_level: str = "info",
) -> None:
    """Serve the API with uvicorn until interrupted."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level=log_level.lower())
    server = uvicorn.Server(config)
    server.run()
