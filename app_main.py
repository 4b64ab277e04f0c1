"""Application entry point for Quizboard."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from sqlalchemy.exc import SQLAlchemyError

from quizboard.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION, HELP_TEXT
from quizboard.core.errors import QuizError
from quizboard.core.quiz_exporter import export_quiz_to_file
from quizboard.core.quiz_importer import import_quiz_file, sample_quiz_files
from quizboard.core.quiz_manager import QuizManager
from quizboard.core.services.quiz_repository import InMemoryQuizRepository, QuizRepository
from quizboard.utils.logging_config import configure_logging
from quizboard.utils.settings import ConfigurationError, Settings, load_settings


def build_repository(settings: Settings) -> QuizRepository:
    """Create the repository selected by ``settings.storage``."""
    if settings.storage == "memory":
        return InMemoryQuizRepository()

    from quizboard.storage import (
        SqlAlchemyQuizRepository,
        build_engine,
        build_session_factory,
        create_schema,
    )

    engine = build_engine(settings.database_url)
    create_schema(engine)
    return SqlAlchemyQuizRepository(build_session_factory(engine))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quizboard", description=APP_ABOUT_TEXT)
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("console", help="Interactive quiz menu (default)")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", help="Bind address (overrides QUIZBOARD_HOST)")
    serve.add_argument("--port", type=int, help="Port (overrides QUIZBOARD_PORT)")

    subparsers.add_parser("seed", help="Import the bundled sample quizzes")

    importer = subparsers.add_parser(
        "import",
        help="Import quizzes from text files",
        epilog=HELP_TEXT,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    importer.add_argument("files", nargs="+", type=Path, help="Quiz files to import")

    exporter = subparsers.add_parser("export", help="Export a quiz to a text file")
    exporter.add_argument("quiz_id", help="Identifier of the quiz to export")
    exporter.add_argument("file", type=Path, help="Destination file")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Initialize logging and storage, then dispatch the requested command."""
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    logger = configure_logging(settings.log_level)
    command = args.command or "console"

    try:
        repository = build_repository(settings)
        quiz_manager = QuizManager(repository)
        if command == "serve":
            from quizboard.server.api_server import run_api_server

            host = args.host or settings.host
            port = args.port or settings.port
            logger.info("Starting Quizboard API on %s:%d", host, port)
            run_api_server(quiz_manager, host=host, port=port, log_level=settings.log_level)
        elif command in ("import", "seed"):
            files = sample_quiz_files() if command == "seed" else args.files
            for file_path in files:
                quiz = import_quiz_file(file_path, repository)
                print(f"Imported '{quiz.title}' as quiz {quiz.id}")
        elif command == "export":
            written = export_quiz_to_file(args.file, args.quiz_id, repository)
            print(f"Exported quiz {args.quiz_id} to {written}")
        else:
            from quizboard.console import run_console

            run_console(quiz_manager)
    except (QuizError, SQLAlchemyError, ImportError, OSError, ValueError) as exc:
        logger.error("%s failed: %s", command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
