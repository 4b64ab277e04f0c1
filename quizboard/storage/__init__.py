"""Relational storage for quizboard."""

from .database import Base, build_engine, build_session_factory, create_schema
from .sql_repository import SqlAlchemyQuizRepository

__all__ = [
    "Base",
    "SqlAlchemyQuizRepository",
    "build_engine",
    "build_session_factory",
    "create_schema",
]
