"""Exceptions raised by the quizboard core and its repositories."""


class QuizError(Exception):
    """Base exception for the application."""


class ValidationError(QuizError, ValueError):
    """Raised when caller input breaks a precondition (empty name, bad score, empty quiz)."""


class RepositoryError(QuizError):
    """Raised when the storage backend fails."""


class LookupFailure(RepositoryError, KeyError):
    """Raised when a requested quiz, question or attempt does not exist."""

    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} '{entity_id}' not found")
        self.entity = entity
        self.entity_id = entity_id

    def __str__(self) -> str:
        return str(self.args[0])


class QuizImportError(QuizError):
    """Raised when a quiz definition cannot be parsed."""
