"""Console front end for quizboard."""

from .menu import ConsoleMenu, format_duration, performance_message, run_console, truncate

__all__ = [
    "ConsoleMenu",
    "format_duration",
    "performance_message",
    "run_console",
    "truncate",
]
