"""Quiz-related constants shared across the core, server and console layers."""

OPTION_LETTERS: tuple[str, ...] = ("A", "B", "C", "D")
GLOBAL_LEADERBOARD_LIMIT: int = 20
POPULAR_QUIZ_LIMIT: int = 5
ANONYMOUS_PLAYER_NAME: str = "Anonymous"
