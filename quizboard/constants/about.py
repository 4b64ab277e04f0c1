"""Static metadata describing Quizboard."""

APP_NAME = "Quizboard"
APP_VERSION = "0.1.0"
APP_ABOUT_TEXT = (
    "Quizboard publishes multiple-choice quizzes, scores participant attempts "
    "and ranks players on per-quiz and global leaderboards."
)

HELP_TEXT = (
    "Quizzes can be imported from a .txt file using the format:\n\n"
    "TITLE: Go Basics\n"
    "DESCRIPTION: Test your knowledge of Go fundamentals\n\n"
    "Q: Which keyword declares a constant?\n"
    "A: const\nB: var\nC: let\nD: final\n"
    "CORRECT: A\n\n"
    "Q: What is the zero value of a pointer?\n"
    "A: 0\nB: null\nC: nil\nD: undefined\n"
    "CORRECT: C"
)
