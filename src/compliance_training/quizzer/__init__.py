from ._main import build_arg_parser
from .session import (
    QuizSessionController,
    SessionCommand,
    SessionOutcome,
    SessionPhase,
    SessionState,
    parse_session_command,
    run_quiz_session,
    score_percentage,
)
from .hosts import (
    GenerationTicket,
    HostKind,
    QuizWorkbench,
    SessionHost,
    delivery_host,
    practice_host,
    preview_host,
)

__all__ = [
    "build_arg_parser",
    "QuizSessionController",
    "SessionCommand",
    "SessionOutcome",
    "SessionPhase",
    "SessionState",
    "parse_session_command",
    "run_quiz_session",
    "score_percentage",
    "GenerationTicket",
    "HostKind",
    "QuizWorkbench",
    "SessionHost",
    "delivery_host",
    "practice_host",
    "preview_host",
]
