"""Compliance training: quiz generation with offline fallback and delivery."""

from .generation import (
    GenerationGateway,
    InvalidInputError,
    QuizQuestion,
    QuizSet,
)
from .quizzer import (
    QuizSessionController,
    QuizWorkbench,
    delivery_host,
    practice_host,
    preview_host,
)

__all__ = [
    "GenerationGateway",
    "InvalidInputError",
    "QuizQuestion",
    "QuizSet",
    "QuizSessionController",
    "QuizWorkbench",
    "delivery_host",
    "practice_host",
    "preview_host",
]
