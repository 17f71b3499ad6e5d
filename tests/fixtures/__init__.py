"""Shared testing fixtures for the compliance_training test suite."""

from .openai import FakeChatClient, OpenAIFactory  # noqa: F401
from .quizzes import (  # noqa: F401
    make_quiz,
    quiz_json,
    sample_entity,
    sample_evaluation,
)

__all__ = [
    "FakeChatClient",
    "OpenAIFactory",
    "make_quiz",
    "quiz_json",
    "sample_entity",
    "sample_evaluation",
]
