"""Quiz data structures produced by the generation gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional, Sequence, Tuple

__all__ = [
    "DEFAULT_REQUESTED_COUNT",
    "EMPTY_SOURCE_MESSAGE",
    "GenerationRequest",
    "InvalidInputError",
    "Provenance",
    "QuizQuestion",
    "QuizSet",
    "questions_from_records",
]


DEFAULT_REQUESTED_COUNT = 3
EMPTY_SOURCE_MESSAGE = (
    "Por favor, insira algum texto para gerar um questionário."
)


class InvalidInputError(ValueError):
    """Raised when a generation is requested without usable source text."""


class Provenance(str, Enum):
    """Where a quiz came from; kept for logs and tests only."""

    PROVIDER = "provider"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class QuizQuestion:
    """One multiple-choice item whose answer is one of its options."""

    question: str
    options: Tuple[str, ...]
    answer: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", tuple(self.options))
        if not self.question.strip():
            raise ValueError("question must be non-empty")
        if len(self.options) < 2:
            raise ValueError("a question needs at least two options")
        if any(not option.strip() for option in self.options):
            raise ValueError("options must be non-empty")
        if len(set(self.options)) != len(self.options):
            raise ValueError("options must be unique")
        if self.answer not in self.options:
            raise ValueError("answer must match one of the options")

    def is_correct(self, option: Optional[str]) -> bool:
        return option is not None and option == self.answer

    def to_dict(self) -> dict[str, object]:
        return {
            "question": self.question,
            "options": list(self.options),
            "answer": self.answer,
        }


@dataclass(frozen=True)
class QuizSet:
    """Ordered, non-empty collection of questions from one generation."""

    questions: Tuple[QuizQuestion, ...]
    provenance: Provenance = field(default=Provenance.PROVIDER, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "questions", tuple(self.questions))
        if not self.questions:
            raise ValueError("a quiz needs at least one question")

    @classmethod
    def from_questions(
        cls,
        questions: Iterable[QuizQuestion],
        provenance: Provenance,
    ) -> "QuizSet":
        return cls(tuple(questions), provenance)

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self) -> Iterator[QuizQuestion]:
        return iter(self.questions)

    def __getitem__(self, index: int) -> QuizQuestion:
        return self.questions[index]

    @property
    def is_fallback(self) -> bool:
        return self.provenance is Provenance.FALLBACK

    def copy(self) -> "QuizSet":
        """Return an independent quiz with the same questions."""
        return QuizSet(tuple(self.questions), self.provenance)

    def to_records(self) -> list[dict[str, object]]:
        return [question.to_dict() for question in self.questions]


@dataclass(frozen=True)
class GenerationRequest:
    """One user-initiated request to turn text into a quiz."""

    source_text: str
    requested_count: int = DEFAULT_REQUESTED_COUNT
    domain_hint: Optional[str] = None

    @classmethod
    def create(
        cls,
        source_text: Optional[str],
        requested_count: int = DEFAULT_REQUESTED_COUNT,
        *,
        domain_hint: Optional[str] = None,
    ) -> "GenerationRequest":
        """Validate inputs before anything is sent to the provider.

        Raises :class:`InvalidInputError` for blank text and
        :class:`ValueError` for a non-positive question count.
        """
        text = (source_text or "").strip()
        if not text:
            raise InvalidInputError(EMPTY_SOURCE_MESSAGE)
        if (
            isinstance(requested_count, bool)
            or not isinstance(requested_count, int)
            or requested_count <= 0
        ):
            raise ValueError("requested_count must be a positive integer")
        return cls(text, requested_count, domain_hint)


def questions_from_records(
    records: Sequence[dict[str, object]],
) -> list[QuizQuestion]:
    """Build questions from saved dict records (authored quizzes).

    Raises :class:`ValueError` when a record's options are not a list or
    the resulting question is invalid, and :class:`KeyError` for a missing
    field.
    """
    questions: list[QuizQuestion] = []
    for record in records:
        options = record["options"]
        if not isinstance(options, list):
            raise ValueError("question options must be a list")
        questions.append(
            QuizQuestion(
                question=str(record["question"]),
                options=tuple(str(option) for option in options),
                answer=str(record["answer"]),
            )
        )
    return questions
