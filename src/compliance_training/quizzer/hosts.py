"""Session hosts and the quiz generation workbench.

The three hosts share one `QuizSessionController` and differ only in where
their quiz comes from, which target their exit callback receives and
whether leaving before the end is offered:

- practice: freshly generated quiz, exits to ``generator``, no early exit
- preview: copy of the authored quiz, exits to ``close``, early exit
- delivery: pre-authored quiz, exits to ``training``, early exit

`QuizWorkbench` owns the "generate" action of the practice and authoring
screens: it validates the source text, keeps a single generation in flight
and tags each request with a ticket so a late response never replaces a
newer quiz.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..generation.gateway import GenerationGateway
from ..generation.models import (
    DEFAULT_REQUESTED_COUNT,
    EMPTY_SOURCE_MESSAGE,
    GenerationRequest,
    InvalidInputError,
    QuizSet,
)
from .session import DEFAULT_PASS_THRESHOLD, QuizSessionController

__all__ = [
    "BUSY_MESSAGE",
    "ExitCallback",
    "GenerationTicket",
    "HostKind",
    "QuizWorkbench",
    "SessionHost",
    "delivery_host",
    "practice_host",
    "preview_host",
]

logger = logging.getLogger(__name__)

ExitCallback = Callable[[str], None]

BUSY_MESSAGE = "Já existe um quiz a ser gerado. Aguarde."


class HostKind(str, Enum):
    PRACTICE = "practice"
    PREVIEW = "preview"
    DELIVERY = "delivery"


class SessionHost:
    """Wire a controller to the screen that shows it."""

    def __init__(
        self,
        controller: QuizSessionController,
        on_exit: ExitCallback,
        *,
        kind: HostKind,
        exit_target: str,
        allow_manual_exit: bool,
    ) -> None:
        self.controller = controller
        self.kind = kind
        self.exit_target = exit_target
        self.allow_manual_exit = allow_manual_exit
        self._on_exit = on_exit

    def can_exit(self) -> bool:
        return self.controller.is_completed or self.allow_manual_exit

    def exit(self) -> bool:
        """Invoke the exit callback if leaving is allowed right now."""
        if not self.can_exit():
            return False
        self._on_exit(self.exit_target)
        return True


def practice_host(
    quiz: QuizSet,
    on_exit: ExitCallback,
    *,
    pass_threshold: int = DEFAULT_PASS_THRESHOLD,
) -> SessionHost:
    return SessionHost(
        QuizSessionController(quiz, pass_threshold=pass_threshold),
        on_exit,
        kind=HostKind.PRACTICE,
        exit_target="generator",
        allow_manual_exit=False,
    )


def preview_host(
    quiz: QuizSet,
    on_close: ExitCallback,
    *,
    pass_threshold: int = DEFAULT_PASS_THRESHOLD,
) -> SessionHost:
    return SessionHost(
        QuizSessionController(quiz.copy(), pass_threshold=pass_threshold),
        on_close,
        kind=HostKind.PREVIEW,
        exit_target="close",
        allow_manual_exit=True,
    )


def delivery_host(
    quiz: QuizSet,
    on_module_change: ExitCallback,
    *,
    pass_threshold: int = DEFAULT_PASS_THRESHOLD,
) -> SessionHost:
    return SessionHost(
        QuizSessionController(quiz, pass_threshold=pass_threshold),
        on_module_change,
        kind=HostKind.DELIVERY,
        exit_target="training",
        allow_manual_exit=True,
    )


@dataclass(frozen=True)
class GenerationTicket:
    """Identifies one generation request issued by a workbench."""

    token: int
    request: GenerationRequest


class QuizWorkbench:
    """Generate quizzes for a screen and hand them to session hosts."""

    def __init__(
        self,
        gateway: GenerationGateway,
        *,
        requested_count: int = DEFAULT_REQUESTED_COUNT,
        domain_hint: Optional[str] = None,
        pass_threshold: int = DEFAULT_PASS_THRESHOLD,
    ) -> None:
        self._gateway = gateway
        self._requested_count = requested_count
        self._domain_hint = domain_hint
        self._pass_threshold = pass_threshold
        self._tokens = itertools.count(1)
        self._pending: Optional[GenerationTicket] = None
        self.quiz: Optional[QuizSet] = None
        self.error: Optional[str] = None

    @property
    def is_generating(self) -> bool:
        return self._pending is not None

    def begin(self, source_text: Optional[str]) -> Optional[GenerationTicket]:
        """Validate ``source_text`` and reserve the in-flight slot.

        Returns ``None`` (with :attr:`error` set) for blank text or while
        another generation is pending.
        """
        if self._pending is not None:
            self.error = BUSY_MESSAGE
            return None
        try:
            request = GenerationRequest.create(
                source_text,
                self._requested_count,
                domain_hint=self._domain_hint,
            )
        except InvalidInputError:
            self.error = EMPTY_SOURCE_MESSAGE
            return None
        self.error = None
        self.quiz = None
        self._pending = GenerationTicket(next(self._tokens), request)
        return self._pending

    def complete(self, ticket: GenerationTicket, quiz: QuizSet) -> bool:
        """Apply ``quiz`` if ``ticket`` is still the pending request."""
        if self._pending is None or ticket.token != self._pending.token:
            logger.info(
                "Discarding stale quiz result",
                extra={"event": "stale_generation", "token": ticket.token},
            )
            return False
        self._pending = None
        self.quiz = quiz
        return True

    def cancel(self) -> None:
        """Abandon the pending generation; its result will be discarded."""
        self._pending = None

    def generate(self, source_text: Optional[str]) -> Optional[QuizSet]:
        """Validate, call the gateway and apply the result in one step."""
        ticket = self.begin(source_text)
        if ticket is None:
            return None
        try:
            quiz = self._gateway.generate_quiz_for(ticket.request)
        except BaseException:
            self.cancel()
            raise
        return quiz if self.complete(ticket, quiz) else None

    def generate_again(self) -> None:
        self.quiz = None
        self.error = None

    def start_practice(self, on_exit: ExitCallback) -> SessionHost:
        return practice_host(
            self._require_quiz(), on_exit, pass_threshold=self._pass_threshold
        )

    def open_preview(self, on_close: ExitCallback) -> SessionHost:
        return preview_host(
            self._require_quiz(), on_close, pass_threshold=self._pass_threshold
        )

    def _require_quiz(self) -> QuizSet:
        if self.quiz is None:
            raise RuntimeError("No quiz has been generated yet")
        return self.quiz
