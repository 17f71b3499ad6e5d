"""Quiz session controller and the Rich console loop that drives it.

`QuizSessionController` is a small finite-state machine: a question is
answered by selecting an option and checking it, then the session advances
to the next question or completes after the last one. Invalid transitions
are rejected by returning ``False`` so UI code can bind buttons directly to
the controller without guarding every call.

`run_quiz_session` renders a controller with Rich, reads commands from an
input provider and returns the final `SessionOutcome`. The loop is kept
separate from the state machine so hosts can reuse the controller from any
front end.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Literal, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..generation.models import QuizQuestion, QuizSet

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .hosts import SessionHost

InputProvider = Callable[[], str]
DEFAULT_PASS_THRESHOLD = 70


class SessionPhase(str, Enum):
    AWAITING_SELECTION = "awaiting_selection"
    ANSWER_CHECKED = "answer_checked"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SessionState:
    """Read-only snapshot of a controller."""

    current_index: int
    selected_answer: Optional[str]
    is_checked: bool
    score: int
    total: int
    phase: SessionPhase


@dataclass(frozen=True)
class SessionOutcome:
    """Result of a session, complete or abandoned."""

    score: int
    total: int
    completed: bool
    percentage: Optional[int]
    passed: Optional[bool]
    exit_target: Optional[str] = None


def score_percentage(score: int, total: int) -> int:
    """Percentage of correct answers, rounded half up."""
    if total <= 0:
        return 0
    return int(math.floor(score * 100 / total + 0.5))


class QuizSessionController:
    """Deliver a quiz one question at a time and keep the score."""

    def __init__(
        self,
        quiz: QuizSet,
        *,
        pass_threshold: int = DEFAULT_PASS_THRESHOLD,
    ) -> None:
        self._quiz = quiz
        self._pass_threshold = pass_threshold
        self.reset()

    def reset(self) -> None:
        """Start over from the first question with a zero score."""
        self._index = 0
        self._selected: Optional[str] = None
        self._score = 0
        self._phase = SessionPhase.AWAITING_SELECTION

    @property
    def quiz(self) -> QuizSet:
        return self._quiz

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_question(self) -> QuizQuestion:
        return self._quiz[self._index]

    @property
    def selected_answer(self) -> Optional[str]:
        return self._selected

    @property
    def is_checked(self) -> bool:
        return self._phase is SessionPhase.ANSWER_CHECKED

    @property
    def is_completed(self) -> bool:
        return self._phase is SessionPhase.COMPLETED

    @property
    def score(self) -> int:
        return self._score

    @property
    def total(self) -> int:
        return len(self._quiz)

    @property
    def pass_threshold(self) -> int:
        return self._pass_threshold

    @property
    def last_answer_correct(self) -> Optional[bool]:
        """Whether the checked answer was right; ``None`` until checked."""
        if self._phase is not SessionPhase.ANSWER_CHECKED:
            return None
        return self.current_question.is_correct(self._selected)

    @property
    def percentage(self) -> Optional[int]:
        if not self.is_completed:
            return None
        return score_percentage(self._score, self.total)

    @property
    def passed(self) -> Optional[bool]:
        percentage = self.percentage
        if percentage is None:
            return None
        return percentage >= self._pass_threshold

    def state(self) -> SessionState:
        return SessionState(
            current_index=self._index,
            selected_answer=self._selected,
            is_checked=self.is_checked,
            score=self._score,
            total=self.total,
            phase=self._phase,
        )

    def outcome(self, exit_target: Optional[str] = None) -> SessionOutcome:
        return SessionOutcome(
            score=self._score,
            total=self.total,
            completed=self.is_completed,
            percentage=self.percentage,
            passed=self.passed,
            exit_target=exit_target,
        )

    def select_answer(self, option: str) -> bool:
        if self._phase is not SessionPhase.AWAITING_SELECTION:
            return False
        if option not in self.current_question.options:
            return False
        self._selected = option
        return True

    def check_answer(self) -> bool:
        if self._phase is not SessionPhase.AWAITING_SELECTION:
            return False
        if self._selected is None:
            return False
        self._phase = SessionPhase.ANSWER_CHECKED
        if self.current_question.is_correct(self._selected):
            self._score += 1
        return True

    def advance(self) -> bool:
        if self._phase is not SessionPhase.ANSWER_CHECKED:
            return False
        if self._index + 1 < self.total:
            self._index += 1
            self._selected = None
            self._phase = SessionPhase.AWAITING_SELECTION
        else:
            self._phase = SessionPhase.COMPLETED
        return True


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["select", "check", "next", "exit", "restart"]
    choice: Optional[int] = None


def parse_session_command(raw: Optional[str]) -> Optional[SessionCommand]:
    """Parse raw user input into a structured command."""

    if raw is None:
        return None
    text = raw.strip().lower()
    if not text:
        return None
    if text.isdigit():
        return SessionCommand("select", int(text))
    if text in {"v", "c", "check", "verificar"}:
        return SessionCommand("check")
    if text in {"n", "next", "proximo", "próximo"}:
        return SessionCommand("next")
    if text in {"q", "quit", "exit", "voltar", "back"}:
        return SessionCommand("exit")
    if text in {"r", "restart", "repetir"}:
        return SessionCommand("restart")
    return None


def run_quiz_session(
    host: "SessionHost",
    console: Console,
    input_provider: InputProvider,
) -> SessionOutcome:
    """Run an interactive session for ``host`` until it exits."""

    controller = host.controller
    while True:
        _render(console, host)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Sessão interrompida.[/]")
            return controller.outcome()
        command = parse_session_command(raw)
        if command is None:
            console.print("[red]Comando não reconhecido.[/]")
            continue
        outcome = _apply_command(command, host, console)
        if outcome is not None:
            return outcome


def _apply_command(
    command: SessionCommand,
    host: "SessionHost",
    console: Console,
) -> Optional[SessionOutcome]:
    controller = host.controller
    if command.type == "exit":
        if host.exit():
            return controller.outcome(host.exit_target)
        console.print("[red]Termine o quiz antes de sair.[/]")
        return None
    if command.type == "restart":
        if not controller.is_completed:
            console.print("[red]O quiz ainda não terminou.[/]")
            return None
        controller.reset()
        return None
    if controller.is_completed:
        console.print("[dim]Quiz concluído. Use 'q' para sair.[/]")
        return None
    if command.type == "select" and command.choice is not None:
        options = controller.current_question.options
        position = command.choice - 1
        if not 0 <= position < len(options):
            console.print(
                f"[red]'{command.choice}' não é uma opção válida.[/red]"
            )
            return None
        if not controller.select_answer(options[position]):
            console.print("[red]A resposta já foi verificada.[/red]")
        return None
    if command.type == "check":
        if not controller.check_answer():
            console.print("[red]Selecione uma opção primeiro.[/red]")
        return None
    if command.type == "next":
        if not controller.advance():
            console.print("[red]Verifique a resposta antes de avançar.[/red]")
    return None


def _render(console: Console, host: "SessionHost") -> None:
    controller = host.controller
    if controller.is_completed:
        _render_completed(console, host)
        return
    question = controller.current_question
    header = Text.assemble(
        (f"Pergunta {controller.current_index + 1}", "bold cyan"),
        (f" de {controller.total}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.question, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Opção")
    checked = controller.is_checked
    for number, option in enumerate(question.options, start=1):
        text = Text(option)
        if checked and option == question.answer:
            text.stylize("bold green")
        elif checked and option == controller.selected_answer:
            text.stylize("bold red")
        elif option == controller.selected_answer:
            text.stylize("bold blue")
        table.add_row(str(number), text)
    console.print(table)

    if checked:
        if controller.last_answer_correct:
            console.print(Panel("Resposta Correta!", border_style="green"))
        else:
            console.print(
                Panel(
                    f'Incorreto. A resposta certa é: "{question.answer}"',
                    border_style="red",
                )
            )
        hint = "n (próximo)"
    else:
        hint = "número da opção, v (verificar)"
    if host.allow_manual_exit:
        hint += ", q (voltar)"
    console.print(Text(f"Comandos: {hint}", style="dim"))


def _render_completed(console: Console, host: "SessionHost") -> None:
    controller = host.controller
    passed = bool(controller.passed)
    title = "Parabéns!" if passed else "Tente Novamente"
    body = Table(show_header=False, box=box.MINIMAL_DOUBLE_HEAD)
    body.add_column("Métrica", style="bold")
    body.add_column("Valor", justify="right")
    body.add_row("Pontuação", f"{controller.score} / {controller.total}")
    body.add_row("Percentagem", f"{controller.percentage}%")
    body.add_row("Resultado", "Aprovado" if passed else "Reprovado")
    console.print()
    console.print(
        Panel(
            body,
            title=f"Quiz Concluído: {title}",
            border_style="green" if passed else "red",
        )
    )
    console.print(Text("Comandos: q (sair), r (repetir)", style="dim"))
