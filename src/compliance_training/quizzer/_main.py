import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.config import ConfigError, TrainingConfig
from ..core.runtime import bootstrap
from ..generation.gateway import GenerationGateway
from ..generation.models import Provenance, QuizSet, questions_from_records
from .hosts import QuizWorkbench, SessionHost, delivery_host, preview_host
from .session import run_quiz_session

logger = logging.getLogger(__name__)

Handler = Callable[[argparse.Namespace, TrainingConfig], int]


def _build_gateway(config: TrainingConfig) -> GenerationGateway:
    return GenerationGateway.from_config(config)


def _make_console() -> Console:
    return Console()


def _make_input(console: Console) -> Callable[[], str]:
    return lambda: console.input("[bold]> [/]")


def _read_source(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    if args.file == "-":
        return sys.stdin.read()
    if args.file:
        return Path(args.file).expanduser().read_text(encoding="utf-8")
    return ""


def _load_quiz_file(path: str) -> QuizSet:
    """Load an authored quiz saved with ``quiz generate --out``."""
    raw = json.loads(Path(path).expanduser().read_text(encoding="utf-8"))
    records = raw.get("quiz") if isinstance(raw, dict) else raw
    if not isinstance(records, list) or not records:
        raise ValueError("quiz file must hold a non-empty list of questions")
    try:
        questions = questions_from_records(records)
    except (KeyError, TypeError) as exc:
        raise ValueError(f"malformed question in quiz file: {exc}") from exc
    return QuizSet(questions, Provenance.PROVIDER)


def _print_quiz(console: Console, quiz: QuizSet) -> None:
    table = Table(title="Quiz Gerado", expand=True, show_lines=True)
    table.add_column("#", justify="right")
    table.add_column("Pergunta", overflow="fold")
    table.add_column("Opções", overflow="fold")
    for number, question in enumerate(quiz, start=1):
        options = "\n".join(
            f"{'✓' if option == question.answer else '·'} {option}"
            for option in question.options
        )
        table.add_row(str(number), question.question, options)
    console.print(table)


def _generate(
    args: argparse.Namespace, config: TrainingConfig, console: Console
) -> Optional[QuizWorkbench]:
    """Run one generation; return the workbench holding the quiz."""
    workbench = QuizWorkbench(
        _build_gateway(config),
        requested_count=args.count or config.quiz.requested_count,
        domain_hint=args.domain or config.quiz.domain_hint,
        pass_threshold=config.quiz.pass_threshold,
    )
    try:
        source = _read_source(args)
    except OSError as exc:
        reason = escape(str(exc))
        console.print(f"[red]Não foi possível ler o ficheiro: {reason}[/]")
        return None
    with console.status("A gerar quiz..."):
        quiz = workbench.generate(source)
    if quiz is None:
        console.print(f"[red]{workbench.error}[/]")
        return None
    logger.info(
        "Quiz ready",
        extra={
            "event": "quiz_ready",
            "questions": len(quiz),
            "provenance": quiz.provenance.value,
        },
    )
    return workbench


def _cmd_generate(args: argparse.Namespace, config: TrainingConfig) -> int:
    console = _make_console()
    workbench = _generate(args, config, console)
    if workbench is None or workbench.quiz is None:
        return 1
    records = {"quiz": workbench.quiz.to_records()}
    if args.json:
        console.print_json(data=records)
    else:
        _print_quiz(console, workbench.quiz)
    if args.out:
        out = Path(args.out).expanduser()
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(
            json.dumps(records, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        console.print(f"Quiz guardado em {out}")
    return 0


def _cmd_practice(args: argparse.Namespace, config: TrainingConfig) -> int:
    console = _make_console()
    workbench = _generate(args, config, console)
    if workbench is None:
        return 1
    exits: List[str] = []
    return _run_host(workbench.start_practice(exits.append), console, exits)


def _cmd_take(args: argparse.Namespace, config: TrainingConfig) -> int:
    console = _make_console()
    try:
        quiz = _load_quiz_file(args.quiz)
    except (OSError, ValueError) as exc:
        reason = escape(str(exc))
        console.print(
            f"[red]Erro: Quiz não encontrado ou inválido ({reason}).[/]"
        )
        return 1
    exits: List[str] = []
    factory = preview_host if args.preview else delivery_host
    host = factory(
        quiz, exits.append, pass_threshold=config.quiz.pass_threshold
    )
    return _run_host(host, console, exits)


def _run_host(host: SessionHost, console: Console, exits: List[str]) -> int:
    """Run ``host`` interactively; exit code 0 passed, 3 failed, 1 left."""
    outcome = run_quiz_session(host, console, _make_input(console))
    logger.info(
        "Quiz session finished",
        extra={
            "event": "session_finished",
            "host": host.kind.value,
            "score": outcome.score,
            "total": outcome.total,
            "completed": outcome.completed,
            "passed": outcome.passed,
            "exit_target": exits[-1] if exits else None,
        },
    )
    if not outcome.completed:
        return 1
    return 0 if outcome.passed else 3


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return number


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--text", help="Source text to build the quiz from")
    source.add_argument(
        "--file", help="Read source text from a file ('-' for stdin)"
    )
    parser.add_argument(
        "--count",
        type=_positive_int,
        help="Questions to request (defaults to quiz.requested_count)",
    )
    parser.add_argument(
        "--domain", help="Topic of the offline fallback question set"
    )


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="compliance quiz",
        description="Generate compliance quizzes from text and take them",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--config", help="Path to training.toml")
    p.add_argument("--verbose", action="store_true", help="Log to stderr")
    sub = p.add_subparsers(dest="command", required=True)

    sp_gen = sub.add_parser("generate", help="Generate a quiz and print it")
    _add_source_args(sp_gen)
    sp_gen.add_argument("--json", action="store_true", help="Print JSON")
    sp_gen.add_argument("--out", help="Save the quiz as JSON")

    sp_practice = sub.add_parser(
        "practice", help="Generate a quiz and answer it right away"
    )
    _add_source_args(sp_practice)

    sp_take = sub.add_parser("take", help="Take a saved quiz")
    sp_take.add_argument("quiz", help="Quiz JSON written by 'generate --out'")
    sp_take.add_argument(
        "--preview",
        action="store_true",
        help="Author preview instead of a delivered quiz",
    )
    return p


_HANDLERS: dict[str, Handler] = {
    "generate": _cmd_generate,
    "practice": _cmd_practice,
    "take": _cmd_take,
}


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        config = bootstrap(args.config, verbose=args.verbose)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2)
    raise SystemExit(_HANDLERS[args.command](args, config))
