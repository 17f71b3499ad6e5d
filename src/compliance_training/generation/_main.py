"""``compliance summary``: risk and supplier-evaluation summaries."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from ..core.config import ConfigError, TrainingConfig
from ..core.runtime import bootstrap
from .entities import Entity, SupplierEvaluation
from .gateway import GenerationGateway


def _build_gateway(config: TrainingConfig) -> GenerationGateway:
    return GenerationGateway.from_config(config)


def _make_console() -> Console:
    return Console()


def _read_json(path: str) -> Any:
    if path == "-":
        return json.load(sys.stdin)
    return json.loads(Path(path).expanduser().read_text(encoding="utf-8"))


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="compliance summary",
        description="Summarize entity risk or a supplier evaluation",
    )
    p.add_argument("--config", help="Path to training.toml")
    p.add_argument("--verbose", action="store_true", help="Log to stderr")
    p.add_argument(
        "--raw", action="store_true", help="Print Markdown without rendering"
    )
    sub = p.add_subparsers(dest="kind", required=True)
    sp_risk = sub.add_parser("risk", help="Risk summary for an entity")
    sp_risk.add_argument("path", help="Entity JSON file ('-' for stdin)")
    sp_eval = sub.add_parser(
        "evaluation", help="Summary of a supplier due-diligence evaluation"
    )
    sp_eval.add_argument("path", help="Evaluation JSON file ('-' for stdin)")
    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_arg_parser().parse_args(argv)
    try:
        config = bootstrap(args.config, verbose=args.verbose)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2)

    console = _make_console()
    try:
        data = _read_json(args.path)
        subject = (
            Entity.from_dict(data)
            if args.kind == "risk"
            else SupplierEvaluation.from_dict(data)
        )
    except (OSError, ValueError, AttributeError, TypeError, KeyError) as exc:
        reason = escape(str(exc))
        console.print(f"[red]Error: could not read {args.path}: {reason}[/]")
        raise SystemExit(1)

    with console.status("A processar análise..."):
        summary = _build_gateway(config).generate_summary(subject)
    if args.raw:
        console.print(summary, markup=False, highlight=False)
    else:
        console.print(Markdown(summary))
    raise SystemExit(0)
