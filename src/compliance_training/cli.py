"""Unified ``compliance`` entry point.

``init`` is handled here; ``quiz`` and ``summary`` are imported on demand
from the module that owns their parser, so ``compliance --help`` does not
load the provider stack.
"""

from __future__ import annotations

import argparse
import sys
from importlib import import_module, metadata
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

from .core.config import CONFIG_FILENAME, ConfigError, write_template

COMMANDS: Dict[str, str] = {
    "init": f"Write a {CONFIG_FILENAME} configuration template.",
    "quiz": "Generate compliance quizzes from text and take them.",
    "summary": "Summarize entity risk or a supplier evaluation.",
}

_COMMAND_MODULES: Dict[str, str] = {
    "quiz": "compliance_training.quizzer._main",
    "summary": "compliance_training.generation._main",
}


def init_main(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="compliance init",
        description=f"Write a {CONFIG_FILENAME} template.",
    )
    parser.add_argument(
        "--path",
        default=CONFIG_FILENAME,
        help="Destination for the template",
    )
    parser.add_argument(
        "--force", action="store_true", help="Overwrite an existing file"
    )
    args = parser.parse_args(list(argv))
    target = Path(args.path).expanduser().resolve()
    try:
        write_template(target, overwrite=args.force)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Created template {target}")
    return 0


def format_usage() -> str:
    width = max(len(name) for name in COMMANDS)
    lines = [
        "Usage: compliance <command> [args...]",
        "",
        "Available commands:",
    ]
    lines.extend(
        f"  {name.ljust(width)}  {summary}"
        for name, summary in COMMANDS.items()
    )
    lines.append("")
    lines.append("Run `compliance <command> --help` for command options.")
    return "\n".join(lines)


def package_version() -> str:
    try:
        return metadata.version("compliance-training")
    except metadata.PackageNotFoundError:
        return "unknown"


def _command_main(name: str) -> Callable[[Sequence[str]], object]:
    if name == "init":
        return init_main
    return import_module(_COMMAND_MODULES[name]).main


def run_command(
    main_func: Callable[[Sequence[str]], object], argv: Sequence[str]
) -> int:
    """Call a command ``main`` and turn its ``SystemExit`` into a code."""
    try:
        result = main_func(list(argv))
    except SystemExit as exc:
        if exc.code is None:
            return 0
        if isinstance(exc.code, int):
            return exc.code
        print(exc.code, file=sys.stderr)
        return 1
    return result if isinstance(result, int) else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(format_usage())
        return 2

    head, tail = args[0], args[1:]
    if head in ("-h", "--help", "help"):
        print(format_usage())
        return 0
    if head in ("-V", "--version", "version"):
        print(package_version())
        return 0
    if head not in COMMANDS:
        print(f"Unknown command '{head}'.", file=sys.stderr)
        print(format_usage(), file=sys.stderr)
        return 2
    return run_command(_command_main(head), tail)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
