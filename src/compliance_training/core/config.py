"""TOML configuration for the generation gateway, quizzes and logging.

Settings are resolved from an explicit path, the ``COMPLIANCE_TRAINING_CONFIG``
environment variable or ``./training.toml``, in that order. Every key is
optional; values missing from the file keep their built-in defaults, while
unknown keys are rejected so typos do not go unnoticed.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

try:  # Python >= 3.11 ships ``tomllib`` in the stdlib.
    import tomllib
except ModuleNotFoundError as exc:  # pragma: no cover - interpreter guard
    raise RuntimeError("Python 3.11+ is required for tomllib support.") from exc

__all__ = [
    "CONFIG_FILENAME",
    "CONFIG_PATH_ENV",
    "HOME_ENV",
    "AISettings",
    "ConfigError",
    "LoggingSettings",
    "QuizSettings",
    "TrainingConfig",
    "default_config",
    "find_config_path",
    "load_config",
    "merge_defaults",
    "read_template",
    "write_template",
]


CONFIG_FILENAME = "training.toml"
CONFIG_PATH_ENV = "COMPLIANCE_TRAINING_CONFIG"
HOME_ENV = "COMPLIANCE_TRAINING_HOME"


class ConfigError(RuntimeError):
    """Raised when configuration IO or validation fails."""


@dataclass(frozen=True)
class AISettings:
    model: str
    summary_model: str
    evaluation_model: str
    temperature: float
    max_tokens: int
    request_timeout_seconds: float


@dataclass(frozen=True)
class QuizSettings:
    requested_count: int
    pass_threshold: int
    domain_hint: Optional[str]


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    verbose: bool
    log_dir: Path


@dataclass(frozen=True)
class TrainingConfig:
    ai: AISettings
    quiz: QuizSettings
    logging: LoggingSettings
    source: Optional[Path] = None


_DEFAULTS: Dict[str, Any] = {
    "ai": {
        "model": "gpt-4o-mini",
        "summary_model": "gpt-4o-mini",
        "evaluation_model": "gpt-4o",
        "temperature": 0.2,
        "max_tokens": 1200,
        "request_timeout_seconds": 30,
    },
    "quiz": {
        "requested_count": 3,
        "pass_threshold": 70,
        "domain_hint": "",
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
        "log_dir": "",
    },
}


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Recursively merge ``override`` into ``base`` enforcing known keys."""

    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise ConfigError(f"Unknown configuration key '{dotted}'.")
        if isinstance(base[key], MutableMapping):
            if not isinstance(value, Mapping):
                raise ConfigError(
                    "Expected table for '{0}', found {1}.".format(
                        dotted, type(value).__name__
                    )
                )
            merge_defaults(base[key], value, path=f"{dotted}.")
            continue
        base[key] = value


def find_config_path(explicit: Optional[str | Path] = None) -> Optional[Path]:
    """Return the config file to load, or ``None`` to use the defaults."""

    if explicit:
        path = Path(explicit).expanduser().resolve()
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        return path
    env_value = os.getenv(CONFIG_PATH_ENV)
    if env_value:
        path = Path(env_value).expanduser().resolve()
        if not path.exists():
            raise ConfigError(
                f"{CONFIG_PATH_ENV} points to a missing file: {path}"
            )
        return path
    cwd_candidate = Path.cwd() / CONFIG_FILENAME
    if cwd_candidate.exists():
        return cwd_candidate.resolve()
    return None


def load_config(path: Optional[str | Path] = None) -> TrainingConfig:
    """Load, merge and validate the training configuration."""

    resolved = find_config_path(path)
    tree = copy.deepcopy(_DEFAULTS)
    if resolved is not None:
        merge_defaults(tree, _read_toml(resolved))
    return _build_config(tree, source=resolved)


def default_config() -> TrainingConfig:
    return _build_config(copy.deepcopy(_DEFAULTS), source=None)


def read_template() -> str:
    """Return the packaged ``training.toml`` template."""

    resource = resources.files("compliance_training.core").joinpath(
        CONFIG_FILENAME
    )
    return resource.read_text(encoding="utf-8")


def write_template(path: Path, *, overwrite: bool = False) -> Path:
    """Write the packaged template to ``path``."""

    if path.exists() and not overwrite:
        raise ConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(read_template(), encoding="utf-8")
    return path


def _read_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse config TOML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc


def _require_string(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string.")
    return value.strip()


def _require_positive_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"'{field}' must be a positive integer.")
    return value


def _require_number(
    value: Any, *, field: str, min_value: float, max_value: float
) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{field}' must be a number.")
    number = float(value)
    if not (min_value <= number <= max_value):
        raise ConfigError(
            f"'{field}' must be between {min_value} and {max_value}."
        )
    return number


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{field}' must be a boolean.")
    return value


def _build_ai(section: Mapping[str, Any]) -> AISettings:
    timeout = _require_number(
        section["request_timeout_seconds"],
        field="ai.request_timeout_seconds",
        min_value=1,
        max_value=600,
    )
    return AISettings(
        model=_require_string(section["model"], field="ai.model"),
        summary_model=_require_string(
            section["summary_model"], field="ai.summary_model"
        ),
        evaluation_model=_require_string(
            section["evaluation_model"], field="ai.evaluation_model"
        ),
        temperature=_require_number(
            section["temperature"],
            field="ai.temperature",
            min_value=0.0,
            max_value=2.0,
        ),
        max_tokens=_require_positive_int(
            section["max_tokens"], field="ai.max_tokens"
        ),
        request_timeout_seconds=timeout,
    )


def _build_quiz(section: Mapping[str, Any]) -> QuizSettings:
    threshold = section["pass_threshold"]
    if (
        isinstance(threshold, bool)
        or not isinstance(threshold, int)
        or not 0 <= threshold <= 100
    ):
        raise ConfigError("'quiz.pass_threshold' must be between 0 and 100.")
    hint = section["domain_hint"]
    if not isinstance(hint, str):
        raise ConfigError("'quiz.domain_hint' must be a string.")
    return QuizSettings(
        requested_count=_require_positive_int(
            section["requested_count"], field="quiz.requested_count"
        ),
        pass_threshold=threshold,
        domain_hint=hint.strip() or None,
    )


def _build_logging(section: Mapping[str, Any]) -> LoggingSettings:
    level = _require_string(section["level"], field="logging.level").upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigError(
            "logging.level must be one of "
            "DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    raw_dir = section["log_dir"]
    if not isinstance(raw_dir, str):
        raise ConfigError("'logging.log_dir' must be a string.")
    log_dir = (
        Path(raw_dir).expanduser() if raw_dir.strip() else _default_log_dir()
    )
    return LoggingSettings(
        level=level,
        verbose=_require_bool(section["verbose"], field="logging.verbose"),
        log_dir=log_dir,
    )


def _default_log_dir() -> Path:
    home = os.getenv(HOME_ENV)
    base = Path(home).expanduser() if home else Path.home() / ".compliance"
    return base / "logs"


def _build_config(
    tree: Mapping[str, Any], *, source: Optional[Path]
) -> TrainingConfig:
    return TrainingConfig(
        ai=_build_ai(tree["ai"]),
        quiz=_build_quiz(tree["quiz"]),
        logging=_build_logging(tree["logging"]),
        source=source,
    )
