"""Core shared helpers for compliance_training commands."""

from __future__ import annotations

from .ai import load_client
from .config import (
    AISettings,
    ConfigError,
    LoggingSettings,
    QuizSettings,
    TrainingConfig,
    default_config,
    load_config,
    write_template,
)
from .logging import JsonLogFormatter, configure_logger, reset_logger

__all__ = [
    "load_client",
    "AISettings",
    "ConfigError",
    "LoggingSettings",
    "QuizSettings",
    "TrainingConfig",
    "default_config",
    "load_config",
    "write_template",
    "configure_logger",
    "reset_logger",
    "JsonLogFormatter",
]
