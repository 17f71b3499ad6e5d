"""Shared start-up for CLI commands: config plus logging."""

from __future__ import annotations

from typing import Optional

from .config import TrainingConfig, load_config
from .logging import configure_logger

__all__ = ["LOGGER_NAME", "bootstrap"]


LOGGER_NAME = "compliance_training"


def bootstrap(
    config_path: Optional[str] = None, *, verbose: bool = False
) -> TrainingConfig:
    """Load configuration and route package logs to the JSON log file.

    Raises :class:`~.config.ConfigError` when the config cannot be used.
    """
    config = load_config(config_path)
    configure_logger(
        LOGGER_NAME,
        log_dir=config.logging.log_dir,
        level=config.logging.level,
        verbose=verbose or config.logging.verbose,
        filename="compliance.log",
    )
    return config
