from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

# Ensure src/ is importable when the package is not installed
ROOT = TESTS_DIR.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from compliance_training.core.logging import reset_logger  # noqa: E402
from compliance_training.core.runtime import LOGGER_NAME  # noqa: E402
from fixtures import FakeChatClient  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[None]:
    """Keep tests away from real credentials, config files and log dirs."""

    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("COMPLIANCE_TRAINING_CONFIG", raising=False)
    monkeypatch.setenv("COMPLIANCE_TRAINING_HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    yield
    reset_logger(LOGGER_NAME)


@pytest.fixture
def fake_client() -> FakeChatClient:
    """A provider client with no queued responses."""

    return FakeChatClient()
