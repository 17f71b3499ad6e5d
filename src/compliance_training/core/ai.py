"""OpenAI client loader shared by the generation gateway."""

from __future__ import annotations

import os
from typing import Any, Optional

from dotenv import load_dotenv
from openai import OpenAI

__all__ = ["API_KEY_ENV", "load_client"]


API_KEY_ENV = "OPENAI_API_KEY"


def load_client(*, timeout: Optional[float] = None) -> Any:
    """Initialize an OpenAI client using environment-derived credentials.

    ``timeout`` bounds every request issued through the client, so a hung
    provider surfaces as an exception the gateway can route to fallback.
    """
    load_dotenv()
    api_key = os.getenv(API_KEY_ENV)
    if not api_key:
        raise RuntimeError(
            f"{API_KEY_ENV} not found in environment. Set it or add to .env"
        )
    kwargs: dict[str, Any] = {"api_key": api_key}
    if timeout is not None:
        kwargs["timeout"] = timeout
    return OpenAI(**kwargs)
