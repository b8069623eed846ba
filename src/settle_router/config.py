# config.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
import os

from dotenv import load_dotenv

from .core.constants import ENV_PRODUCTION, ENV_QA

load_dotenv(Path.cwd() / ".env")


def _flag(raw: str | None, default: bool) -> bool:
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@lru_cache
def settings():
    env = os.getenv("SETTLE_ENV", ENV_QA)
    if env not in (ENV_PRODUCTION, ENV_QA):
        raise ValueError(f"SETTLE_ENV must be '{ENV_PRODUCTION}' or '{ENV_QA}', got {env!r}")
    return {
        "ENV": env,
        "PROTOCOL_VERSION": os.getenv("SETTLE_MINT_PROTOCOL_VERSION", "0.0.1"),
        "HTTP_TIMEOUT": float(os.getenv("SETTLE_HTTP_TIMEOUT", "10")),
        "LOG_LEVEL": os.getenv("SETTLE_LOG_LEVEL", "INFO"),
        # QA mints run self-signed certificates
        "VERIFY_TLS": _flag(os.getenv("SETTLE_VERIFY_TLS"), env == ENV_PRODUCTION),
    }
