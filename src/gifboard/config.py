"""Runtime configuration.

Values come from environment variables and can be overridden by CLI flags or
keyword arguments:

    GIFBOARD_URL          base URL of a running server to attach to
    GIFBOARD_STATE_DIR    directory for durable registry files (unset = in-memory)
    GIFBOARD_DEFAULT_KEY  registry key used when none is given
    GIFBOARD_LOG_LEVEL    logging level for the server and CLI
    GIFBOARD_TIMEOUT_S    per-request timeout for remote calls
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_URL = "http://127.0.0.1:8000"
DEFAULT_KEY = "gifs"

# Levels both `logging` and uvicorn understand.
LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


@dataclass
class GifboardSettings:
    url: str = ""
    state_dir: str | None = None
    default_key: str = DEFAULT_KEY
    log_level: str = "info"
    timeout_s: float = 10.0


def normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        return ""
    # Allow passing just host:port.
    if "://" not in url:
        url = "http://" + url
    return url.rstrip("/")


def load_settings() -> GifboardSettings:
    timeout_raw = os.getenv("GIFBOARD_TIMEOUT_S", "").strip()
    try:
        timeout_s = float(timeout_raw) if timeout_raw else 10.0
    except ValueError:
        raise ValueError(f"GIFBOARD_TIMEOUT_S must be a number, got {timeout_raw!r}")
    if timeout_s <= 0:
        raise ValueError("GIFBOARD_TIMEOUT_S must be > 0")

    log_level = os.getenv("GIFBOARD_LOG_LEVEL", "").strip().lower() or "info"
    if log_level not in LOG_LEVELS:
        raise ValueError(f"GIFBOARD_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    return GifboardSettings(
        url=normalize_base_url(os.getenv("GIFBOARD_URL", "")),
        state_dir=os.getenv("GIFBOARD_STATE_DIR", "").strip() or None,
        default_key=os.getenv("GIFBOARD_DEFAULT_KEY", "").strip() or DEFAULT_KEY,
        log_level=log_level,
        timeout_s=timeout_s,
    )
