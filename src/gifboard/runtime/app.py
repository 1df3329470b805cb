from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI

from ..api import create_api_app
from ..config import load_settings
from ..core.registry import RegistryStore


def create_app(store: RegistryStore | None = None, *, state_dir: str | Path | None = None) -> FastAPI:
    """Create the full app.

    With `state_dir` a durable store is opened there; otherwise `store` (or the
    process-wide in-memory `REGISTRY`) backs the API.
    """

    if store is None and state_dir is not None:
        store = RegistryStore.open(state_dir)
    return create_api_app(store)


# Convenience for uvicorn: `uvicorn gifboard.runtime.app:app`
app = create_app(state_dir=load_settings().state_dir)
