from __future__ import annotations

from .app import app, create_app
from .server import GifboardServer, run

__all__ = ["app", "create_app", "GifboardServer", "run"]
