from __future__ import annotations

import contextlib
import logging
import socket
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import uvicorn

from ..config import load_settings, normalize_base_url
from ..core.registry import REGISTRY, RegistryStore
from ..sdk.client import RegistryClient
from ..sdk.remote import RemoteRegistryStore
from .app import create_app

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GifboardServer:
    host: str
    port: int
    url: str
    store: RegistryStore = field(default=REGISTRY, repr=False, compare=False)

    def client(self, key: str, identity: str) -> RegistryClient:
        """Client bound to this server's store, bypassing HTTP."""
        return RegistryClient(self.store, key, identity)

    def remote(self, *, timeout_s: float = 10.0) -> RemoteRegistryStore:
        return RemoteRegistryStore(self.url.rstrip("/"), timeout_s=timeout_s)


def _find_free_port(host: str) -> int:
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return int(s.getsockname()[1])


def _is_server_alive(base_url: str, *, timeout_s: float = 0.2) -> bool:
    """Best-effort probe to determine if a gifboard server is reachable."""

    try:
        with httpx.Client(base_url=base_url, timeout=timeout_s) as client:
            r = client.get("/healthz")
            if r.status_code != 200:
                return False
            data = r.json()
            return bool(data.get("ok"))
    except (httpx.HTTPError, ValueError):
        return False


def _wait_until_alive(base_url: str, *, deadline_s: float) -> bool:
    deadline = time.monotonic() + deadline_s
    while time.monotonic() < deadline:
        if _is_server_alive(base_url, timeout_s=0.2):
            return True
        time.sleep(0.02)
    return False


def run(
    *,
    host: str = "127.0.0.1",
    port: int = 0,
    state_dir: str | Path | None = None,
    log_level: str | None = None,
    access_log: bool = False,
    new_server: bool = False,
    connect_timeout_s: float = 0.2,
    startup_timeout_s: float = 5.0,
) -> GifboardServer | RemoteRegistryStore:
    """Start a gifboard server with a single Python call, or attach to one.

    Behavior:
    - If GIFBOARD_URL is set and reachable, attach to it and return a
      `RemoteRegistryStore` unless `new_server=True`.
    - Otherwise, if `port != 0` and a server already answers at http://{host}:{port},
      attach to it the same way.
    - Otherwise start uvicorn in a daemon thread and return a `GifboardServer`.

    `port=0` means "pick a free port", so there's nothing to attach to.
    """

    settings = load_settings()
    env_url = settings.url
    if state_dir is None:
        state_dir = settings.state_dir
    if log_level is None:
        log_level = settings.log_level

    # 1) Try attaching to an explicitly provided server.
    if env_url and not new_server:
        if _is_server_alive(env_url, timeout_s=connect_timeout_s):
            logger.info("Attaching to gifboard server at %s", env_url)
            return RemoteRegistryStore(env_url, timeout_s=settings.timeout_s)

    # 2) Try attaching to host/port if they are explicitly chosen.
    if port != 0 and not new_server:
        default_url = normalize_base_url(f"http://{host}:{port}")
        if _is_server_alive(default_url, timeout_s=connect_timeout_s):
            logger.info("Attaching to gifboard server at %s", default_url)
            return RemoteRegistryStore(default_url, timeout_s=settings.timeout_s)

    # 3) Start a fresh server.
    if port == 0:
        port = _find_free_port(host)

    store = RegistryStore.open(state_dir) if state_dir else REGISTRY
    app = create_app(store)

    config = uvicorn.Config(app, host=host, port=port, log_level=log_level, access_log=access_log)
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    url = f"http://{host}:{port}/"
    if not _wait_until_alive(url.rstrip("/"), deadline_s=startup_timeout_s):
        logger.warning("gifboard server at %s did not answer within %.1fs", url, startup_timeout_s)
    else:
        logger.info("gifboard server listening on %s (%s)", url, "durable" if store.durable else "in-memory")

    return GifboardServer(host=host, port=port, url=url, store=store)
