from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from ..core.errors import AlreadyInitialized, NotFound
from ..core.models import RegistryHandle, RegistrySnapshot
from ..core.registry import DOWNVOTE, UPVOTE

logger = logging.getLogger(__name__)


class StoreLike(Protocol):
    def initialize(self, key: str, initiator: str) -> RegistryHandle: ...

    def append(self, key: str, link: str, submitter: str) -> int: ...

    def vote(self, key: str, index: int, delta: int) -> int: ...

    def read(self, key: str) -> RegistrySnapshot: ...


class ClientState(str, Enum):
    UNKNOWN = "unknown"
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class _Uninitialized:
    """Marker returned by `current_view()` before any successful read."""

    _instance: "_Uninitialized | None" = None

    def __new__(cls) -> "_Uninitialized":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNINITIALIZED"


UNINITIALIZED = _Uninitialized()


class RegistryClient:
    """Caller-side facade for one registry.

    Works against anything with the store operations: an in-process
    `RegistryStore` or a `RemoteRegistryStore`. The client keeps a private cache
    of the last snapshot it read and refreshes it after every successful
    mutation. The cache is a convenience for rendering, never the source of truth.

    Errors from the store are passed through unchanged; the only one absorbed is
    `AlreadyInitialized` inside `ensure_initialized()`.
    """

    def __init__(self, store: StoreLike, key: str, identity: str) -> None:
        self.store = store
        self.key = key
        self.identity = identity
        self._view: RegistrySnapshot | None = None
        self._state = ClientState.UNKNOWN

    @property
    def state(self) -> ClientState:
        return self._state

    def refresh(self) -> RegistrySnapshot | _Uninitialized:
        """Read the registry into the local cache.

        Before initialization a `NotFound` moves the client to `UNINITIALIZED`
        and returns the marker. Once initialized, `NotFound` is raised instead.
        """

        try:
            snapshot = self.store.read(self.key)
        except NotFound:
            if self._state is ClientState.INITIALIZED:
                raise
            self._state = ClientState.UNINITIALIZED
            return UNINITIALIZED
        self._view = snapshot
        self._state = ClientState.INITIALIZED
        return snapshot

    def current_view(self) -> RegistrySnapshot | _Uninitialized:
        if self._view is None:
            return UNINITIALIZED
        return self._view

    def ensure_initialized(self) -> RegistrySnapshot:
        try:
            self.store.initialize(self.key, self.identity)
            logger.info("Initialized registry %r as %s", self.key, self.identity)
        except AlreadyInitialized:
            logger.debug("Registry %r was already initialized", self.key)
        view = self.refresh()
        if not isinstance(view, RegistrySnapshot):
            raise NotFound(f"Registry '{self.key}' is not readable after initialization")
        return view

    def submit(self, link: str) -> int:
        index = self.store.append(self.key, link, self.identity)
        self.refresh()
        return index

    def upvote(self, index: int) -> int:
        score = self.store.vote(self.key, index, UPVOTE)
        self.refresh()
        return score

    def downvote(self, index: int) -> int:
        score = self.store.vote(self.key, index, DOWNVOTE)
        self.refresh()
        return score
