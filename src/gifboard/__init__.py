from __future__ import annotations

from .core.errors import (
    AlreadyInitialized,
    IndexOutOfRange,
    InvalidArgument,
    NotFound,
    RegistryError,
    Unavailable,
)
from .core.models import Entry, RegistryHandle, RegistrySnapshot
from .core.registry import RegistryStore
from .runtime.server import GifboardServer, run
from .sdk.client import UNINITIALIZED, ClientState, RegistryClient
from .sdk.remote import RemoteRegistryStore

__all__ = [
    "run",
    "GifboardServer",
    "RegistryStore",
    "RemoteRegistryStore",
    "RegistryClient",
    "ClientState",
    "UNINITIALIZED",
    "Entry",
    "RegistryHandle",
    "RegistrySnapshot",
    "RegistryError",
    "AlreadyInitialized",
    "NotFound",
    "IndexOutOfRange",
    "InvalidArgument",
    "Unavailable",
]
