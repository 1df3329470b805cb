from __future__ import annotations

from .client import UNINITIALIZED, ClientState, RegistryClient
from .remote import RemoteRegistryStore

__all__ = [
    "RegistryClient",
    "ClientState",
    "UNINITIALIZED",
    "RemoteRegistryStore",
]
