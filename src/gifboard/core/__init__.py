from __future__ import annotations

from .errors import (
    AlreadyInitialized,
    IndexOutOfRange,
    InvalidArgument,
    NotFound,
    RegistryError,
    Unavailable,
)
from .models import Entry, RegistryHandle, RegistryRecord, RegistrySnapshot
from .registry import REGISTRY, RegistryStore

__all__ = [
    "RegistryError",
    "AlreadyInitialized",
    "NotFound",
    "IndexOutOfRange",
    "InvalidArgument",
    "Unavailable",
    "Entry",
    "RegistryHandle",
    "RegistryRecord",
    "RegistrySnapshot",
    "RegistryStore",
    "REGISTRY",
]
