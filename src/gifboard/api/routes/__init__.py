from __future__ import annotations

from .registries import IDENTITY_HEADER, mount_registries_api

__all__ = ["IDENTITY_HEADER", "mount_registries_api"]
