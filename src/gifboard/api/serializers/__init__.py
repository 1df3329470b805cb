from __future__ import annotations

from .registries import (
    entry_to_item,
    error_to_json,
    handle_to_json,
    snapshot_from_json,
    snapshot_to_json,
)

__all__ = [
    "entry_to_item",
    "error_to_json",
    "handle_to_json",
    "snapshot_from_json",
    "snapshot_to_json",
]
