from __future__ import annotations

from typing import Any

from ...core.errors import RegistryError
from ...core.models import Entry, RegistryHandle, RegistrySnapshot


def entry_to_item(index: int, entry: Entry) -> dict[str, Any]:
    return {
        "index": int(index),
        "gifLink": entry.link,
        "score": int(entry.score),
        "userAddress": entry.submitter,
    }


def snapshot_to_json(snapshot: RegistrySnapshot) -> dict[str, Any]:
    return {
        "key": snapshot.key,
        "owner": snapshot.owner,
        "totalCount": int(snapshot.total_count),
        "revision": int(snapshot.revision),
        "createdAt": float(snapshot.created_at),
        "entries": [entry_to_item(i, e) for i, e in enumerate(snapshot.entries)],
    }


def snapshot_from_json(data: dict[str, Any]) -> RegistrySnapshot:
    entries = tuple(
        Entry(link=str(item["gifLink"]), submitter=str(item["userAddress"]), score=int(item["score"]))
        for item in data.get("entries", [])
    )
    return RegistrySnapshot(
        key=str(data["key"]),
        owner=str(data["owner"]),
        entries=entries,
        total_count=int(data["totalCount"]),
        revision=int(data.get("revision", 0)),
        created_at=float(data.get("createdAt", 0.0)),
    )


def handle_to_json(handle: RegistryHandle) -> dict[str, Any]:
    return {"key": handle.key, "owner": handle.owner, "createdAt": float(handle.created_at)}


def error_to_json(err: RegistryError) -> dict[str, Any]:
    return {"error": err.kind, "detail": err.detail}
