from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Header

from ...core.errors import InvalidArgument
from ...core.registry import DOWNVOTE, UPVOTE, RegistryStore
from ..serializers import handle_to_json, snapshot_to_json

IDENTITY_HEADER = "X-Gifboard-Identity"


def _require_identity(identity: str | None) -> str:
    ident = (identity or "").strip()
    if not ident:
        raise InvalidArgument(f"Missing header: {IDENTITY_HEADER}")
    return ident


def mount_registries_api(app: FastAPI, store: RegistryStore) -> None:
    """Mount the five registry operations plus a key listing.

    Store errors propagate untouched; the app-level handler turns them into
    `{"error": kind, "detail": ...}` responses.
    """

    @app.get("/api/registries")
    def list_registries() -> list[str]:
        return store.keys()

    @app.post("/api/registries/{key}/initialize")
    def initialize_registry(
        key: str,
        identity: str | None = Header(default=None, alias=IDENTITY_HEADER),
    ) -> dict[str, Any]:
        handle = store.initialize(key, _require_identity(identity))
        return {"ok": True, **handle_to_json(handle)}

    @app.get("/api/registries/{key}")
    def read_registry(key: str) -> dict[str, Any]:
        return snapshot_to_json(store.read(key))

    @app.post("/api/registries/{key}/entries")
    def append_entry(
        key: str,
        body: dict,
        identity: str | None = Header(default=None, alias=IDENTITY_HEADER),
    ) -> dict[str, Any]:
        link = body.get("link")
        if not isinstance(link, str):
            raise InvalidArgument("Field 'link' must be a string")
        index = store.append(key, link, _require_identity(identity))
        return {"ok": True, "index": int(index)}

    @app.post("/api/registries/{key}/entries/{index}/upvote")
    def upvote_entry(key: str, index: int) -> dict[str, Any]:
        score = store.vote(key, index, UPVOTE)
        return {"ok": True, "index": int(index), "score": int(score)}

    @app.post("/api/registries/{key}/entries/{index}/downvote")
    def downvote_entry(key: str, index: int) -> dict[str, Any]:
        score = store.vote(key, index, DOWNVOTE)
        return {"ok": True, "index": int(index), "score": int(score)}
