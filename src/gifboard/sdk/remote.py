from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..api.routes import IDENTITY_HEADER
from ..api.serializers import snapshot_from_json
from ..core.errors import (
    AlreadyInitialized,
    ERROR_KINDS,
    InvalidArgument,
    NotFound,
    RegistryError,
    Unavailable,
)
from ..core.models import RegistryHandle, RegistrySnapshot, validate_index, validate_key
from ..core.registry import DOWNVOTE, UPVOTE
from .client import RegistryClient

logger = logging.getLogger(__name__)

_STATUS_FALLBACK: dict[int, type[RegistryError]] = {
    400: InvalidArgument,
    404: NotFound,
    409: AlreadyInitialized,
    422: InvalidArgument,
    502: Unavailable,
    503: Unavailable,
    504: Unavailable,
}


def _error_from_response(res: httpx.Response) -> RegistryError:
    kind = None
    detail = res.text
    try:
        data = res.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        kind = data.get("error")
        detail = str(data.get("detail") or detail)
    cls = ERROR_KINDS.get(str(kind)) if kind else None
    if cls is None:
        cls = _STATUS_FALLBACK.get(res.status_code, RegistryError)
    return cls(f"{res.status_code} {detail}")


class RemoteRegistryStore:
    """HTTP implementation of the registry store operations.

    Talks to a running gifboard server and raises the same error classes as the
    in-process `RegistryStore`, so a `RegistryClient` cannot tell them apart.

    Contract:
    - POST /api/registries/{key}/initialize                (identity header)
    - POST /api/registries/{key}/entries   {"link": ...}   (identity header)
    - POST /api/registries/{key}/entries/{i}/upvote|downvote
    - GET  /api/registries/{key}

    Pass `http_client` to reuse an existing `httpx.Client` (tests hand in
    FastAPI's `TestClient`); otherwise a short-lived client is opened per call.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        *,
        timeout_s: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = float(timeout_s)
        self._http_client = http_client

    def _send(self, client: httpx.Client, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return client.request(method, path, timeout=self.timeout_s, **kwargs)
        except httpx.TimeoutException as ex:
            raise Unavailable(f"{method} {path} timed out after {self.timeout_s}s", timed_out=True) from ex
        except httpx.TransportError as ex:
            raise Unavailable(f"{method} {path} failed: {ex}") from ex

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        if self._http_client is not None:
            res = self._send(self._http_client, method, path, **kwargs)
        else:
            with httpx.Client(base_url=self.base_url, timeout=self.timeout_s) as client:
                res = self._send(client, method, path, **kwargs)

        if res.status_code >= 400:
            err = _error_from_response(res)
            logger.debug("%s %s -> %s", method, path, err.kind)
            raise err
        return res.json()

    @staticmethod
    def _path(key: str) -> str:
        return f"/api/registries/{quote(validate_key(key), safe='')}"

    def initialize(self, key: str, initiator: str) -> RegistryHandle:
        data = self._request("POST", f"{self._path(key)}/initialize", headers={IDENTITY_HEADER: str(initiator)})
        return RegistryHandle(key=str(data["key"]), owner=str(data["owner"]), created_at=float(data["createdAt"]))

    def append(self, key: str, link: str, submitter: str) -> int:
        data = self._request(
            "POST",
            f"{self._path(key)}/entries",
            json={"link": link},
            headers={IDENTITY_HEADER: str(submitter)},
        )
        return int(data["index"])

    def vote(self, key: str, index: int, delta: int) -> int:
        if isinstance(delta, bool):
            raise InvalidArgument(f"delta must be +1 or -1, got {delta!r}")
        if delta == UPVOTE:
            action = "upvote"
        elif delta == DOWNVOTE:
            action = "downvote"
        else:
            raise InvalidArgument(f"delta must be +1 or -1, got {delta!r}")
        data = self._request("POST", f"{self._path(key)}/entries/{validate_index(index)}/{action}")
        return int(data["score"])

    def upvote(self, key: str, index: int) -> int:
        return self.vote(key, index, UPVOTE)

    def downvote(self, key: str, index: int) -> int:
        return self.vote(key, index, DOWNVOTE)

    def read(self, key: str) -> RegistrySnapshot:
        return snapshot_from_json(self._request("GET", self._path(key)))

    def keys(self) -> list[str]:
        return [str(k) for k in self._request("GET", "/api/registries")]

    def client(self, key: str, identity: str) -> RegistryClient:
        return RegistryClient(self, key, identity)
