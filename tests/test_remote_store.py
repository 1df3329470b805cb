from __future__ import annotations

import httpx
import pytest

from gifboard.api import create_api_app
from gifboard.core.errors import (
    AlreadyInitialized,
    IndexOutOfRange,
    InvalidArgument,
    NotFound,
    RegistryError,
    Unavailable,
)
from gifboard.core.registry import RegistryStore
from gifboard.sdk.remote import RemoteRegistryStore


def _remote(store: RegistryStore) -> RemoteRegistryStore:
    from fastapi.testclient import TestClient

    return RemoteRegistryStore("http://testserver", http_client=TestClient(create_api_app(store)))


def test_remote_store_round_trips_operations() -> None:
    backing = RegistryStore()
    remote = _remote(backing)

    handle = remote.initialize("gifs", "alice")
    assert handle.key == "gifs"
    assert handle.owner == "alice"

    assert remote.append("gifs", "https://example.com/a.gif", "bob") == 0
    assert remote.upvote("gifs", 0) == 1
    assert remote.downvote("gifs", 0) == 0
    assert remote.downvote("gifs", 0) == -1

    snap = remote.read("gifs")
    assert snap == backing.read("gifs")
    assert remote.keys() == ["gifs"]


def test_remote_store_raises_typed_errors() -> None:
    remote = _remote(RegistryStore())

    with pytest.raises(NotFound) as missing:
        remote.read("gifs")
    assert not isinstance(missing.value, IndexOutOfRange)

    remote.initialize("gifs", "alice")
    with pytest.raises(AlreadyInitialized):
        remote.initialize("gifs", "alice")
    with pytest.raises(InvalidArgument):
        remote.append("gifs", "", "alice")
    with pytest.raises(IndexOutOfRange):
        remote.upvote("gifs", 0)
    with pytest.raises(InvalidArgument):
        remote.vote("gifs", 0, 3)


def _mock_remote(handler) -> RemoteRegistryStore:  # noqa: ANN001
    http = httpx.Client(base_url="http://gifboard.test", transport=httpx.MockTransport(handler))
    return RemoteRegistryStore("http://gifboard.test", timeout_s=0.5, http_client=http)


def test_timeout_is_distinguishable_from_other_failures() -> None:
    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    def refused(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(Unavailable) as timed_out:
        _mock_remote(slow).read("gifs")
    assert timed_out.value.timed_out is True

    with pytest.raises(Unavailable) as down:
        _mock_remote(refused).read("gifs")
    assert down.value.timed_out is False


def test_error_mapping_falls_back_to_status_code() -> None:
    def plain(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/initialize"):
            return httpx.Response(409, text="conflict")
        if request.url.path.endswith("/upvote"):
            return httpx.Response(503, text="maintenance")
        return httpx.Response(500, text="boom")

    remote = _mock_remote(plain)

    with pytest.raises(AlreadyInitialized):
        remote.initialize("gifs", "alice")
    with pytest.raises(Unavailable):
        remote.upvote("gifs", 0)
    with pytest.raises(RegistryError) as other:
        remote.read("gifs")
    assert type(other.value) is RegistryError


@pytest.mark.parametrize("key", ["a/b", "..", ".", "  "])
def test_unroutable_keys_are_invalid_on_both_sides(key: str) -> None:
    sent: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return httpx.Response(404, json={"error": "NotFound", "detail": "unmatched route"})

    remote = _mock_remote(record)

    with pytest.raises(InvalidArgument):
        RegistryStore().initialize(key, "alice")
    with pytest.raises(InvalidArgument):
        remote.initialize(key, "alice")
    with pytest.raises(InvalidArgument):
        remote.read(key)
    assert sent == []


def test_remote_client_reports_bad_key_as_invalid_argument() -> None:
    remote = _remote(RegistryStore())

    with pytest.raises(InvalidArgument):
        remote.client("a/b", "alice").ensure_initialized()
    with pytest.raises(InvalidArgument):
        remote.client("..", "alice").ensure_initialized()


def test_remote_rejects_non_integer_index_before_sending() -> None:
    sent: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return httpx.Response(200, json={"ok": True, "index": 0, "score": 1})

    remote = _mock_remote(record)

    with pytest.raises(InvalidArgument):
        remote.upvote("gifs", 0.9)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgument):
        remote.downvote("gifs", "0")  # type: ignore[arg-type]
    with pytest.raises(InvalidArgument):
        remote.vote("gifs", 0, True)
    assert sent == []
