from __future__ import annotations

import json
from pathlib import Path

import pytest

from gifboard.core.errors import RegistryError, Unavailable
from gifboard.core.registry import RegistryStore


def test_reopened_store_sees_committed_state(tmp_path: Path) -> None:
    store = RegistryStore.open(tmp_path)
    assert store.durable
    store.initialize("gifs", "alice")
    store.append("gifs", "https://example.com/a.gif", "alice")
    store.append("gifs", "https://example.com/b.gif", "bob")
    store.downvote("gifs", 1)
    store.downvote("gifs", 1)

    reopened = RegistryStore.open(tmp_path)
    snap = reopened.read("gifs")
    assert snap.owner == "alice"
    assert snap.total_count == 2
    assert [(e.link, e.submitter, e.score) for e in snap.entries] == [
        ("https://example.com/a.gif", "alice", 0),
        ("https://example.com/b.gif", "bob", -2),
    ]
    assert snap.revision == store.read("gifs").revision


def test_reopened_store_still_rejects_second_initialize(tmp_path: Path) -> None:
    RegistryStore.open(tmp_path).initialize("gifs", "alice")

    from gifboard.core.errors import AlreadyInitialized

    with pytest.raises(AlreadyInitialized):
        RegistryStore.open(tmp_path).initialize("gifs", "bob")


def test_record_file_layout(tmp_path: Path) -> None:
    store = RegistryStore.open(tmp_path)
    store.initialize("my gifs", "alice")
    store.append("my gifs", "https://example.com/a.gif", "alice")

    files = list(tmp_path.glob("*.json"))
    assert [f.name for f in files] == ["my%20gifs.json"]
    data = json.loads(files[0].read_text())
    assert data["key"] == "my gifs"
    assert data["totalCount"] == 1
    assert data["entries"] == [{"link": "https://example.com/a.gif", "submitter": "alice", "score": 0}]


def test_failed_write_leaves_committed_state_unchanged(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = RegistryStore.open(tmp_path)
    store.initialize("gifs", "alice")
    store.append("gifs", "https://example.com/a.gif", "alice")
    before = store.read("gifs")
    rev = store.global_revision()

    def _fail(path, content):  # noqa: ANN001
        raise OSError("disk full")

    monkeypatch.setattr("gifboard.core.persistence._safe_write_text", _fail)

    with pytest.raises(Unavailable):
        store.upvote("gifs", 0)
    with pytest.raises(Unavailable):
        store.append("gifs", "https://example.com/b.gif", "bob")

    assert store.read("gifs") == before
    assert store.global_revision() == rev


def test_corrupt_record_is_a_data_error_not_missing(tmp_path: Path) -> None:
    (tmp_path / "gifs.json").write_text("{not json")

    with pytest.raises(RegistryError) as info:
        RegistryStore.open(tmp_path)
    assert info.value.kind == "RegistryError"


def test_record_with_mismatched_count_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "gifs.json").write_text(
        json.dumps(
            {
                "version": 1,
                "key": "gifs",
                "owner": "alice",
                "totalCount": 3,
                "entries": [{"link": "https://example.com/a.gif", "submitter": "alice", "score": 0}],
            }
        )
    )

    with pytest.raises(RegistryError):
        RegistryStore.open(tmp_path)
