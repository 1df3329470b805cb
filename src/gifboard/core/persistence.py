"""Durable storage for registry records.

One JSON document per registry key, written with temp+rename so a reader never
observes a half-written file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterator
from urllib.parse import quote, unquote

from .errors import RegistryError, Unavailable
from .models import Entry, RegistryRecord

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
_SUFFIX = ".json"


def record_to_dict(record: RegistryRecord) -> dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "key": record.key,
        "owner": record.owner,
        "totalCount": int(record.total_count),
        "revision": int(record.revision),
        "createdAt": float(record.created_at),
        "updatedAt": float(record.updated_at),
        "entries": [
            {"link": e.link, "submitter": e.submitter, "score": int(e.score)}
            for e in record.entries
        ],
    }


def record_from_dict(data: dict[str, Any]) -> RegistryRecord:
    version = int(data.get("version", 1))
    if version > FORMAT_VERSION:
        raise ValueError(f"record format version {version} is newer than supported ({FORMAT_VERSION})")

    entries = tuple(
        Entry(link=str(e["link"]), submitter=str(e["submitter"]), score=int(e["score"]))
        for e in data.get("entries", [])
    )
    record = RegistryRecord(
        key=str(data["key"]),
        owner=str(data["owner"]),
        entries=entries,
        total_count=int(data.get("totalCount", len(entries))),
        revision=int(data.get("revision", 1)),
        created_at=float(data.get("createdAt", 0.0)),
        updated_at=float(data.get("updatedAt", 0.0)),
    )
    try:
        record.check_invariants()
    except AssertionError as ex:
        raise ValueError(str(ex)) from ex
    return record


def _safe_write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, str(path))
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


class JsonFileBackend:
    """Stores each registry as `<root>/<quoted key>.json`."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        return self.root / (quote(key, safe="") + _SUFFIX)

    def save(self, record: RegistryRecord) -> None:
        path = self._path_for(record.key)
        content = json.dumps(record_to_dict(record), indent=2) + "\n"
        try:
            _safe_write_text(path, content)
        except OSError as ex:
            raise Unavailable(f"Failed to persist registry '{record.key}': {ex}") from ex
        logger.debug("Persisted registry %r (revision %d) to %s", record.key, record.revision, path)

    def load_all(self) -> Iterator[RegistryRecord]:
        for path in sorted(self.root.glob("*" + _SUFFIX)):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                if not isinstance(data, dict):
                    raise ValueError("record root must be a JSON object")
                record = record_from_dict(data)
            except (json.JSONDecodeError, UnicodeDecodeError, KeyError, TypeError, ValueError) as ex:
                raise RegistryError(f"Corrupt registry file {path}: {ex}") from ex
            expected = unquote(path.name[: -len(_SUFFIX)])
            if record.key != expected:
                raise RegistryError(f"Registry file {path} holds key {record.key!r}, expected {expected!r}")
            yield record
