from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from pathlib import Path

from ..errors import AlreadyInitialized, IndexOutOfRange, InvalidArgument, NotFound
from ..models import Entry, RegistryHandle, RegistryRecord, RegistrySnapshot, validate_index, validate_key
from ..persistence import JsonFileBackend

logger = logging.getLogger(__name__)

UPVOTE = 1
DOWNVOTE = -1


class RegistryStore:
    """Home for one registry record per key.

    Every operation runs under a single lock, and records are immutable values
    swapped in only after they have been persisted. Readers therefore see either
    the state before a mutation or the state after it, never anything between.
    """

    def __init__(self, backend: JsonFileBackend | None = None) -> None:
        self._lock = threading.RLock()
        self._backend = backend
        self._records: dict[str, RegistryRecord] = {}
        self._global_revision = 0
        if backend is not None:
            for record in backend.load_all():
                self._records[record.key] = record
            logger.info("Loaded %d registry record(s) from %s", len(self._records), backend.root)

    @classmethod
    def open(cls, state_dir: str | Path | None) -> "RegistryStore":
        if state_dir is None or str(state_dir).strip() == "":
            return cls()
        return cls(JsonFileBackend(state_dir))

    @property
    def durable(self) -> bool:
        return self._backend is not None

    @staticmethod
    def _validate_identity(identity: str, *, name: str) -> str:
        ident = str(identity).strip() if identity is not None else ""
        if not ident:
            raise InvalidArgument(f"{name} cannot be empty")
        return ident

    def _require_record_locked(self, key: str) -> RegistryRecord:
        record = self._records.get(key)
        if record is None:
            raise NotFound(f"Registry '{key}' has not been initialized")
        return record

    def _commit_locked(self, record: RegistryRecord) -> None:
        record.check_invariants()
        if self._backend is not None:
            self._backend.save(record)
        self._records[record.key] = record
        self._global_revision += 1

    def global_revision(self) -> int:
        with self._lock:
            return self._global_revision

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._records)

    def exists(self, key: str) -> bool:
        with self._lock:
            return str(key).strip() in self._records

    def initialize(self, key: str, initiator: str) -> RegistryHandle:
        k = validate_key(key)
        owner = self._validate_identity(initiator, name="Initiator identity")
        with self._lock:
            if k in self._records:
                raise AlreadyInitialized(f"Registry '{k}' is already initialized")
            now = time.time()
            record = RegistryRecord(key=k, owner=owner, created_at=now, updated_at=now)
            self._commit_locked(record)
            logger.debug("Initialized registry %r (owner %s)", k, owner)
            return RegistryHandle(key=k, owner=owner, created_at=now)

    def append(self, key: str, link: str, submitter: str) -> int:
        k = validate_key(key)
        if link is None or not str(link).strip():
            raise InvalidArgument("Link cannot be empty")
        who = self._validate_identity(submitter, name="Submitter identity")
        with self._lock:
            latest = self._require_record_locked(k)
            entry = Entry(link=str(link), submitter=who, score=0)
            record = replace(
                latest,
                entries=latest.entries + (entry,),
                total_count=latest.total_count + 1,
                revision=latest.revision + 1,
                updated_at=time.time(),
            )
            self._commit_locked(record)
            index = record.total_count - 1
            logger.debug("Appended entry %d to registry %r", index, k)
            return index

    def vote(self, key: str, index: int, delta: int) -> int:
        k = validate_key(key)
        if isinstance(delta, bool) or delta not in (UPVOTE, DOWNVOTE):
            raise InvalidArgument(f"delta must be +1 or -1, got {delta!r}")
        i = validate_index(index)
        with self._lock:
            latest = self._require_record_locked(k)
            if i < 0 or i >= latest.total_count:
                raise IndexOutOfRange(f"Index {i} is out of range for registry '{k}' with {latest.total_count} entries")
            target = latest.entries[i]
            updated = replace(target, score=target.score + int(delta))
            entries = latest.entries[:i] + (updated,) + latest.entries[i + 1 :]
            record = replace(latest, entries=entries, revision=latest.revision + 1, updated_at=time.time())
            self._commit_locked(record)
            return updated.score

    def upvote(self, key: str, index: int) -> int:
        return self.vote(key, index, UPVOTE)

    def downvote(self, key: str, index: int) -> int:
        return self.vote(key, index, DOWNVOTE)

    def read(self, key: str) -> RegistrySnapshot:
        k = validate_key(key)
        with self._lock:
            return RegistrySnapshot.from_record(self._require_record_locked(k))


REGISTRY = RegistryStore()
