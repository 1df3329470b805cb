from __future__ import annotations

from dataclasses import dataclass, field

from .errors import InvalidArgument


@dataclass(frozen=True)
class Entry:
    """One submitted link.

    `submitter` is fixed at creation; only vote operations produce a new `score`.
    """

    link: str
    submitter: str
    score: int = 0


@dataclass(frozen=True, kw_only=True)
class RegistryRecord:
    """Stored state of one registry.

    Records are replaced wholesale on every mutation, never edited in place.
    """

    key: str
    owner: str
    entries: tuple[Entry, ...] = ()
    total_count: int = 0
    revision: int = 1
    created_at: float = 0.0
    updated_at: float = 0.0

    def check_invariants(self) -> None:
        if self.total_count != len(self.entries):
            raise AssertionError(
                f"Registry '{self.key}' total_count={self.total_count} does not match {len(self.entries)} entries"
            )


@dataclass(frozen=True)
class RegistryHandle:
    key: str
    owner: str
    created_at: float


@dataclass(frozen=True, kw_only=True)
class RegistrySnapshot:
    """Immutable point-in-time view returned by a read."""

    key: str
    owner: str
    entries: tuple[Entry, ...] = field(default_factory=tuple)
    total_count: int = 0
    revision: int = 0
    created_at: float = 0.0

    @classmethod
    def from_record(cls, record: RegistryRecord) -> "RegistrySnapshot":
        return cls(
            key=record.key,
            owner=record.owner,
            entries=record.entries,
            total_count=record.total_count,
            revision=record.revision,
            created_at=record.created_at,
        )


def validate_key(key: str) -> str:
    """Return the stripped registry key or raise `InvalidArgument`.

    Keys double as URL path segments and file names, so `/` and the dot
    segments are rejected.
    """

    k = str(key).strip() if key is not None else ""
    if not k:
        raise InvalidArgument("Registry key cannot be empty")
    if "/" in k:
        raise InvalidArgument(f"Registry key cannot contain '/': {k!r}")
    if k in {".", ".."}:
        raise InvalidArgument(f"Registry key cannot be a dot segment: {k!r}")
    return k


def validate_index(index: int) -> int:
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidArgument(f"index must be an integer, got {index!r}")
    return index
