from __future__ import annotations


class RegistryError(Exception):
    """Base class for every failure surfaced by a registry operation.

    `kind` is a stable identifier that survives the HTTP boundary, so callers on
    either side can tell "not yet initialized" from "bad input" from "try again".
    """

    kind: str = "RegistryError"
    status_code: int = 500

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.kind)
        self.detail = detail or self.kind


class AlreadyInitialized(RegistryError):
    kind = "AlreadyInitialized"
    status_code = 409


class NotFound(RegistryError):
    kind = "NotFound"
    status_code = 404


class IndexOutOfRange(NotFound):
    kind = "IndexOutOfRange"
    status_code = 404


class InvalidArgument(RegistryError, ValueError):
    kind = "InvalidArgument"
    status_code = 400


class Unavailable(RegistryError):
    kind = "Unavailable"
    status_code = 503

    def __init__(self, detail: str = "", *, timed_out: bool = False) -> None:
        super().__init__(detail)
        self.timed_out = bool(timed_out)


ERROR_KINDS: dict[str, type[RegistryError]] = {
    cls.kind: cls
    for cls in (RegistryError, AlreadyInitialized, NotFound, IndexOutOfRange, InvalidArgument, Unavailable)
}


def error_from_kind(kind: str, detail: str = "") -> RegistryError:
    cls = ERROR_KINDS.get(str(kind), RegistryError)
    return cls(detail)
