"""Error taxonomy for log collection.

Fatal to a whole collection:
    PatternCompileError -- a regex pattern does not compile (raised before any I/O).
    SelectionError      -- listing pods failed.

Scoped to a single (pod, container) pair; collection continues:
    StreamOpenError        -- the log stream could not be opened.
    ScanError              -- reading the stream failed mid-way.
    CollectionTimeoutError -- the collection deadline passed before the pair finished.

Logged only:
    CloseError -- releasing a stream failed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kubegather.models.logs import ContainerRef


class GatherError(Exception):
    """Base class for every error reported by a gather."""

    kind = "gather"

    def __init__(
        self,
        message: str,
        *,
        container: ContainerRef | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.container = container
        self.cause = cause

    def __str__(self) -> str:
        base = super().__str__()
        if self.container is not None:
            base = f"{self.container}: {base}"
        if self.cause is not None:
            base = f"{base}: {self.cause}"
        return base


class PatternCompileError(GatherError):
    """A regular-expression message pattern is invalid."""

    kind = "pattern_compile"

    def __init__(self, pattern: str, cause: BaseException) -> None:
        super().__init__(f"invalid message pattern {pattern!r}", cause=cause)
        self.pattern = pattern


class SelectionError(GatherError):
    """Listing pods failed."""

    kind = "selection"


class StreamOpenError(GatherError):
    """The server refused or failed to open a container log stream."""

    kind = "stream_open"


class ScanError(GatherError):
    """Reading a container log stream failed before it ended."""

    kind = "scan"


class CloseError(GatherError):
    """Releasing a container log stream failed."""

    kind = "close"


class CollectionTimeoutError(GatherError):
    """The collection deadline passed before this container was finished."""

    kind = "timeout"
