"""Log collection data structures."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from kubegather.errors import GatherError

# One day of history, 64 KiB per container.
DEFAULT_SINCE_SECONDS = 86400
DEFAULT_LIMIT_BYTES = 64 * 1024

ContainerNamePredicate = Callable[[str], bool]


@dataclass(frozen=True)
class ContainerFilter:
    """Which pods and containers a gather looks at.

    Constructed once per gather invocation; never mutated afterwards.
    """

    namespace: str
    label_selector: str | None = None
    field_selector: str | None = None
    container_name_predicate: ContainerNamePredicate | None = None

    def __post_init__(self) -> None:
        if not self.namespace:
            raise ValueError("ContainerFilter.namespace must not be empty")

    def wants_container(self, name: str) -> bool:
        if self.container_name_predicate is None:
            return True
        return bool(self.container_name_predicate(name))


def container_name_contains(substring: str) -> ContainerNamePredicate:
    """Predicate selecting containers whose name contains *substring*."""

    def _predicate(name: str) -> bool:
        return substring in name

    return _predicate


def container_name_regex(pattern: str) -> ContainerNamePredicate:
    """Predicate selecting containers whose name matches *pattern* (re.search)."""
    compiled = re.compile(pattern)

    def _predicate(name: str) -> bool:
        return compiled.search(name) is not None

    return _predicate


@dataclass(frozen=True)
class MessageFilter:
    """Which log lines are interesting, and how much log to request.

    ``patterns`` are OR-ed together. In substring mode the comparison is
    case-insensitive; in regex mode each pattern decides its own case
    sensitivity (e.g. with an inline ``(?i)`` flag).
    """

    patterns: Sequence[str]
    is_regex: bool = False
    since_seconds: int = DEFAULT_SINCE_SECONDS
    limit_bytes: int = DEFAULT_LIMIT_BYTES

    def __post_init__(self) -> None:
        if isinstance(self.patterns, str):
            raise ValueError("MessageFilter.patterns must be a sequence of strings, not a str")
        # Normalise to a tuple so the filter stays hashable and immutable.
        object.__setattr__(self, "patterns", tuple(self.patterns))
        if not self.patterns:
            raise ValueError("MessageFilter.patterns must not be empty")
        if any(not p for p in self.patterns):
            raise ValueError("MessageFilter.patterns must not contain empty strings")
        if self.since_seconds < 0:
            raise ValueError(f"since_seconds must be >= 0, got {self.since_seconds}")
        if self.limit_bytes <= 0:
            raise ValueError(f"limit_bytes must be > 0, got {self.limit_bytes}")


@dataclass(frozen=True)
class PodRef:
    """Snapshot of a pod taken from a single list call."""

    namespace: str
    name: str
    containers: tuple[str, ...] = ()


@dataclass(frozen=True, order=True)
class ContainerRef:
    """Identity of one container within a pod."""

    namespace: str
    pod: str
    container: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.pod}/{self.container}"


@dataclass(frozen=True)
class MatchResult:
    """Lines matched in one container's log stream."""

    container: ContainerRef
    matched_lines: tuple[str, ...] = ()
    # Set once bytes_read reaches the cap. Conservative: a log exactly
    # limit_bytes long that ended on its own is also flagged.
    truncated: bool = False
    bytes_read: int = 0


@dataclass(frozen=True)
class Record:
    """A named artifact handed to the archiver."""

    name: str
    content: bytes = b""

    @classmethod
    def from_match(cls, result: MatchResult, name: str) -> Record:
        """Build a record holding every matched line, each newline-terminated."""
        text = "".join(f"{line}\n" for line in result.matched_lines)
        return cls(name=name, content=text.encode("utf-8"))


@dataclass
class CollectionResult:
    """Outcome of one gather: whatever succeeded plus the per-container errors."""

    records: list[Record] = field(default_factory=list)
    errors: list[GatherError] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """Nothing was produced and at least one error was reported."""
        return not self.records and bool(self.errors)

    @property
    def degraded(self) -> bool:
        """Some records were produced but at least one container failed."""
        return bool(self.records) and bool(self.errors)
