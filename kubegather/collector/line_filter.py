"""Line-level matching of container log output."""

from __future__ import annotations

import re
from dataclasses import dataclass

from kubegather.collector.streamer import LogStream
from kubegather.errors import PatternCompileError, ScanError
from kubegather.models.logs import MessageFilter

_CHUNK_SIZE = 8192


class LineMatcher:
    """Decides whether a single log line is interesting.

    Substring mode lower-cases both sides. Regex mode compiles every pattern
    up front, so an invalid pattern fails here rather than per line.
    """

    def __init__(self, message_filter: MessageFilter) -> None:
        self.is_regex = message_filter.is_regex
        self._needles: tuple[str, ...] = ()
        self._regexes: tuple[re.Pattern[str], ...] = ()
        if self.is_regex:
            self._regexes = tuple(_compile(p) for p in message_filter.patterns)
        else:
            self._needles = tuple(p.lower() for p in message_filter.patterns)

    def matches(self, line: str) -> bool:
        if self.is_regex:
            return any(rx.search(line) for rx in self._regexes)
        lowered = line.lower()
        return any(needle in lowered for needle in self._needles)


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise PatternCompileError(pattern, exc) from exc


@dataclass(frozen=True)
class ScanOutcome:
    """Matched lines in stream order plus the raw byte count read."""

    lines: tuple[str, ...]
    bytes_read: int


def _decode(raw: bytes) -> str:
    line = raw.decode("utf-8", errors="replace")
    if line.endswith("\r"):
        line = line[:-1]
    return line


async def scan(stream: LogStream, matcher: LineMatcher | MessageFilter) -> ScanOutcome:
    """Read *stream* to its end and keep every line *matcher* accepts.

    Each matching line is kept once, unmodified, in stream order. A final
    line without a trailing newline is still considered.

    Raises:
        ScanError: reading the stream failed. Lines matched so far are dropped.
    """
    if isinstance(matcher, MessageFilter):
        matcher = LineMatcher(matcher)
    matched: list[str] = []
    pending = b""
    bytes_read = 0

    while True:
        try:
            chunk = await stream.read(_CHUNK_SIZE)
        except Exception as exc:
            raise ScanError("reading log stream failed", cause=exc) from exc
        if not chunk:
            break
        bytes_read += len(chunk)
        pending += chunk
        *complete, pending = pending.split(b"\n")
        for raw in complete:
            line = _decode(raw)
            if matcher.matches(line):
                matched.append(line)

    if pending:
        line = _decode(pending)
        if matcher.matches(line):
            matched.append(line)

    return ScanOutcome(lines=tuple(matched), bytes_read=bytes_read)
