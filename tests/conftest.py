"""Shared fakes for kubegather tests.

FakeStream and FakeCluster stand in for the kubernetes-asyncio collaborators
so collection can be exercised without a cluster. FakeCluster enforces the
byte cap the way the API server does: it only ever hands out the first
``limit_bytes`` of a container's log.
"""

from __future__ import annotations

import asyncio

import pytest

from kubegather.models.logs import PodRef

# ---------------------------------------------------------------------------
# Streams
# ---------------------------------------------------------------------------


class FakeStream:
    """In-memory LogStream with fault injection and close tracking."""

    def __init__(
        self,
        data: bytes = b"",
        chunk_size: int = 0,
        fail_after: int | None = None,
        delay: float = 0.0,
        close_error: Exception | None = None,
    ) -> None:
        size = chunk_size or max(len(data), 1)
        self._chunks = [data[i : i + size] for i in range(0, len(data), size)]
        self._fail_after = fail_after
        self._delay = delay
        self._close_error = close_error
        self.reads = 0
        self.closed = False

    async def read(self, n: int = -1) -> bytes:
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._fail_after is not None and self.reads >= self._fail_after:
            raise ConnectionResetError("connection reset by peer")
        self.reads += 1
        if not self._chunks:
            return b""
        chunk = self._chunks.pop(0)
        if 0 < n < len(chunk):
            self._chunks.insert(0, chunk[n:])
            chunk = chunk[:n]
        return chunk

    def close(self) -> None:
        self.closed = True
        if self._close_error is not None:
            raise self._close_error


# ---------------------------------------------------------------------------
# Cluster
# ---------------------------------------------------------------------------


class FakeCluster:
    """PodLister and LogSource backed by dictionaries.

    Container logs are given as bytes (served through a FakeStream capped
    at ``limit_bytes``), as a ready-made FakeStream, or as an exception
    raised when the stream is opened.
    """

    def __init__(self) -> None:
        self._pods: dict[str, list[PodRef]] = {}
        self._logs: dict[tuple[str, str, str], bytes | FakeStream | Exception] = {}
        self.list_error: Exception | None = None
        self.list_calls: list[tuple[str, str | None, str | None]] = []
        self.log_requests: list[dict[str, object]] = []
        self.streams: dict[tuple[str, str, str], FakeStream] = {}
        self.stream_opened = asyncio.Event()

    def add_pod(
        self,
        namespace: str,
        name: str,
        containers: dict[str, bytes | FakeStream | Exception],
    ) -> None:
        self._pods.setdefault(namespace, []).append(
            PodRef(namespace=namespace, name=name, containers=tuple(containers))
        )
        for container, logs in containers.items():
            self._logs[(namespace, name, container)] = logs

    async def list_pods(
        self,
        namespace: str,
        label_selector: str | None = None,
        field_selector: str | None = None,
    ) -> list[PodRef]:
        self.list_calls.append((namespace, label_selector, field_selector))
        if self.list_error is not None:
            raise self.list_error
        return list(self._pods.get(namespace, []))

    async def get_logs(
        self,
        namespace: str,
        pod: str,
        container: str,
        since_seconds: int,
        limit_bytes: int,
    ) -> FakeStream:
        key = (namespace, pod, container)
        self.log_requests.append(
            {
                "namespace": namespace,
                "pod": pod,
                "container": container,
                "since_seconds": since_seconds,
                "limit_bytes": limit_bytes,
            }
        )
        logs = self._logs[key]
        if isinstance(logs, Exception):
            raise logs
        stream = logs if isinstance(logs, FakeStream) else FakeStream(logs[:limit_bytes], chunk_size=7)
        self.streams[key] = stream
        self.stream_opened.set()
        return stream


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def stream_factory() -> type[FakeStream]:
    return FakeStream
