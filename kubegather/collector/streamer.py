"""Bounded container log streams.

A stream is a scoped resource: ``open_stream`` hands back an async context
manager and the stream is released when the ``async with`` block exits,
whether it finished, raised, or was cancelled.
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol

from kubegather.errors import CloseError, StreamOpenError
from kubegather.models.logs import ContainerRef, PodRef
from kubegather.observability.logging import get_logger

_logger = get_logger("collector.streamer")


class LogStream(Protocol):
    """Byte stream of one container's log output."""

    async def read(self, n: int = -1) -> bytes:
        """Return up to *n* bytes; ``b""`` at end of stream."""
        ...

    def close(self) -> object:
        """Release the underlying connection. May return an awaitable."""
        ...


class LogSource(Protocol):
    """Opens container log streams against the API server."""

    async def get_logs(
        self,
        namespace: str,
        pod: str,
        container: str,
        since_seconds: int,
        limit_bytes: int,
    ) -> LogStream: ...


async def release_stream(stream: LogStream, container: ContainerRef) -> None:
    """Close *stream*; a failure is logged as a warning and never raised."""
    try:
        result = stream.close()
        if inspect.isawaitable(result):
            await result
    except Exception as exc:
        err = CloseError("error closing log stream", container=container, cause=exc)
        _logger.warning("log_stream_close_failed", container=str(container), error=str(err))


@asynccontextmanager
async def open_stream(
    source: LogSource,
    pod: PodRef,
    container: str,
    since_seconds: int,
    limit_bytes: int,
) -> AsyncIterator[LogStream]:
    """Open a log stream for one container, bounded in time and size.

    The server enforces ``limit_bytes``; the caller must not assume it
    receives less than that.

    Raises:
        StreamOpenError: the server rejected the request or it failed in transit.
    """
    ref = ContainerRef(pod.namespace, pod.name, container)
    try:
        stream = await source.get_logs(
            pod.namespace,
            pod.name,
            container,
            since_seconds=since_seconds,
            limit_bytes=limit_bytes,
        )
    except StreamOpenError:
        raise
    except Exception as exc:
        raise StreamOpenError("opening log stream failed", container=ref, cause=exc) from exc

    _logger.debug(
        "log_stream_opened",
        container=str(ref),
        since_seconds=since_seconds,
        limit_bytes=limit_bytes,
    )
    try:
        yield stream
    finally:
        await release_stream(stream, ref)
