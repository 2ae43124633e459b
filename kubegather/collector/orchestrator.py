"""Container log collection: select, stream, filter, name.

LogCollector drives one gather across every selected (pod, container) pair.
A failing pair is reported as an error next to the records that did
succeed; only an invalid pattern or a failed pod listing fails the whole
gather.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Collection

from kubegather.collector.line_filter import LineMatcher, scan
from kubegather.collector.naming import artifact_name
from kubegather.collector.selector import PodLister, resolve_pods
from kubegather.collector.streamer import LogSource, open_stream
from kubegather.errors import (
    CollectionTimeoutError,
    GatherError,
    PatternCompileError,
    SelectionError,
)
from kubegather.models.logs import (
    CollectionResult,
    ContainerFilter,
    ContainerRef,
    MatchResult,
    MessageFilter,
    PodRef,
    Record,
)
from kubegather.observability.logging import get_logger
from kubegather.observability.metrics import (
    collection_duration_seconds,
    log_bytes_read_total,
    log_errors_total,
    log_records_total,
    log_truncated_total,
)

_logger = get_logger("collector.orchestrator")

ArtifactNamer = Callable[[str, str, str], str]

_DEFAULT_MAX_CONCURRENCY = 4


class LogCollector:
    """Collects filtered container logs into named records.

    Args:
        lister:          Pod listing collaborator.
        source:          Log streaming collaborator.
        namer:           Maps (namespace, pod, container) to an artifact name.
        max_concurrency: Streams open at once. 1 processes pairs sequentially.
        gatherer:        Label used in logs and metrics.
    """

    def __init__(
        self,
        lister: PodLister,
        source: LogSource,
        namer: ArtifactNamer = artifact_name,
        max_concurrency: int = _DEFAULT_MAX_CONCURRENCY,
        gatherer: str = "logs",
    ) -> None:
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self._lister = lister
        self._source = source
        self._namer = namer
        self._max_concurrency = max_concurrency
        self._gatherer = gatherer
        self._log = _logger.bind(gatherer=gatherer)

    async def collect(
        self,
        container_filter: ContainerFilter,
        message_filter: MessageFilter,
        timeout: float | None = None,
    ) -> CollectionResult:
        """Run one gather.

        Records and errors come back in pod listing order, then container
        declaration order. With *timeout* set, pairs still running at the
        deadline are cancelled and reported as CollectionTimeoutError.
        Cancelling the calling task cancels every pair; streams are still
        released before CancelledError propagates.
        """
        started = time.monotonic()
        try:
            result = await self._collect(container_filter, message_filter, timeout)
        finally:
            collection_duration_seconds.labels(gatherer=self._gatherer).observe(time.monotonic() - started)

        log_records_total.labels(gatherer=self._gatherer).inc(len(result.records))
        for err in result.errors:
            log_errors_total.labels(gatherer=self._gatherer, kind=err.kind).inc()
        self._log.info(
            "log_collection_finished",
            namespace=container_filter.namespace,
            records=len(result.records),
            errors=len(result.errors),
            duration_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return result

    async def _collect(
        self,
        container_filter: ContainerFilter,
        message_filter: MessageFilter,
        timeout: float | None,
    ) -> CollectionResult:
        # Patterns are compiled before any network call.
        try:
            matcher = LineMatcher(message_filter)
        except PatternCompileError as exc:
            self._log.error("message_pattern_invalid", pattern=exc.pattern, error=str(exc.cause))
            return CollectionResult(errors=[exc])

        try:
            pods = await resolve_pods(self._lister, container_filter)
        except SelectionError as exc:
            return CollectionResult(errors=[exc])

        pairs = [(pod, container) for pod in pods for container in pod.containers]
        if not pairs:
            return CollectionResult()

        semaphore = asyncio.Semaphore(self._max_concurrency)
        tasks = [
            asyncio.create_task(
                self._collect_one(semaphore, pod, container, matcher, message_filter),
                name=f"logs:{pod.namespace}/{pod.name}/{container}",
            )
            for pod, container in pairs
        ]

        try:
            _, pending = await asyncio.wait(tasks, timeout=timeout)
        except asyncio.CancelledError:
            await _cancel_and_wait(tasks)
            raise
        if pending:
            await _cancel_and_wait(pending)

        result = CollectionResult()
        for (pod, container), task in zip(pairs, tasks, strict=True):
            if task.cancelled():
                ref = ContainerRef(pod.namespace, pod.name, container)
                self._log.warning("container_logs_timed_out", container=str(ref), timeout=timeout)
                result.errors.append(
                    CollectionTimeoutError(f"log collection did not finish within {timeout}s", container=ref)
                )
                continue
            outcome = task.result()
            if isinstance(outcome, Record):
                result.records.append(outcome)
            else:
                result.errors.append(outcome)
        return result

    async def _collect_one(
        self,
        semaphore: asyncio.Semaphore,
        pod: PodRef,
        container: str,
        matcher: LineMatcher,
        message_filter: MessageFilter,
    ) -> Record | GatherError:
        """Collect one container. Returns the record, or the error for this pair."""
        ref = ContainerRef(pod.namespace, pod.name, container)
        async with semaphore:
            try:
                return await self._filter_container(ref, pod, matcher, message_filter)
            except GatherError as exc:
                if exc.container is None:
                    exc.container = ref
                self._log.warning("container_logs_failed", container=str(ref), kind=exc.kind, error=str(exc))
                return exc
            except Exception as exc:  # noqa: BLE001
                self._log.error("container_logs_unexpected_error", container=str(ref), error=str(exc))
                return GatherError("unexpected failure collecting logs", container=ref, cause=exc)

    async def _filter_container(
        self,
        ref: ContainerRef,
        pod: PodRef,
        matcher: LineMatcher,
        message_filter: MessageFilter,
    ) -> Record:
        async with open_stream(
            self._source,
            pod,
            ref.container,
            since_seconds=message_filter.since_seconds,
            limit_bytes=message_filter.limit_bytes,
        ) as stream:
            outcome = await scan(stream, matcher)

        match = MatchResult(
            container=ref,
            matched_lines=outcome.lines,
            truncated=outcome.bytes_read >= message_filter.limit_bytes,
            bytes_read=outcome.bytes_read,
        )
        log_bytes_read_total.labels(gatherer=self._gatherer).inc(match.bytes_read)
        if match.truncated:
            log_truncated_total.labels(gatherer=self._gatherer).inc()
        self._log.debug(
            "container_logs_collected",
            container=str(ref),
            matched=len(match.matched_lines),
            bytes_read=match.bytes_read,
            truncated=match.truncated,
        )
        return Record.from_match(match, self._namer(ref.namespace, ref.pod, ref.container))


async def _cancel_and_wait(tasks: Collection[asyncio.Task[Record | GatherError]]) -> None:
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def collect_logs_from_containers(
    lister: PodLister,
    source: LogSource,
    container_filter: ContainerFilter,
    message_filter: MessageFilter,
    namer: ArtifactNamer = artifact_name,
    *,
    max_concurrency: int = _DEFAULT_MAX_CONCURRENCY,
    timeout: float | None = None,
    gatherer: str = "logs",
) -> CollectionResult:
    """Shared helper behind the log gatherers; see LogCollector.collect."""
    collector = LogCollector(
        lister,
        source,
        namer=namer,
        max_concurrency=max_concurrency,
        gatherer=gatherer,
    )
    return await collector.collect(container_filter, message_filter, timeout=timeout)
