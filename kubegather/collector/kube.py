"""kubernetes-asyncio adapters for pod listing and log streaming.

Both adapters wrap a ``CoreV1Api`` owned by the caller. They only read
cluster state.
"""

from __future__ import annotations

from typing import Any

from kubegather.models.logs import PodRef


class KubePodLister:
    """Lists pods through ``CoreV1Api.list_namespaced_pod``."""

    def __init__(self, core_v1: Any) -> None:
        self._core_v1 = core_v1

    async def list_pods(
        self,
        namespace: str,
        label_selector: str | None = None,
        field_selector: str | None = None,
    ) -> list[PodRef]:
        kwargs: dict[str, str] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector
        if field_selector:
            kwargs["field_selector"] = field_selector
        pod_list = await self._core_v1.list_namespaced_pod(namespace, **kwargs)
        return [_pod_ref(pod, namespace) for pod in pod_list.items or []]


def _pod_ref(pod: Any, namespace: str) -> PodRef:
    metadata = pod.metadata
    containers = pod.spec.containers if pod.spec is not None else None
    return PodRef(
        namespace=metadata.namespace or namespace,
        name=metadata.name,
        containers=tuple(c.name for c in containers or []),
    )


class ResponseLogStream:
    """LogStream over an unread aiohttp response (``_preload_content=False``)."""

    def __init__(self, response: Any) -> None:
        self._response = response

    async def read(self, n: int = -1) -> bytes:
        data: bytes = await self._response.content.read(n)
        return data

    def close(self) -> object:
        # aiohttp releases the connection synchronously on recent versions and
        # returns an awaitable on older ones; release_stream handles both.
        return self._response.release()


class KubeLogSource:
    """Streams container logs through ``CoreV1Api.read_namespaced_pod_log``."""

    def __init__(self, core_v1: Any) -> None:
        self._core_v1 = core_v1

    async def get_logs(
        self,
        namespace: str,
        pod: str,
        container: str,
        since_seconds: int,
        limit_bytes: int,
    ) -> ResponseLogStream:
        kwargs: dict[str, Any] = {"container": container, "limit_bytes": limit_bytes}
        # since_seconds=0 means "no window" and the API rejects it; omit it.
        if since_seconds > 0:
            kwargs["since_seconds"] = since_seconds
        response = await self._core_v1.read_namespaced_pod_log(
            pod,
            namespace,
            _preload_content=False,
            **kwargs,
        )
        return ResponseLogStream(response)
