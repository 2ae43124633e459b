"""Pod and container selection."""

from __future__ import annotations

from typing import Protocol

from kubegather.errors import SelectionError
from kubegather.models.logs import ContainerFilter, PodRef
from kubegather.observability.logging import get_logger

_logger = get_logger("collector.selector")


class PodLister(Protocol):
    """Lists pods in a namespace. Retries, if any, are the lister's business."""

    async def list_pods(
        self,
        namespace: str,
        label_selector: str | None = None,
        field_selector: str | None = None,
    ) -> list[PodRef]: ...


async def resolve_pods(lister: PodLister, container_filter: ContainerFilter) -> list[PodRef]:
    """List the pods in scope and narrow each pod's containers.

    A single list call; no retry. Pods left with no selected container are
    kept so the caller sees them in debug logs, but produce no work.

    Raises:
        SelectionError: the listing call failed.
    """
    try:
        pods = await lister.list_pods(
            container_filter.namespace,
            label_selector=container_filter.label_selector,
            field_selector=container_filter.field_selector,
        )
    except SelectionError:
        raise
    except Exception as exc:
        _logger.error(
            "pod_listing_failed",
            namespace=container_filter.namespace,
            label_selector=container_filter.label_selector,
            error=str(exc),
        )
        raise SelectionError(
            f"listing pods in namespace {container_filter.namespace!r} failed",
            cause=exc,
        ) from exc

    resolved: list[PodRef] = []
    for pod in pods:
        containers = tuple(c for c in pod.containers if container_filter.wants_container(c))
        resolved.append(PodRef(namespace=pod.namespace, name=pod.name, containers=containers))

    _logger.debug(
        "pods_resolved",
        namespace=container_filter.namespace,
        pods=len(resolved),
        containers=sum(len(p.containers) for p in resolved),
    )
    return resolved
