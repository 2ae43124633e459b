"""clusterconfig/openshift_apiserver_operator_logs gatherer.

Collects lines from the ``openshift-apiserver-operator`` containers that
point at API server overload:

- "the server has received too many requests and has asked us"
- "because serving request timed out and response had been started"

Location in archive: ``config/pod/{namespace}/logs/{pod}/{container}.log``
"""

from __future__ import annotations

from typing import Any

from kubegather.collector.kube import KubeLogSource, KubePodLister
from kubegather.collector.naming import archive_log_path
from kubegather.collector.orchestrator import collect_logs_from_containers
from kubegather.models.config import LogCollectionConfig
from kubegather.models.logs import CollectionResult, ContainerFilter, MessageFilter

GATHERER_ID = "clusterconfig/openshift_apiserver_operator_logs"

_NAMESPACE = "openshift-apiserver-operator"

MESSAGES_TO_SEARCH = (
    "the server has received too many requests and has asked us",
    "because serving request timed out and response had been started",
)


def apiserver_operator_container_filter() -> ContainerFilter:
    return ContainerFilter(namespace=_NAMESPACE, label_selector="app=openshift-apiserver-operator")


def apiserver_operator_messages_filter(config: LogCollectionConfig) -> MessageFilter:
    return MessageFilter(
        patterns=MESSAGES_TO_SEARCH,
        is_regex=False,
        since_seconds=config.since_seconds,
        limit_bytes=config.limit_bytes,
    )


async def gather_openshift_apiserver_operator_logs(
    core_v1: Any,
    config: LogCollectionConfig | None = None,
) -> CollectionResult:
    """Gather filtered apiserver-operator logs using *core_v1* (a CoreV1Api)."""
    config = config or LogCollectionConfig()
    return await collect_logs_from_containers(
        KubePodLister(core_v1),
        KubeLogSource(core_v1),
        apiserver_operator_container_filter(),
        apiserver_operator_messages_filter(config),
        namer=archive_log_path,
        max_concurrency=config.max_concurrency,
        timeout=config.timeout_seconds or None,
        gatherer=GATHERER_ID,
    )
