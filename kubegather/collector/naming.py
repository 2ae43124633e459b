"""Deterministic artifact names for container log records."""

from __future__ import annotations

from urllib.parse import quote


def _segment(value: str) -> str:
    # Escaping "%" and "/" keeps the join injective; valid Kubernetes names
    # contain neither, so they pass through unchanged.
    return quote(value, safe="", errors="surrogatepass")


def artifact_name(namespace: str, pod: str, container: str, prefix: str = "") -> str:
    """Return the artifact path for one container's filtered logs.

    >>> artifact_name("ns1", "p1", "c1")
    'ns1/p1/c1'
    >>> artifact_name("ns1", "p1", "c1", prefix="logs")
    'logs/ns1/p1/c1'
    """
    name = "/".join(_segment(part) for part in (namespace, pod, container))
    prefix = prefix.strip("/")
    return f"{prefix}/{name}" if prefix else name


def archive_log_path(namespace: str, pod: str, container: str) -> str:
    """Archive layout used by the cluster config gatherers.

    >>> archive_log_path("openshift-apiserver-operator", "op-6ddb", "operator")
    'config/pod/openshift-apiserver-operator/logs/op-6ddb/operator.log'
    """
    return f"config/pod/{_segment(namespace)}/logs/{_segment(pod)}/{_segment(container)}.log"
