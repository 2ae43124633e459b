"""Collector package for kubegather.

Collects filtered container log excerpts into named records for an
external archiver.

Submodules
----------
selector     -- resolve_pods: pods and containers in scope for a gather.
streamer     -- open_stream: bounded, scoped container log streams.
line_filter  -- LineMatcher and scan: substring / regex line matching.
naming       -- artifact_name: deterministic record names.
orchestrator -- LogCollector: drives a gather with per-container failure isolation.
kube         -- kubernetes-asyncio adapters for listing pods and streaming logs.
"""

from kubegather.collector.kube import KubeLogSource, KubePodLister
from kubegather.collector.line_filter import LineMatcher, scan
from kubegather.collector.naming import archive_log_path, artifact_name
from kubegather.collector.orchestrator import LogCollector, collect_logs_from_containers
from kubegather.collector.selector import resolve_pods
from kubegather.collector.streamer import open_stream

__all__ = [
    "KubeLogSource",
    "KubePodLister",
    "LineMatcher",
    "LogCollector",
    "archive_log_path",
    "artifact_name",
    "collect_logs_from_containers",
    "open_stream",
    "resolve_pods",
    "scan",
]
