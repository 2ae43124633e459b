"""Core data structures for kubegather."""

from kubegather.models.config import KubeGatherConfig, LogCollectionConfig, LogConfig
from kubegather.models.logs import (
    CollectionResult,
    ContainerFilter,
    ContainerRef,
    MatchResult,
    MessageFilter,
    PodRef,
    Record,
    container_name_contains,
    container_name_regex,
)

__all__ = [
    "CollectionResult",
    "ContainerFilter",
    "ContainerRef",
    "KubeGatherConfig",
    "LogCollectionConfig",
    "LogConfig",
    "MatchResult",
    "MessageFilter",
    "PodRef",
    "Record",
    "container_name_contains",
    "container_name_regex",
]
