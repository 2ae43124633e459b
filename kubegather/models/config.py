"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

from kubegather.models.logs import DEFAULT_LIMIT_BYTES, DEFAULT_SINCE_SECONDS


@dataclass
class LogCollectionConfig:
    """Bounds applied to every container log request."""

    since_seconds: int = DEFAULT_SINCE_SECONDS
    limit_bytes: int = DEFAULT_LIMIT_BYTES
    max_concurrency: int = 4
    timeout_seconds: float = 0.0  # 0 disables the deadline


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class KubeGatherConfig:
    """Top-level kubegather configuration."""

    collection: LogCollectionConfig = field(default_factory=LogCollectionConfig)
    log: LogConfig = field(default_factory=LogConfig)
