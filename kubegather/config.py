"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubegather.models.config import KubeGatherConfig, LogCollectionConfig, LogConfig
from kubegather.models.logs import DEFAULT_LIMIT_BYTES, DEFAULT_SINCE_SECONDS


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBEGATHER_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float) -> float:
    val = float(_env(key, str(default)))
    if val < 0:
        raise ValueError(f"KUBEGATHER_{key} must be >= 0, got {val}")
    return val


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> KubeGatherConfig:
    """Load configuration from KUBEGATHER_* environment variables."""
    return KubeGatherConfig(
        collection=LogCollectionConfig(
            since_seconds=_env_int("LOGS_SINCE_SECONDS", DEFAULT_SINCE_SECONDS, min_val=0),
            limit_bytes=_env_int("LOGS_LIMIT_BYTES", DEFAULT_LIMIT_BYTES, min_val=1),
            max_concurrency=_env_int("LOGS_MAX_CONCURRENCY", 4, min_val=1, max_val=32),
            timeout_seconds=_env_float("LOGS_TIMEOUT_SECONDS", 0.0),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
