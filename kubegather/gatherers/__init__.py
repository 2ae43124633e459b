"""Registry of log gatherers.

Each gatherer is a coroutine ``(core_v1, config) -> CollectionResult``.
``configure`` loads KUBEGATHER_* settings and applies the log level;
``run_gatherer`` is the entry point for an outer scheduler: a gather
failure is reported in the result and never raised.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from kubegather.config import load_config
from kubegather.errors import GatherError
from kubegather.gatherers.apiserver_operator_logs import (
    GATHERER_ID as APISERVER_OPERATOR_LOGS,
)
from kubegather.gatherers.apiserver_operator_logs import (
    gather_openshift_apiserver_operator_logs,
)
from kubegather.models.config import KubeGatherConfig, LogCollectionConfig
from kubegather.models.logs import CollectionResult
from kubegather.observability.logging import gather_context, get_logger, setup_logging

_logger = get_logger("gatherers")

Gatherer = Callable[[Any, LogCollectionConfig | None], Awaitable[CollectionResult]]

GATHERERS: dict[str, Gatherer] = {
    APISERVER_OPERATOR_LOGS: gather_openshift_apiserver_operator_logs,
}


def configure() -> KubeGatherConfig:
    """Load configuration from the environment and set up logging from it."""
    config = load_config()
    setup_logging(config.log.level)
    return config


async def run_gatherer(
    name: str,
    core_v1: Any,
    config: LogCollectionConfig | None = None,
) -> CollectionResult:
    """Run the gatherer registered as *name*.

    Raises:
        KeyError: no gatherer is registered under *name*.
    """
    gatherer = GATHERERS[name]
    with gather_context(name):
        try:
            result = await gatherer(core_v1, config)
        except Exception as exc:  # noqa: BLE001
            _logger.error("gatherer_crashed", error=str(exc))
            return CollectionResult(errors=[GatherError(f"gatherer {name} failed", cause=exc)])

    if result.failed:
        _logger.warning("gatherer_failed", gatherer=name, errors=[str(e) for e in result.errors])
    elif result.degraded:
        _logger.warning(
            "gatherer_degraded",
            gatherer=name,
            records=len(result.records),
            errors=[str(e) for e in result.errors],
        )
    return result


__all__ = ["APISERVER_OPERATOR_LOGS", "GATHERERS", "Gatherer", "configure", "run_gatherer"]
