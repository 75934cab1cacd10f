"""
Structured logging infrastructure for vsan-collector.
Provides consistent, machine-readable logs across all components.

Log Structure:
    {
        "app": "vsan-collector",       # Application identifier
        "layer": "ingestion",          # Architectural layer
        "component": "vsan-decoder",   # Specific component
        "module": "...",               # Python module (optional)
        "vcenter": "vc01.example",     # Domain context
        "event": "vsan_group_fetched", # What happened
        ...
    }

Architectural Layers:
    - infrastructure: Cross-cutting (config, HTTP transport)
    - ingestion: Remote querying (SOAP client, response decoder)
    - pipeline: Per-cluster collection workflow, CLI
    - storage: Point sinks
"""

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict

Layer = Literal["infrastructure", "ingestion", "pipeline", "storage"]


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application-wide context to every log entry."""
    event_dict["app"] = "vsan-collector"
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Add severity level for cloud logging compatibility.
    Maps Python log levels to standard severity levels.
    """
    level = event_dict.get("level")
    if level:
        severity_map = {
            "debug": "DEBUG",
            "info": "INFO",
            "warning": "WARNING",
            "error": "ERROR",
            "critical": "CRITICAL",
        }
        event_dict["severity"] = severity_map.get(level, "INFO")
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON. If False, use human-readable format (dev mode).
        include_timestamp: Whether to include ISO timestamps in logs

    Usage:
        >>> from vsan_collector.infrastructure.observability import setup_logging
        >>> setup_logging(level="DEBUG", json_logs=True)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Logs go to stderr; stdout carries line protocol from the CLI
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
        force=True,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    name: str | None = None,
    layer: Layer | None = None,
    component: str | None = None,
    **initial_context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance with architectural context.

    Args:
        name: Logger name (typically __name__ of the calling module)
        layer: Architectural layer (infrastructure, ingestion, pipeline, etc.)
        component: Specific component within the layer
        **initial_context: Additional context key-value pairs to bind to logger

    Returns:
        Configured structlog logger with bound context
    """
    logger = structlog.get_logger(name)

    context = {}
    if layer:
        context["layer"] = layer
    if component:
        context["component"] = component
    if name:
        context["module"] = name
    context.update(initial_context)

    if context:
        logger = logger.bind(**context)

    return logger


# ============================================================================
# Layer-Specific Logger Factories
# ============================================================================


def get_infrastructure_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for infrastructure layer (config, HTTP transport).

    Usage:
        >>> log = get_infrastructure_logger("config-loader", config_dir="/etc/vsan")
        >>> log.info("config_loaded")
    """
    return get_logger(
        "infrastructure",
        layer="infrastructure",
        component=component,
        **context,
    )


def get_ingestion_logger(
    component: str,
    vcenter: str | None = None,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for ingestion layer (remote querying).

    Args:
        component: Component name (e.g., "vsan-client", "vsan-decoder")
        vcenter: vCenter host - optional
        **context: Additional context (cluster, entity_group, etc.)

    Usage:
        >>> log = get_ingestion_logger("vsan-decoder", vcenter="vc01")
        >>> log.info("vsan_group_fetched", entity_group="cache-disk", records=4)
    """
    ctx = {}
    if vcenter:
        ctx["vcenter"] = vcenter
    ctx.update(context)

    return get_logger(
        "ingestion",
        layer="ingestion",
        component=component,
        **ctx,
    )


def get_pipeline_logger(
    component: str = "vsan-collector",
    cluster: str | None = None,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for pipeline layer (collection workflow, CLI).

    Usage:
        >>> log = get_pipeline_logger(cluster="cluster-a")
        >>> log.info("vsan_collection_started")
    """
    ctx = {}
    if cluster:
        ctx["cluster"] = cluster
    ctx.update(context)

    return get_logger(
        "pipeline",
        layer="pipeline",
        component=component,
        **ctx,
    )


def get_storage_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """Get a logger for storage layer (point sinks)."""
    return get_logger(
        "storage",
        layer="storage",
        component=component,
        **context,
    )
