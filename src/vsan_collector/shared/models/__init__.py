"""Shared domain models."""

from vsan_collector.shared.models.entities import (
    ClusterRef,
    EntityRecord,
    MetricSeries,
    NormalizedPoint,
    TimeWindow,
)
from vsan_collector.shared.models.enums import (
    VSAN_MEASUREMENT_NAME,
    VSAN_PERF_ENTITY_GROUPS,
    DiagnosticScope,
    EntityGroup,
)

__all__ = [
    # Enums
    "EntityGroup",
    "DiagnosticScope",
    "VSAN_PERF_ENTITY_GROUPS",
    "VSAN_MEASUREMENT_NAME",
    # Models
    "ClusterRef",
    "EntityRecord",
    "MetricSeries",
    "NormalizedPoint",
    "TimeWindow",
]
