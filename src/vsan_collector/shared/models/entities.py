"""Domain models for vSAN performance collection.

Models for:
- TimeWindow: Query window handed to the performance manager
- EntityRecord / MetricSeries: One VsanPerfEntityMetricCSV item as returned
  by the remote endpoint (still CSV-encoded)
- ClusterRef: Cluster identity supplied by the inventory walker
- NormalizedPoint: One metric value at one instant with full tag context
"""

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class TimeWindow:
    """Query window from ``start`` to ``end``; both bounds timezone-aware."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeWindow bounds must be timezone-aware")
        if self.start >= self.end:
            raise ValueError(
                f"TimeWindow start must precede end: {self.start} >= {self.end}"
            )

    @classmethod
    def ending_at(cls, now: datetime, minutes: int = 5) -> "TimeWindow":
        """Window covering the last ``minutes`` minutes up to ``now``."""
        return cls(start=now - timedelta(minutes=minutes), end=now)


class MetricSeries(BaseModel):
    """One metric column: label plus comma-joined values."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Metric label (e.g. iopsRead)")
    values: str = Field(default="", description="Comma-joined decimal strings")


class EntityRecord(BaseModel):
    """Performance data of one concrete entity instance.

    All series share the ``sample_info`` axis. Axis/values length mismatches
    are tolerated here and handled during transformation.
    """

    model_config = ConfigDict(frozen=True)

    entity_ref_id: str = Field(..., description="Composite id <group>:<uuid>")
    sample_info: str = Field(
        default="", description="Comma-joined 'YYYY-MM-DD HH:MM:SS' tokens"
    )
    series: list[MetricSeries] = Field(default_factory=list)


class ClusterRef(BaseModel):
    """Cluster identity from the inventory walker."""

    vcenter: str = Field(..., min_length=1)
    dcname: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, description="Cluster name")
    moid: str = Field(..., min_length=1, description="Managed object id")


@dataclass(frozen=True)
class NormalizedPoint:
    """Output unit of the transformer."""

    measurement: str
    field: str
    # Read-only view, not part of the hash
    tags: Mapping[str, str] = dataclasses.field(hash=False)
    timestamp: datetime
    value: float

    @property
    def fields(self) -> dict[str, float]:
        return {self.field: self.value}
