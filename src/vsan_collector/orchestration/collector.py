"""
vSAN Collection Workflow
========================

One collection cycle for one cluster: compute the window, fetch every entity
group through the decoder, transform the records and hand each point to the
sink.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from vsan_collector.common.utils.date_utils import utc_now
from vsan_collector.infrastructure.observability import get_pipeline_logger
from vsan_collector.ingestion.decoder import CollectionAbortedError, VsanResponseDecoder
from vsan_collector.ingestion.ports.data_ports import VsanPerformancePort
from vsan_collector.shared.models.entities import ClusterRef, TimeWindow
from vsan_collector.shared.models.enums import (
    VSAN_PERF_ENTITY_GROUPS,
    DiagnosticScope,
    EntityGroup,
)
from vsan_collector.transformation.normalizers import transform_record
from vsan_collector.transformation.ports import IPointSink


@dataclass
class CollectionSummary:
    """Result of one collection cycle."""

    cluster: str
    window: TimeWindow
    records: int = 0
    points: int = 0
    skipped_records: int = 0
    dropped_samples: int = 0
    dropped_values: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "cluster": self.cluster,
            "start": self.window.start.isoformat(),
            "end": self.window.end.isoformat(),
            "records": self.records,
            "points": self.points,
            "skipped_records": self.skipped_records,
            "dropped_samples": self.dropped_samples,
            "dropped_values": self.dropped_values,
        }


def build_vsan_tags(cluster: ClusterRef) -> dict[str, str]:
    """Tag set shared by every point collected for ``cluster``."""
    return {
        "vcenter": cluster.vcenter,
        "dcname": cluster.dcname,
        "clustername": cluster.name,
        "moid": cluster.moid,
        "source": cluster.name,
    }


class VsanCollector:
    """Runs collection cycles against one performance port.

    Instances hold no per-cycle state, so ``collect`` may run concurrently
    for different clusters.
    """

    def __init__(
        self,
        port: VsanPerformancePort,
        sink: IPointSink,
        clock: Callable[[], datetime] = utc_now,
        window_minutes: int = 5,
        entity_groups: Iterable[EntityGroup] = VSAN_PERF_ENTITY_GROUPS,
    ) -> None:
        self.port = port
        self.sink = sink
        self.clock = clock
        self.window_minutes = window_minutes
        self.entity_groups = tuple(entity_groups)

    async def collect(self, cluster: ClusterRef) -> CollectionSummary:
        """
        Collect and emit all vSAN metrics of ``cluster`` for the last window.

        Raises:
            CollectionAbortedError: If any performance query fails. No point
                is emitted in that case.
        """
        log = get_pipeline_logger(cluster=cluster.name, vcenter=cluster.vcenter)
        log.info("vsan_collection_started", moid=cluster.moid)

        tags = build_vsan_tags(cluster)
        log.debug("vsan_tags_computed", tags=tags)

        window = TimeWindow.ending_at(self.clock(), minutes=self.window_minutes)
        summary = CollectionSummary(cluster=cluster.name, window=window)

        decoder = VsanResponseDecoder(
            self.port, cluster_moid=cluster.moid, vcenter=cluster.vcenter
        )
        try:
            records = await decoder.fetch_records(window, self.entity_groups)
        except CollectionAbortedError as e:
            log.error(
                "vsan_collection_aborted",
                entity_group=e.group.value,
                error=str(e.cause),
            )
            raise

        for record in records:
            result = transform_record(record, tags)
            summary.records += 1

            for diagnostic in result.diagnostics:
                if diagnostic.scope is DiagnosticScope.RECORD:
                    log.warning(
                        "vsan_record_skipped",
                        entity_ref_id=diagnostic.entity_ref_id,
                        reason=diagnostic.message,
                    )
                elif diagnostic.scope is DiagnosticScope.SAMPLE:
                    log.warning(
                        "vsan_timestamp_dropped",
                        entity_ref_id=diagnostic.entity_ref_id,
                        index=diagnostic.index,
                        token=diagnostic.token,
                    )
                else:
                    log.debug(
                        "vsan_series_misaligned",
                        entity_ref_id=diagnostic.entity_ref_id,
                        reason=diagnostic.message,
                    )

            if result.skipped:
                summary.skipped_records += 1
            summary.dropped_samples += result.dropped_samples
            summary.dropped_values += result.dropped_values

            for point in result.points:
                self.sink.add_fields(
                    point.measurement, point.fields, dict(point.tags), point.timestamp
                )
                summary.points += 1

        log.info("vsan_collection_completed", **summary.to_dict())
        return summary
