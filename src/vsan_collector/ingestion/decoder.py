"""
VsanResponseDecoder issues one windowed performance query per entity group
and gathers the returned entity records.
"""

from __future__ import annotations

from collections.abc import Iterable

from vsan_collector.infrastructure.observability import get_ingestion_logger
from vsan_collector.ingestion.ports.data_ports import VsanPerformancePort
from vsan_collector.shared.models.entities import EntityRecord, TimeWindow
from vsan_collector.shared.models.enums import VSAN_PERF_ENTITY_GROUPS, EntityGroup


class CollectionAbortedError(Exception):
    """A performance query failed; the whole collection cycle is abandoned.

    A failing query is taken as a sign of an unusable session, so the decoder
    does not move on to the remaining groups.
    """

    def __init__(self, group: EntityGroup, cause: BaseException):
        super().__init__(f"vSAN query for {group.value} failed: {cause}")
        self.group = group
        self.cause = cause


class VsanResponseDecoder:
    """Fetches all entity records for one cluster and window."""

    def __init__(
        self,
        port: VsanPerformancePort,
        cluster_moid: str,
        vcenter: str | None = None,
    ) -> None:
        self.port = port
        self.cluster_moid = cluster_moid
        self.log = get_ingestion_logger(
            "vsan-decoder", vcenter=vcenter, cluster=cluster_moid
        )

    async def fetch_records(
        self,
        window: TimeWindow,
        groups: Iterable[EntityGroup] = VSAN_PERF_ENTITY_GROUPS,
    ) -> list[EntityRecord]:
        """
        Query every group in order and concatenate the records.

        Returns:
            Records grouped in query order, server order within a group

        Raises:
            CollectionAbortedError: On the first failing query; nothing
                collected so far is returned and later groups are not queried
        """
        self.log.debug(
            "vsan_query_window",
            start=window.start.isoformat(),
            end=window.end.isoformat(),
        )

        records: list[EntityRecord] = []
        for group in groups:
            try:
                group_records = await self.port.query_perf(
                    group.wildcard(), window.start, window.end, self.cluster_moid
                )
            except Exception as e:
                self.log.error(
                    "vsan_query_failed",
                    entity_group=group.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise CollectionAbortedError(group, e) from e

            for record in group_records:
                self.log.debug(
                    "vsan_entity_fetched",
                    entity_ref_id=record.entity_ref_id,
                    series=len(record.series),
                )

            self.log.info(
                "vsan_group_fetched",
                entity_group=group.value,
                records=len(group_records),
                series=sum(len(r.series) for r in group_records),
            )
            records.extend(group_records)

        return records
