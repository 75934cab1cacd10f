"""
Shared enumerations for the vSAN collector.

Entity groups are the classes of monitored vSAN objects that share one metric
schema. The performance manager is queried once per group with a wildcard
entity filter.
"""

import enum


class EntityGroup(str, enum.Enum):
    """Class of monitored vSAN entities (the left part of a composite id)."""

    CLUSTER_DOMCLIENT = "cluster-domclient"
    HOST_DOMCLIENT = "host-domclient"
    CACHE_DISK = "cache-disk"
    VSAN_VNIC_NET = "vsan-vnic-net"
    VSAN_PNIC_NET = "vsan-pnic-net"

    def wildcard(self) -> str:
        """Query filter matching every instance of the group."""
        return f"{self.value}:*"


class DiagnosticScope(str, enum.Enum):
    """Granularity of a recoverable transformation failure."""

    RECORD = "record"
    SAMPLE = "sample"
    SERIES = "series"


# Queried in this order on every collection cycle.
VSAN_PERF_ENTITY_GROUPS: tuple[EntityGroup, ...] = (
    EntityGroup.CLUSTER_DOMCLIENT,
    EntityGroup.HOST_DOMCLIENT,
    EntityGroup.CACHE_DISK,
    EntityGroup.VSAN_VNIC_NET,
    EntityGroup.VSAN_PNIC_NET,
)

VSAN_MEASUREMENT_NAME = "vsphere_cluster_vsan"
