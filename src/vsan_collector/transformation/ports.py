"""Port/Protocol definitions for the transformation output.

The sink receives every normalized point. Multiple collection invocations may
write to one sink concurrently, so implementations must tolerate concurrent
callers.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Protocol


class IPointSink(Protocol):
    """Receiver of normalized points (metrics pipeline accumulator)."""

    def add_fields(
        self,
        measurement: str,
        fields: Mapping[str, float],
        tags: Mapping[str, str],
        timestamp: datetime,
    ) -> None:
        """Accept one point.

        Args:
            measurement: Measurement name (e.g. vsphere_cluster_vsan)
            fields: One-entry mapping field name -> value
            tags: Merged tag set for the point
            timestamp: Sample instant (UTC)
        """
        ...
