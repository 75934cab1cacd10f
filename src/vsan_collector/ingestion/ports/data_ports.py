"""
Data port protocols for the remote performance endpoint.

Ports define the raw data contract the decoder depends on, so the SOAP
client can be swapped for a fake in tests.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from vsan_collector.shared.models.entities import EntityRecord


class VsanPerformancePort(Protocol):
    """Raw vSAN performance query port."""

    async def query_perf(
        self,
        entity_ref_id: str,
        start: datetime,
        end: datetime,
        cluster_moid: str,
    ) -> list[EntityRecord]:
        """
        Query performance series for every entity matching ``entity_ref_id``
        (e.g. ``"cache-disk:*"``) on the given cluster over [start, end].

        Returns:
            One EntityRecord per concrete entity instance, in server order.

        Raises:
            VsanAPIError: If the remote call fails
        """
