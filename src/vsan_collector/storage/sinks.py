"""
Point sinks for normalized vSAN measurements.

- InMemoryPointSink: accumulates points (tests, embedding in a larger pipeline)
- LineProtocolSink: writes InfluxDB line protocol to a text stream

Both are safe for concurrent writers; one collection invocation per cluster
may feed the same sink.
"""

import threading
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType
from typing import TextIO

from influxdb_client_3 import Point, WritePrecision

from vsan_collector.common.utils.date_utils import ensure_utc, to_unix_ns
from vsan_collector.infrastructure.observability import get_storage_logger
from vsan_collector.shared.models.entities import NormalizedPoint


def to_point(
    measurement: str,
    fields: Mapping[str, float],
    tags: Mapping[str, str],
    timestamp: datetime,
) -> Point:
    """Build an InfluxDB Point with nanosecond precision."""
    point = Point(measurement)
    for tag_key, tag_value in tags.items():
        point = point.tag(tag_key, str(tag_value))
    for field_key, field_value in sorted(fields.items()):
        point = point.field(field_key, float(field_value))
    return point.time(to_unix_ns(timestamp), WritePrecision.NS)


def format_line_protocol(
    measurement: str,
    fields: Mapping[str, float],
    tags: Mapping[str, str],
    timestamp: datetime,
) -> str:
    """
    Render one point as an InfluxDB line protocol line.

    Format: measurement,tag1=value1,tag2=value2 field1=value1 timestamp_ns

    Tags are sorted by key; tags with empty values are omitted. Escaping is
    that of the influxdb client Point.
    """
    if not fields:
        raise ValueError("Line protocol requires at least one field")
    return to_point(measurement, fields, tags, timestamp).to_line_protocol()


class InMemoryPointSink:
    """Thread-safe accumulator of NormalizedPoints."""

    def __init__(self) -> None:
        self._points: list[NormalizedPoint] = []
        self._lock = threading.Lock()

    def add_fields(
        self,
        measurement: str,
        fields: Mapping[str, float],
        tags: Mapping[str, str],
        timestamp: datetime,
    ) -> None:
        points = [
            NormalizedPoint(
                measurement=measurement,
                field=name,
                tags=MappingProxyType(dict(tags)),
                timestamp=ensure_utc(timestamp),
                value=value,
            )
            for name, value in fields.items()
        ]
        with self._lock:
            self._points.extend(points)

    @property
    def points(self) -> list[NormalizedPoint]:
        with self._lock:
            return list(self._points)

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)

    def clear(self) -> None:
        with self._lock:
            self._points.clear()


class LineProtocolSink:
    """Writes each point as one line of InfluxDB line protocol."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self.lines_written = 0
        self._lock = threading.Lock()
        self.log = get_storage_logger("line-protocol-sink")

    def add_fields(
        self,
        measurement: str,
        fields: Mapping[str, float],
        tags: Mapping[str, str],
        timestamp: datetime,
    ) -> None:
        line = format_line_protocol(measurement, fields, tags, timestamp)
        with self._lock:
            self.stream.write(line + "\n")
            self.lines_written += 1

    def flush(self) -> None:
        with self._lock:
            self.stream.flush()
        self.log.debug("line_protocol_flushed", lines=self.lines_written)
