"""
Tests for the point sinks and line protocol rendering.
"""

import threading
from datetime import UTC, datetime, timedelta, timezone
from io import StringIO

import pytest

from vsan_collector.storage.sinks import (
    InMemoryPointSink,
    LineProtocolSink,
    format_line_protocol,
)

TS = datetime(2017, 6, 14, 23, 10, tzinfo=UTC)
TS_NS = 1497481800 * 1_000_000_000


class TestFormatLineProtocol:
    def test_basic_line(self):
        line = format_line_protocol(
            "vsphere_cluster_vsan",
            {"cache-disk_latency": 1.5},
            {"uuid": "d1", "clustername": "cluster-a"},
            TS,
        )
        assert line == (
            f"vsphere_cluster_vsan,clustername=cluster-a,uuid=d1 "
            f"cache-disk_latency=1.5 {TS_NS}"
        )

    def test_escapes_tag_values(self):
        line = format_line_protocol(
            "m", {"f": 1.5}, {"clustername": "cluster a,b=c"}, TS
        )
        assert line.startswith(r"m,clustername=cluster\ a\,b\=c ")

    def test_newline_in_tag_value_stays_on_one_line(self):
        line = format_line_protocol("m", {"f": 1.5}, {"uuid": "abc\nxyz 1.0"}, TS)

        assert "\n" not in line
        assert len(line.splitlines()) == 1
        assert line.endswith(f" f=1.5 {TS_NS}")

    def test_trailing_backslash_does_not_escape_separator(self):
        line = format_line_protocol("m", {"f": 1.5}, {"uuid": "abc\\"}, TS)

        assert "abc\\ f=1.5" not in line
        assert line.endswith(f" f=1.5 {TS_NS}")

    def test_measurement_escapes_only_comma_and_space(self):
        assert format_line_protocol("a=b", {"f": 1.5}, {}, TS) == f"a=b f=1.5 {TS_NS}"
        assert format_line_protocol("a b,c", {"f": 1.5}, {}, TS).startswith(
            r"a\ b\,c "
        )

    def test_empty_tag_values_are_omitted(self):
        line = format_line_protocol("m", {"f": 1.5}, {"vcenter": "", "uuid": "u"}, TS)
        assert line == f"m,uuid=u f=1.5 {TS_NS}"

    def test_fields_sorted_by_key(self):
        line = format_line_protocol("m", {"b": 2.5, "a": 1.5}, {}, TS)
        assert line == f"m a=1.5,b=2.5 {TS_NS}"

    def test_requires_a_field(self):
        with pytest.raises(ValueError):
            format_line_protocol("m", {}, {"uuid": "u"}, TS)

    def test_timestamp_normalized_to_utc(self):
        local = TS.astimezone(timezone(timedelta(hours=2)))
        assert format_line_protocol("m", {"f": 1.5}, {}, local).endswith(str(TS_NS))


class TestInMemoryPointSink:
    def test_one_point_per_field(self):
        sink = InMemoryPointSink()

        sink.add_fields("m", {"a": 1.0, "b": 2.0}, {"uuid": "u"}, TS)

        assert len(sink) == 2
        assert {(p.field, p.value) for p in sink.points} == {("a", 1.0), ("b", 2.0)}
        assert all(p.timestamp == TS for p in sink.points)

    def test_tags_are_copied(self):
        sink = InMemoryPointSink()
        tags = {"uuid": "u"}

        sink.add_fields("m", {"a": 1.0}, tags, TS)
        tags["uuid"] = "changed"

        assert sink.points[0].tags == {"uuid": "u"}

    def test_stored_points_are_read_only(self):
        sink = InMemoryPointSink()
        sink.add_fields("m", {"a": 1.5}, {"uuid": "u"}, TS)
        (point,) = sink.points

        with pytest.raises(TypeError):
            point.tags["uuid"] = "changed"
        assert hash(point) == hash(sink.points[0])

    def test_clear(self):
        sink = InMemoryPointSink()
        sink.add_fields("m", {"a": 1.0}, {}, TS)
        sink.clear()
        assert sink.points == []

    def test_concurrent_writers(self):
        sink = InMemoryPointSink()

        def writer(n):
            for i in range(200):
                sink.add_fields("m", {"f": float(i)}, {"writer": str(n)}, TS)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(sink) == 1600


class TestLineProtocolSink:
    def test_writes_one_line_per_call(self):
        stream = StringIO()
        sink = LineProtocolSink(stream)

        sink.add_fields("m", {"f": 1.5}, {"uuid": "a"}, TS)
        sink.add_fields("m", {"f": 2.5}, {"uuid": "b"}, TS)
        sink.flush()

        lines = stream.getvalue().splitlines()
        assert lines == [f"m,uuid=a f=1.5 {TS_NS}", f"m,uuid=b f=2.5 {TS_NS}"]
        assert sink.lines_written == 2

    def test_concurrent_writers_produce_whole_lines(self):
        stream = StringIO()
        sink = LineProtocolSink(stream)

        def writer(n):
            for i in range(100):
                sink.add_fields("m", {"f": float(i)}, {"writer": str(n)}, TS)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = stream.getvalue().splitlines()
        assert len(lines) == 400
        assert all(line.startswith("m,writer=") for line in lines)
        assert all(line.endswith(str(TS_NS)) for line in lines)
