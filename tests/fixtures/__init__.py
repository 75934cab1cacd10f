"""Test helpers shared across test packages."""

from vsan_collector.shared.models.entities import EntityRecord, MetricSeries

SAMPLE_INFO = "2017-06-14 23:10:00,2017-06-14 23:15:00,2017-06-14 23:20:00"


class FakePerformancePort:
    """In-memory VsanPerformancePort.

    ``responses`` maps entity group value -> records, or -> an exception to
    raise for that group. Every call is recorded in ``calls``.
    """

    def __init__(self, responses: dict):
        self.responses = responses
        self.calls: list[tuple] = []

    async def query_perf(self, entity_ref_id, start, end, cluster_moid):
        self.calls.append((entity_ref_id, start, end, cluster_moid))
        group = entity_ref_id.split(":", 1)[0]
        response = self.responses.get(group, [])
        if isinstance(response, BaseException):
            raise response
        return list(response)


def make_record(
    entity_ref_id: str = "cluster-domclient:5270dc4d-3594-cc26-b33d-f6be33ddb353",
    sample_info: str = SAMPLE_INFO,
    **series: str,
) -> EntityRecord:
    """Build an EntityRecord; keyword arguments are label=values columns."""
    return EntityRecord(
        entity_ref_id=entity_ref_id,
        sample_info=sample_info,
        series=[MetricSeries(label=k, values=v) for k, v in series.items()],
    )
