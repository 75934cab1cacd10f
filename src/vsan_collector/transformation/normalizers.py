"""Record transformer for vSAN performance data.

A VsanPerfEntityMetricCSV record carries one shared sample axis and any number
of metric columns, all CSV-encoded:

    entityRefId: "cluster-domclient:5270dc4d-3594-cc26-b33d-f6be33ddb353"
    sampleInfo:  "2017-06-14 23:10:00,2017-06-14 23:15:00,2017-06-14 23:20:00"
    value:       [("iopsRead", "1,1,1"), ("iopsWrite", "4,2,0"), ...]

Every (metric, sample index) pair with a valid timestamp and value becomes one
NormalizedPoint. Failures are recovered at the narrowest scope:

- malformed composite id: the record is skipped
- malformed timestamp: that sample index is skipped for every series
- malformed value: that single point is skipped
"""

import math
import re
import struct
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType

from vsan_collector.shared.models.entities import EntityRecord, NormalizedPoint
from vsan_collector.shared.models.enums import VSAN_MEASUREMENT_NAME, DiagnosticScope

_TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%SZ", "%Y-%m-%dT%H:%M:%S.%fZ")
# strptime alone accepts unpadded fields such as "2017-6-4T1:2:3Z"
_RFC3339_UTC = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]{1,6})?Z"
)


class NormalizationError(Exception):
    """Raised when normalization of raw data fails."""

    pass


class CompositeIdError(NormalizationError):
    """Entity ref id is not of the form <group>:<uuid>."""

    pass


@dataclass(frozen=True)
class Diagnostic:
    """One recoverable failure found while transforming a record."""

    scope: DiagnosticScope
    entity_ref_id: str
    message: str
    index: int | None = None
    token: str | None = None


@dataclass
class RecordResult:
    """Outcome of transforming one EntityRecord."""

    entity_ref_id: str
    points: list[NormalizedPoint] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    skipped: bool = False
    dropped_values: int = 0

    @property
    def dropped_samples(self) -> int:
        return sum(1 for d in self.diagnostics if d.scope is DiagnosticScope.SAMPLE)


def _split_csv(text: str) -> list[str]:
    # An empty column is an empty sequence, not one empty token
    return text.split(",") if text else []


def parse_composite_id(entity_ref_id: str) -> tuple[str, str]:
    """
    Split ``"<entityKind>:<uuid>"`` on the first separator.

    Returns:
        (entity_kind, uuid)

    Raises:
        CompositeIdError: If the separator is missing or either part is empty
    """
    kind, sep, uuid = entity_ref_id.partition(":")
    if not sep:
        raise CompositeIdError(f"Missing ':' in entity ref id {entity_ref_id!r}")
    if not kind or not uuid:
        raise CompositeIdError(f"Empty component in entity ref id {entity_ref_id!r}")
    return kind, uuid


def parse_sample_timestamp(token: str) -> datetime:
    """
    Parse one ``"YYYY-MM-DD HH:MM:SS"`` token as a UTC instant.

    The date and time-of-day parts are rejoined as ``<date>T<time>Z`` and
    read as an RFC 3339 UTC timestamp.

    Raises:
        ValueError: If the token has no space separator or does not parse
    """
    date_part, sep, time_part = token.strip().partition(" ")
    if not sep or not date_part or not time_part:
        raise ValueError(f"Timestamp {token!r} lacks a date/time separator")

    combined = f"{date_part}T{time_part}Z"
    if not _RFC3339_UTC.fullmatch(combined):
        raise ValueError(
            f"Timestamp {token!r} is not zero-padded YYYY-MM-DD HH:MM:SS"
        )

    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(combined, fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
    raise ValueError(f"Unparsable timestamp {token!r}")


def parse_sample_timestamps(sample_info: str) -> list[datetime | None]:
    """
    Parse the shared sample axis.

    Unparsable tokens are kept as None so later indices stay aligned with
    the value columns.
    """
    axis: list[datetime | None] = []
    for token in _split_csv(sample_info):
        try:
            axis.append(parse_sample_timestamp(token))
        except ValueError:
            axis.append(None)
    return axis


def parse_value(token: str) -> float | None:
    """
    Coerce a value token with single-precision tolerance.

    The decimal is rounded to the nearest binary32 value. Returns None for
    tokens that are not plain decimals, overflow binary32, or are not finite.
    """
    if not token or token != token.strip() or "_" in token:
        return None
    try:
        value = float(token)
        value = struct.unpack("<f", struct.pack("<f", value))[0]
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(value):
        return None
    return value


def transform_record(
    record: EntityRecord,
    base_tags: Mapping[str, str],
    measurement: str = VSAN_MEASUREMENT_NAME,
) -> RecordResult:
    """
    Transform one entity record into normalized points.

    ``base_tags`` is never modified; the record's points carry a new mapping
    extended with the entity ``uuid``.

    Args:
        record: CSV-encoded entity record
        base_tags: Cluster identity tags shared by the whole invocation
        measurement: Measurement name for every point

    Returns:
        RecordResult with points in (series, sample index) order
    """
    result = RecordResult(entity_ref_id=record.entity_ref_id)

    try:
        entity_kind, uuid = parse_composite_id(record.entity_ref_id)
    except CompositeIdError as e:
        result.skipped = True
        result.diagnostics.append(
            Diagnostic(
                scope=DiagnosticScope.RECORD,
                entity_ref_id=record.entity_ref_id,
                message=str(e),
            )
        )
        return result

    tags = MappingProxyType({**base_tags, "uuid": uuid})

    tokens = _split_csv(record.sample_info)
    axis = parse_sample_timestamps(record.sample_info)
    for index, (token, ts) in enumerate(zip(tokens, axis)):
        if ts is None:
            result.diagnostics.append(
                Diagnostic(
                    scope=DiagnosticScope.SAMPLE,
                    entity_ref_id=record.entity_ref_id,
                    message="Failed to parse a timestamp",
                    index=index,
                    token=token,
                )
            )

    for series in record.series:
        field_name = f"{entity_kind}_{series.label}"
        values = _split_csv(series.values)

        if len(values) != len(axis):
            result.diagnostics.append(
                Diagnostic(
                    scope=DiagnosticScope.SERIES,
                    entity_ref_id=record.entity_ref_id,
                    message=(
                        f"Series {series.label!r} has {len(values)} values "
                        f"for {len(axis)} samples"
                    ),
                )
            )

        for index in range(min(len(axis), len(values))):
            ts = axis[index]
            if ts is None:
                continue
            value = parse_value(values[index])
            if value is None:
                result.dropped_values += 1
                continue
            result.points.append(
                NormalizedPoint(
                    measurement=measurement,
                    field=field_name,
                    tags=tags,
                    timestamp=ts,
                    value=value,
                )
            )

    return result


def transform_records(
    records: Iterable[EntityRecord],
    base_tags: Mapping[str, str],
    measurement: str = VSAN_MEASUREMENT_NAME,
) -> list[RecordResult]:
    """Transform records independently, preserving their order."""
    return [transform_record(r, base_tags, measurement) for r in records]
