"""
Transformation layer: turns CSV-encoded vSAN entity records into normalized
measurement points.

Pure functions only; recoverable failures come back as diagnostics on the
result instead of being logged or raised, so callers decide how to report
them.
"""

from .normalizers import (
    CompositeIdError,
    Diagnostic,
    NormalizationError,
    RecordResult,
    parse_composite_id,
    parse_sample_timestamp,
    parse_sample_timestamps,
    parse_value,
    transform_record,
    transform_records,
)
from .ports import IPointSink

__all__ = [
    "CompositeIdError",
    "Diagnostic",
    "IPointSink",
    "NormalizationError",
    "RecordResult",
    "parse_composite_id",
    "parse_sample_timestamp",
    "parse_sample_timestamps",
    "parse_value",
    "transform_record",
    "transform_records",
]
