"""Collection workflow orchestration."""

from .collector import CollectionSummary, VsanCollector, build_vsan_tags

__all__ = ["CollectionSummary", "VsanCollector", "build_vsan_tags"]
