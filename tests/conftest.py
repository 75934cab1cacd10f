"""
Shared fixtures for vsan_collector tests.
"""

from datetime import UTC, datetime

import pytest

from vsan_collector.shared.models.entities import ClusterRef


@pytest.fixture
def base_tags():
    return {
        "vcenter": "vc01.example",
        "dcname": "dc-east",
        "clustername": "cluster-a",
        "moid": "domain-c7",
        "source": "cluster-a",
    }


@pytest.fixture
def cluster():
    return ClusterRef(
        vcenter="vc01.example", dcname="dc-east", name="cluster-a", moid="domain-c7"
    )


@pytest.fixture
def fixed_now():
    return datetime(2017, 6, 14, 23, 25, 0, tzinfo=UTC)
