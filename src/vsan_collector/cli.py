"""
Command line entry point: one vSAN collection cycle for every configured
cluster, written to stdout as InfluxDB line protocol.

Usage:
    vsan-collect --config-dir ./config
    vsan-collect --log-level DEBUG --text-logs
"""

import argparse
import asyncio
import os
import sys

from pydantic import ValidationError

from vsan_collector.config import ConfigError, ConfigState, get_config
from vsan_collector.infrastructure.observability import (
    get_pipeline_logger,
    setup_logging,
)
from vsan_collector.ingestion.adapters.vsan_plugin import VsanPerformanceClient
from vsan_collector.ingestion.config.value_objects import (
    HttpClientConfig,
    VsanEndpointConfig,
)
from vsan_collector.ingestion.connectors.aiohttp_client import AiohttpClient
from vsan_collector.ingestion.decoder import CollectionAbortedError
from vsan_collector.orchestration.collector import VsanCollector
from vsan_collector.shared.models.entities import ClusterRef
from vsan_collector.storage.sinks import LineProtocolSink
from vsan_collector.transformation.ports import IPointSink

EXIT_OK = 0
EXIT_COLLECTION_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vsan-collect",
        description="Collect vSAN performance metrics as InfluxDB line protocol",
    )
    parser.add_argument(
        "--config-dir",
        default=None,
        help="Directory holding vcenter.yaml / collection.yaml / logging.yaml",
    )
    parser.add_argument("--log-level", default=None, help="Override logging level")
    parser.add_argument(
        "--text-logs",
        action="store_true",
        help="Human-readable logs instead of JSON",
    )
    return parser


async def _collect_cluster(
    collector: VsanCollector, cluster: ClusterRef, deadline: float
) -> bool:
    log = get_pipeline_logger(cluster=cluster.name)
    try:
        await asyncio.wait_for(collector.collect(cluster), timeout=deadline)
    except CollectionAbortedError:
        # Already logged by the collector with its cause
        return False
    except TimeoutError:
        log.error("vsan_collection_timeout", deadline_seconds=deadline)
        return False
    return True


async def run_collection(config: ConfigState, sink: IPointSink) -> int:
    """Collect all configured clusters concurrently; return the exit status."""
    log = get_pipeline_logger(component="vsan-cli")
    clusters = config.collection.clusters
    if not clusters:
        log.warning("vsan_no_clusters_configured")
        return EXIT_OK

    http_config = HttpClientConfig(
        timeout=config.vcenter.timeout, verify_ssl=config.vcenter.verify_ssl
    )
    async with AiohttpClient(http_config) as http_client:
        client = VsanPerformanceClient(
            VsanEndpointConfig.from_vcenter(config.vcenter), http_client
        )
        collector = VsanCollector(
            client,
            sink,
            window_minutes=config.collection.window_minutes,
            entity_groups=config.collection.entity_groups,
        )
        outcomes = await asyncio.gather(
            *(
                _collect_cluster(
                    collector, cluster, config.collection.deadline_seconds
                )
                for cluster in clusters
            )
        )

    failed = [c.name for c, ok in zip(clusters, outcomes) if not ok]
    if failed:
        log.error("vsan_run_failed", failed_clusters=failed)
        return EXIT_COLLECTION_FAILED
    log.info("vsan_run_completed", clusters=len(clusters))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # Bootstrap logging so config loading never writes to stdout
    setup_logging(
        level=args.log_level or os.getenv("LOG_LEVEL", "INFO"),
        json_logs=not args.text_logs,
    )

    try:
        config = get_config(args.config_dir)
    except (ConfigError, ValidationError) as e:
        get_pipeline_logger(component="vsan-cli").error(
            "config_invalid", error=str(e)
        )
        return EXIT_CONFIG_ERROR

    setup_logging(
        level=args.log_level or config.logging.level,
        json_logs=config.logging.json_logs and not args.text_logs,
    )

    sink = LineProtocolSink(sys.stdout)
    try:
        return asyncio.run(run_collection(config, sink))
    finally:
        sink.flush()


if __name__ == "__main__":
    sys.exit(main())
